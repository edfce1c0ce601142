#!/usr/bin/env python3
"""Command-line entry point."""

import argparse
import os
import pathlib
import sys
from typing import List

from trimatch.config import load_config
from trimatch.config.loader import resolve_config_path
from trimatch.config.operations import parse_value, set_nested_value
from trimatch.version import __version__


def main(
    config: str,
    source: List[str],
    source_list: str,
    output: str,
    n: int,
    nskip: int,
    config_overrides: List[str],
):
    """Main driver for cross-view track matching.

    Performs these basic functions:
    - Update the configuration with the command-line arguments
    - Run the appropriate piece of code

    Parameters
    ----------
    config : str
        Path to the configuration file
    source : List[str]
        List of paths to the input files
    source_list : str
        Path to a text file containing a list of data file paths
    output : str
        Path to the output file
    n : int
        Number of events to process
    nskip : int
        Number of events to skip
    config_overrides : List[str]
        List of config overrides in the form "key.path=value"
    """
    cfg = build_config(config, source, source_list, output, n, nskip, config_overrides)

    # Only import the driver once the configuration is valid
    from trimatch.main import run

    run(cfg)


def build_config(
    config,
    source=None,
    source_list=None,
    output=None,
    n=None,
    nskip=None,
    config_overrides=None,
):
    """Load the configuration file and apply the command-line overrides.

    Parameters
    ----------
    config : str
        Path to the configuration file
    source : List[str], optional
        List of paths to the input files
    source_list : str, optional
        Path to a text file containing a list of data file paths
    output : str, optional
        Path to the output file
    n : int, optional
        Number of events to process
    nskip : int, optional
        Number of events to skip
    config_overrides : List[str], optional
        List of config overrides in the form "key.path=value"

    Returns
    -------
    dict
        Updated configuration dictionary
    """
    # Load the configuration tools to find the appropriate config file
    cfg_file = resolve_config_path(config, current_dir=os.getcwd())
    cfg = load_config(cfg_file)

    # If there is no base block, build one
    if "base" not in cfg:
        cfg["base"] = {}

    # Propagate the configuration parent directory to enable relative paths
    cfg["base"]["parent_path"] = str(pathlib.Path(cfg_file).parent)

    # The configuration must minimally contain an IO block with a reader
    if "io" not in cfg or cfg["io"].get("reader") is None:
        raise KeyError("Configuration file must contain an `io.reader` block.")

    # Override the input command-line information into the configuration
    io_mapping = {
        "file_keys": source if source is not None else source_list,
        "n_entry": n,
        "n_skip": nskip,
    }
    for io_key, io_value in io_mapping.items():
        if io_value is not None:
            cfg["io"]["reader"][io_key] = io_value

    # Override the output path if provided
    if output is not None:
        if cfg["io"].get("writer") is None:
            raise KeyError("--output flag provided: must specify `io.writer`.")
        cfg["io"]["writer"]["file_name"] = output

    # Apply any generic config overrides from --set arguments
    for override in config_overrides or []:
        if "=" not in override:
            raise ValueError(
                f"Invalid --set format: '{override}'. "
                f"Expected format: 'key.path=value'"
            )

        key_path, value_str = override.split("=", 1)
        cfg = set_nested_value(cfg, key_path.strip(), parse_value(value_str.strip()))

    return cfg


def cli():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="trimatch - Cross-view cosmic-ray track matching",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  trimatch -c config.yaml                         Process the configured input
  trimatch -c config.yaml -s events.h5 -o out.h5  Override input and output
  trimatch -c config.yaml --set reco.cosmic_track_matching.min_matched_hits=5
""",
    )

    parser.add_argument(
        "--version", "-v", action="version", version=f"trimatch {__version__}"
    )

    parser.add_argument(
        "-c", "--config", required=True, help="Path to the configuration file"
    )

    # Add mutually exclusive group for source input
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-s", "--source", nargs="+", type=str, help="List of paths to the input files"
    )
    group.add_argument(
        "-S",
        "--source-list",
        help="Path to a text file containing a list of data file paths",
    )

    parser.add_argument("-o", "--output", help="Path to the output file")

    parser.add_argument("-n", "--iterations", type=int, help="Number of events to run")

    parser.add_argument("--nskip", type=int, help="Number of events to skip")

    # Add option to dynamically override any config parameter using dot notation
    parser.add_argument(
        "--set",
        action="append",
        dest="config_overrides",
        metavar="KEY=VALUE",
        help="Override any config parameter using dot notation "
        "(e.g., --set base.verbosity=debug). "
        "Can be used multiple times for multiple overrides.",
    )

    # If no arguments provided, show help
    if len(sys.argv) == 1:
        parser.print_help()
        return

    args = parser.parse_args()

    main(
        args.config,
        args.source,
        args.source_list,
        args.output,
        args.iterations,
        args.nskip,
        args.config_overrides,
    )


if __name__ == "__main__":
    cli()
