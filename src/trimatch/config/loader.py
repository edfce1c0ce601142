"""Configuration loader with file includes.

Configuration language
----------------------

Include Semantics:
    include: base.yaml               # Single file
    include: [base.yaml, other.yaml] # Multiple files (order matters)
    key: !include inline.yaml        # Inline include

Path Resolution:
    io:
      reader:
        file_keys: !path data/events.h5   # Resolved relative to this file

Override Semantics:
    override:
      reco.cosmic_track_matching.min_matched_hits: 8

Application order: included files are loaded and merged first (depth-first,
in order), the file's own content is merged on top, then its overrides are
applied.
"""

import os
from typing import Any, Dict, List, Optional, TextIO, cast

import yaml

from .errors import ConfigCycleError, ConfigIncludeError
from .operations import deep_merge, extract_directives, set_nested_value

__all__ = ["load_config", "ConfigLoader", "resolve_config_path"]


def resolve_config_path(filename: str, current_dir: str) -> str:
    """Resolve a configuration file path.

    Resolution order:
    1. If absolute path, return as-is
    2. Try relative to current_dir
    3. Try relative to current_dir with .yaml/.yml extension
    4. Search through the TRIMATCH_CONFIG_PATH directories

    Parameters
    ----------
    filename : str
        Config filename or path to resolve
    current_dir : str
        Directory of the config file doing the including

    Returns
    -------
    str
        Resolved absolute path

    Raises
    ------
    ConfigIncludeError
        If file cannot be found in any location
    """
    if os.path.isabs(filename):
        if os.path.exists(filename):
            return filename
        raise ConfigIncludeError(f"Absolute path not found: {filename}")

    env_paths = os.environ.get("TRIMATCH_CONFIG_PATH", "")
    search_dirs = [current_dir] + [p.strip() for p in env_paths.split(":") if p.strip()]
    for search_dir in search_dirs:
        path = os.path.join(search_dir, filename)
        for candidate in [path, path + ".yaml", path + ".yml"]:
            if os.path.isfile(candidate):
                return os.path.abspath(candidate)

    raise ConfigIncludeError(
        f"Config file '{filename}' not found.\n"
        f"Searched in:\n  - " + "\n  - ".join(search_dirs)
    )


class ConfigLoader(yaml.SafeLoader):
    """YAML loader with `!include` and `!path` tag support."""

    def __init__(self, stream: TextIO) -> None:
        """Initialize the loader.

        Parameters
        ----------
        stream : TextIO
            File stream (from `open()`)
        """
        self._root = os.path.split(getattr(stream, "name", ""))[0] or os.getcwd()
        super().__init__(stream)

    def include(self, node: yaml.Node) -> Any:
        """Load and include a YAML file inline.

        Parameters
        ----------
        node : yaml.Node
            YAML node containing the filename

        Returns
        -------
        Any
            Loaded configuration content
        """
        filename = self.construct_scalar(cast(yaml.ScalarNode, node))
        resolved_path = resolve_config_path(filename, self._root)

        with open(resolved_path, "r", encoding="utf-8") as f:
            return yaml.load(f, Loader=ConfigLoader)

    def resolve_path(self, node: yaml.Node) -> str:
        """Resolve a file path relative to the current config file.

        Parameters
        ----------
        node : yaml.Node
            YAML node containing the filename

        Returns
        -------
        str
            Resolved absolute path
        """
        filename = self.construct_scalar(cast(yaml.ScalarNode, node))
        path = os.path.join(self._root, filename)

        return filename if os.path.isabs(filename) else os.path.abspath(path)


# Register the !include and !path constructors
ConfigLoader.add_constructor("!include", ConfigLoader.include)
ConfigLoader.add_constructor("!path", ConfigLoader.resolve_path)


def load_config(
    cfg_path: str, include_stack: Optional[List[str]] = None
) -> Dict[str, Any]:
    """Load a configuration file, resolving its includes and overrides.

    Parameters
    ----------
    cfg_path : str
        Path to the configuration file
    include_stack : List[str], optional
        Stack of files currently being loaded (for cycle detection)

    Returns
    -------
    Dict[str, Any]
        Configuration dictionary

    Raises
    ------
    ConfigCycleError
        If circular include detected
    ConfigIncludeError
        If the file or one of its includes cannot be loaded
    """
    cfg_path = os.path.abspath(cfg_path)
    include_stack = include_stack or []
    if cfg_path in include_stack:
        raise ConfigCycleError(include_stack + [cfg_path])
    include_stack = include_stack + [cfg_path]

    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            raw = yaml.load(f, Loader=ConfigLoader)
    except FileNotFoundError as exc:
        raise ConfigIncludeError(f"Configuration file not found: {cfg_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigIncludeError(f"Error loading {cfg_path}: {exc}") from exc

    if raw is None:
        return {}

    includes, overrides, content = extract_directives(raw)

    # Merge the included files in order, then this file's content
    config = {}
    root_dir = os.path.dirname(cfg_path)
    for include in includes:
        include_path = resolve_config_path(include, root_dir)
        config = deep_merge(config, load_config(include_path, include_stack))

    config = deep_merge(config, content)

    for key_path, value in overrides.items():
        set_nested_value(config, key_path, value)

    return config
