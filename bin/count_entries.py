#!/usr/bin/env python3
"""Counts the number of events, hits and clusters in trimatch HDF5 files."""

import argparse

import h5py
import numpy as np


def main(source):
    """Checks the number of entries in a file/list of files.

    Parameters
    ----------
    source : List[str]
        List of paths to the input files
    """
    total_entries, total_hits = 0, 0
    print(f"\nCounting entries in {len(source)} files:")
    for file_path in source:
        with h5py.File(file_path, "r") as in_file:
            events = in_file["events"]
            num_entries = len(events)
            num_hits = sum(len(events[key]["view"]) for key in events)
            num_clusters = sum(
                len(np.unique(events[key]["cluster"][()])) for key in events
            )

        print(
            f"- Counted {num_entries} entries, {num_hits} hits and "
            f"{num_clusters} clusters in {file_path}"
        )
        total_entries += num_entries
        total_hits += num_hits

    print(f"\nTotal number of entries: {total_entries}")
    print(f"Total number of hits: {total_hits}")


if __name__ == "__main__":
    # Parse the command-line arguments
    parser = argparse.ArgumentParser(description="Count entries in dataset")
    parser.add_argument(
        "source", help="Path or list of paths to data files", type=str, nargs="+"
    )
    args = parser.parse_args()

    main(args.source)
