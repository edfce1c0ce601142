"""Contains a reader class dedicated to loading hits from HDF5 files."""

import h5py
import numpy as np

from trimatch.data import ClusterStore
from trimatch.utils.logger import logger

from .base import ReaderBase

__all__ = ["HDF5Reader"]


class HDF5Reader(ReaderBase):
    """Class which reads clustered hits stored in HDF5 files.

    The files must be structured as follows:
      - An `events` group with one subgroup per event, named by its
        index in the file (`0`, `1`, ...)
      - Each event group holds the `view`, `position`, `charge` and
        `cluster` datasets (one entry per hit) and, optionally, an
        `available` dataset (one entry per cluster label)

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          reader:
            name: hdf5
            file_keys: events.h5
    """

    name = "hdf5"

    def __init__(
        self,
        file_keys,
        limit_num_files=None,
        max_print_files=10,
        n_entry=None,
        n_skip=None,
        entry_list=None,
        list_names=None,
    ):
        """Initalize the HDF5 file reader.

        Parameters
        ----------
        file_keys : Union[str, List[str]]
            Path(s) to the HDF5 files to be read
        limit_num_files : int, optional
            Integer limiting number of files to be taken
        max_print_files : int, default 10
            Maximum number of loaded file names to be printed
        n_entry : int, optional
            Maximum number of entries to load
        n_skip : int, optional
            Number of entries to skip at the beginning
        entry_list : List[int], optional
            List of integer entry IDs to add to the index
        list_names : Dict[str, str], optional
            Name of the cluster list to publish for each view label
        """
        self.process_file_paths(file_keys, limit_num_files, max_print_files)
        self.list_names = list_names

        # Loop over the input files, build a map from index to file ID
        self.num_entries = 0
        file_index = []
        self.file_offsets = np.empty(len(self.file_paths), dtype=np.int64)
        for i, path in enumerate(self.file_paths):
            with h5py.File(path, "r") as in_file:
                assert "events" in in_file, f"File {path} does not contain events"
                num_entries = len(in_file["events"])

            file_index.append(np.full(num_entries, i, dtype=np.int64))
            self.file_offsets[i] = self.num_entries
            self.num_entries += num_entries

        logger.info("Total number of entries in the file(s): %d\n", self.num_entries)

        self.file_index = np.concatenate(file_index)
        self.process_entry_list(n_entry, n_skip, entry_list)

    def get(self, idx):
        """Returns a specific entry in the file(s).

        Parameters
        ----------
        idx : int
            Integer entry ID to access

        Returns
        -------
        data : dict
            Dictionary of data products corresponding to one event
        """
        assert idx < len(self.entry_index)
        file_idx = self.get_file_index(idx)
        entry_idx = self.get_file_entry_index(idx)

        with h5py.File(self.file_paths[file_idx], "r") as in_file:
            event = in_file["events"][str(entry_idx)]
            arrays = {key: event[key][()] for key in event.keys()}

        store = ClusterStore.from_arrays(
            arrays["view"],
            arrays["position"],
            arrays["charge"],
            arrays["cluster"],
            available=arrays.get("available"),
            list_names=self.list_names,
        )

        return {
            "index": np.int64(idx),
            "file_index": file_idx,
            "file_entry_index": entry_idx,
            "store": store,
        }
