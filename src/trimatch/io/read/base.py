"""Contains the data reader base class.

Data readers are used to extract specific entries from files and store their
data products into dictionaries to be used downstream.
"""

import glob
import os

import numpy as np

from trimatch.utils.logger import logger

__all__ = ["ReaderBase"]


class ReaderBase:
    """Parent reader class which provides common functions between all readers.

    Attributes
    ----------
    name : str
        Name of the reader, as requested in the configuration
    num_entries : int
        Total number of entries in the files provided
    entry_index : np.ndarray
        List of global entry indexes to cycle through
    file_paths : List[str]
        List of files to read data from
    file_offsets : np.ndarray
        Offsets between the global index and each individual file start index
    file_index : np.ndarray
        Index of the file each global entry lives in
    """

    name = ""
    num_entries = None
    entry_index = None
    file_paths = None
    file_offsets = None
    file_index = None

    def __len__(self):
        """Returns the number of entries to cycle through.

        Returns
        -------
        int
            Number of entries
        """
        return len(self.entry_index)

    def __getitem__(self, idx):
        """Returns a specific entry in the file(s).

        Parameters
        ----------
        idx : int
            Integer entry ID to access

        Returns
        -------
        dict
            One entry-worth of data from the loaded files
        """
        return self.get(idx)

    def __iter__(self):
        for idx in range(len(self)):
            yield self.get(idx)

    def get(self, idx):
        """Placeholder to be defined by the daughter class."""
        raise NotImplementedError

    def process_file_paths(self, file_keys, limit_num_files=None, max_print_files=10):
        """Process list of files.

        Parameters
        ----------
        file_keys : Union[str, List[str]]
            Path or list of paths (glob patterns allowed) to the files to be
            read, or a path to a `.txt` file which lists them
        limit_num_files : int, optional
            Integer limiting number of files to be taken
        max_print_files : int, default 10
            Maximum number of loaded file names to be printed
        """
        assert file_keys is not None, "No input `file_keys` provided, abort."
        assert (
            limit_num_files is None or limit_num_files > 0
        ), "If `limit_num_files` is provided, it must be larger than 0."

        # A single text file contains the list of file paths
        if isinstance(file_keys, str) and os.path.splitext(file_keys)[-1] == ".txt":
            assert os.path.isfile(file_keys), (
                "If the `file_keys` are specified as a single string, "
                "it must be the path to a text file with a file list."
            )
            with open(file_keys, "r", encoding="utf-8") as f:
                file_keys = f.read().splitlines()

        if isinstance(file_keys, str):
            file_keys = [file_keys]

        self.file_paths = []
        for file_key in file_keys:
            file_paths = sorted(glob.glob(file_key))
            assert file_paths, f"File key {file_key} yielded no compatible path."
            self.file_paths.extend(file_paths)

        self.file_paths = sorted(self.file_paths)[:limit_num_files]

        num_files = len(self.file_paths)
        file_list = " - " + "\n - ".join(self.file_paths[:max_print_files])
        file_list += "\n ... \n" if num_files > max_print_files else "\n"
        logger.info("Will load %d file(s):\n%s", num_files, file_list)

    def process_entry_list(self, n_entry=None, n_skip=None, entry_list=None):
        """Create the list of entries that can be accessed by :meth:`get`.

        Parameters
        ----------
        n_entry : int, optional
            Maximum number of entries to load
        n_skip : int, optional
            Number of entries to skip at the beginning
        entry_list : List[int], optional
            List of integer entry IDs to add to the index
        """
        assert n_entry is None or n_entry > 0, "`n_entry` must be positive."
        assert n_skip is None or n_skip >= 0, "`n_skip` cannot be negative."

        if entry_list is not None:
            assert (
                n_entry is None and n_skip is None
            ), "Cannot specify `n_entry` or `n_skip` along with `entry_list`."
            entry_index = np.asarray(entry_list, dtype=np.int64)
            assert np.all(
                (entry_index > -1) & (entry_index < self.num_entries)
            ), "Some of the requested entries do not exist."

        else:
            start = n_skip or 0
            assert start < max(self.num_entries, 1), (
                f"Cannot skip {start} entries, there are only "
                f"{self.num_entries} in the file(s)."
            )
            stop = self.num_entries if n_entry is None else start + n_entry
            entry_index = np.arange(start, min(stop, self.num_entries), dtype=np.int64)

        self.entry_index = entry_index

    def get_file_index(self, idx):
        """Returns the index of the file which contains an entry.

        Parameters
        ----------
        idx : int
            Index of the entry in the list of entries to cycle through

        Returns
        -------
        int
            File index
        """
        return self.file_index[self.entry_index[idx]]

    def get_file_entry_index(self, idx):
        """Returns the index of an entry within its own file.

        Parameters
        ----------
        idx : int
            Index of the entry in the list of entries to cycle through

        Returns
        -------
        int
            Entry index within the file
        """
        entry = self.entry_index[idx]

        return entry - self.file_offsets[self.file_index[entry]]
