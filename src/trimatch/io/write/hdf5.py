"""Contains a writer class which stores clustered hits to HDF5 files."""

import os

import h5py
import numpy as np

from trimatch.utils.logger import logger

__all__ = ["HDF5Writer"]


class HDF5Writer:
    """Writes the hits of each event and their cluster labels to HDF5.

    The layout is the one expected by :class:`HDF5Reader`, so that the
    output of one pass can be fed back as the input of another.

    Typical configuration should look like:

    .. code-block:: yaml

        io:
          ...
          writer:
            name: hdf5
            file_name: output.h5
    """

    name = "hdf5"

    def __init__(self, file_name="output.h5", overwrite=False):
        """Initializes the basics of the output file.

        Parameters
        ----------
        file_name : str, default 'output.h5'
            Name of the output HDF5 file
        overwrite : bool, default False
            If True, overwrite the output file if it already exists
        """
        if not overwrite and os.path.isfile(file_name):
            raise FileExistsError(f"File with name {file_name} already exists.")

        self.file_name = file_name
        self.num_entries = 0

        # Start from a file with an empty event group
        with h5py.File(self.file_name, "w") as out_file:
            out_file.create_group("events")

        logger.info("Will write output to:\n - %s\n", self.file_name)

    def append(self, data):
        """Append one event to the output file.

        Parameters
        ----------
        data : dict
            Dictionary of data products, must contain the event `store`
        """
        store = data["store"]

        # Remap live cluster ids to contiguous labels
        labels = store.labels()
        assert np.all(labels > -1), "Every hit must belong to a cluster."
        cluster_ids, labels = np.unique(labels, return_inverse=True)
        available = np.array(
            [store.clusters[i].available for i in cluster_ids], dtype=bool
        )

        view = np.array([hit.view for hit in store.hits], dtype=np.int64)
        charge = np.array([hit.charge for hit in store.hits], dtype=np.float32)

        with h5py.File(self.file_name, "a") as out_file:
            event = out_file["events"].create_group(str(self.num_entries))
            event.create_dataset("view", data=view)
            event.create_dataset("position", data=store.positions)
            event.create_dataset("charge", data=charge)
            event.create_dataset("cluster", data=labels.astype(np.int64))
            event.create_dataset("available", data=available)

        self.num_entries += 1

    def __call__(self, data):
        self.append(data)
