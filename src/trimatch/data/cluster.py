"""Module with a data class object which represents a 2D cluster of hits."""

from dataclasses import dataclass

import numpy as np

from trimatch.utils.globals import INVAL_ID, X_COL

from .base import DataBase

__all__ = ["Cluster"]


@dataclass(eq=False)
class Cluster(DataBase):
    """Collection of hits which belong to a single projection view.

    Attributes
    ----------
    id : int
        Index of the cluster in the event arena
    view : int
        Projection view the cluster lives in
    index : np.ndarray
        (N) Ids of the hits that make up the cluster
    points : np.ndarray
        (N, 2) Positions of the hits that make up the cluster
    available : bool
        Whether the cluster has not yet been consumed by a downstream
        algorithm in the current processing pass
    """

    id: int = INVAL_ID
    view: int = INVAL_ID
    index: np.ndarray = None
    points: np.ndarray = None
    available: bool = True

    # Variable-length attributes
    _var_length_attrs = (("index", np.int64), ("points", (2, np.float32)))

    # The point positions are owned by the event store
    _skip_attrs = ("points",)

    def __len__(self):
        """Number of hits in the cluster.

        Returns
        -------
        int
            Number of hits
        """
        return len(self.index)

    @property
    def size(self):
        """Number of hits in the cluster.

        Returns
        -------
        int
            Number of hits
        """
        return len(self.index)

    @property
    def x_span(self):
        """Extent of the cluster along the shared drift coordinate.

        Returns
        -------
        Tuple[float, float]
            Minimum and maximum drift coordinate
        """
        x = self.points[:, X_COL]
        return float(np.min(x)), float(np.max(x))

    @property
    def x_length(self):
        """Length of the cluster along the shared drift coordinate.

        Returns
        -------
        float
            Drift coordinate span
        """
        x_min, x_max = self.x_span
        return x_max - x_min

    @property
    def length_squared(self):
        """Squared diagonal of the cluster bounding box.

        Returns
        -------
        float
            Squared cluster length
        """
        if not len(self.points):
            return 0.0

        extent = np.max(self.points, axis=0) - np.min(self.points, axis=0)
        return float(np.dot(extent, extent))
