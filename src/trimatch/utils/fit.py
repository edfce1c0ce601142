"""Sliding linear fits of 2D clusters.

A sliding fit describes a cluster as a smooth trajectory. The hits are
expressed in the cluster frame (longitudinal coordinate along the principal
axis, transverse coordinate perpendicular to it) and binned in layers of
fixed pitch along the principal axis. For each layer, a straight line is
fitted to the hits of the surrounding window of layers and evaluated at the
layer center. Trajectory queries interpolate between these fitted points.
"""

import numpy as np

from .enums import SampleStatus
from .errors import FitError
from .globals import X_COL
from .logger import logger

__all__ = ["SlidingLinearFit", "SlidingFitCache"]


class SlidingLinearFit:
    """Sliding-window linear fit of the hits of one cluster.

    Attributes
    ----------
    cluster : Cluster
        Fitted cluster
    half_window : int
        Number of layers on either side of a layer included in its fit
    layer_pitch : float
        Width of a layer along the cluster principal axis
    origin : np.ndarray
        (2) Origin of the cluster frame (hit centroid)
    axis : np.ndarray
        (2) Principal axis of the cluster, oriented towards increasing `x`
    fit_points : np.ndarray
        (L, 2) Fitted trajectory positions, one per layer, ordered along
        the principal axis
    """

    def __init__(self, cluster, half_window=15, layer_pitch=0.3):
        """Fit the trajectory of a cluster.

        Parameters
        ----------
        cluster : Cluster
            Cluster to fit
        half_window : int, default 15
            Number of layers on either side of a layer included in its fit
        layer_pitch : float, default 0.3
            Width of a layer along the cluster principal axis
        """
        assert half_window >= 0, "The sliding window cannot be negative."
        assert layer_pitch > 0.0, "The layer pitch must be positive."

        self.cluster = cluster
        self.half_window = half_window
        self.layer_pitch = layer_pitch

        points = np.asarray(cluster.points, dtype=np.float64)
        if len(points) < 2:
            raise FitError(f"Cluster {cluster.id} has too few hits to be fitted.")

        x = points[:, X_COL]
        if np.max(x) - np.min(x) <= 0.0:
            raise FitError(f"Cluster {cluster.id} has no extent along the drift axis.")

        # Define the cluster frame from the principal component of the hits
        self.origin = np.mean(points, axis=0)
        rel = points - self.origin
        _, eigvecs = np.linalg.eigh(np.dot(rel.T, rel))
        axis = eigvecs[:, -1]
        if axis[X_COL] < 0.0:
            axis = -axis
        self.axis = axis
        self.normal = np.array([-axis[1], axis[0]])

        # Fit the trajectory, layer by layer
        self.fit_points = self._fit(rel @ self.axis, rel @ self.normal)

    def _fit(self, longitudinal, transverse):
        """Runs the sliding fit in the cluster frame.

        Parameters
        ----------
        longitudinal : np.ndarray
            (N) Hit coordinates along the principal axis
        transverse : np.ndarray
            (N) Hit coordinates perpendicular to the principal axis

        Returns
        -------
        np.ndarray
            (L, 2) Fitted positions in the view frame
        """
        layers = np.floor(longitudinal / self.layer_pitch).astype(np.int64)
        min_layer = np.min(layers)
        num_layers = np.max(layers) - min_layer + 1
        bins = layers - min_layer

        # Window sums are differences of cumulative per-layer sums
        def window_sum(weights):
            per_layer = np.bincount(bins, weights=weights, minlength=num_layers)
            return np.concatenate([[0.0], np.cumsum(per_layer)])

        ones = np.ones(len(longitudinal))
        sums = [
            window_sum(w)
            for w in (
                ones,
                longitudinal,
                transverse,
                longitudinal * longitudinal,
                longitudinal * transverse,
            )
        ]

        layer_ids = np.arange(num_layers)
        lo = np.clip(layer_ids - self.half_window, 0, num_layers - 1)
        hi = np.clip(layer_ids + self.half_window, 0, num_layers - 1) + 1
        n, sl, st, sll, slt = (s[hi] - s[lo] for s in sums)

        valid = n > 0
        n, sl, st, sll, slt = n[valid], sl[valid], st[valid], sll[valid], slt[valid]
        centers = (min_layer + layer_ids[valid] + 0.5) * self.layer_pitch

        # Least-squares line in each window (flat if the window is degenerate)
        denom = n * sll - sl * sl
        safe = np.abs(denom) > 1e-9
        slope = np.zeros(len(n))
        slope[safe] = (n[safe] * slt[safe] - sl[safe] * st[safe]) / denom[safe]
        offset = (st - slope * sl) / n
        trans = offset + slope * centers

        return (
            self.origin
            + centers[:, None] * self.axis[None, :]
            + trans[:, None] * self.normal[None, :]
        )

    @property
    def x_range(self):
        """Range of drift coordinates covered by the fitted trajectory.

        Returns
        -------
        Tuple[float, float]
            Minimum and maximum fitted drift coordinate
        """
        x = self.fit_points[:, X_COL]
        return float(np.min(x)), float(np.max(x))

    def position_at(self, x):
        """Evaluate the fitted trajectory at a given drift coordinate.

        If the trajectory crosses the requested drift coordinate more than
        once, the first crossing along the principal axis is returned.

        Parameters
        ----------
        x : float
            Drift coordinate

        Returns
        -------
        np.ndarray
            (2) Position on the trajectory (None if out of range)
        SampleStatus
            `OK` or `OUT_OF_RANGE`
        """
        fx = self.fit_points[:, X_COL]
        if len(fx) == 1:
            if fx[0] == x:
                return self.fit_points[0].copy(), SampleStatus.OK
            return None, SampleStatus.OUT_OF_RANGE

        # Find the first fitted segment which straddles the coordinate
        lower = np.minimum(fx[:-1], fx[1:])
        upper = np.maximum(fx[:-1], fx[1:])
        segments = np.flatnonzero((lower <= x) & (x <= upper))
        if not len(segments):
            return None, SampleStatus.OUT_OF_RANGE

        i = segments[0]
        start, end = self.fit_points[i], self.fit_points[i + 1]
        dx = end[X_COL] - start[X_COL]
        alpha = 0.5 if dx == 0.0 else (x - start[X_COL]) / dx

        return start + alpha * (end - start), SampleStatus.OK


class SlidingFitCache:
    """Memoizes sliding fits by cluster id for one processing pass.

    Clusters which cannot be fitted are not stored; looking them up returns
    `None`.
    """

    def __init__(self, half_window=15, layer_pitch=0.3):
        """Store the fit parameters shared by all the cached fits.

        Parameters
        ----------
        half_window : int, default 15
            Number of layers on either side of a layer included in its fit
        layer_pitch : float, default 0.3
            Width of a layer along the cluster principal axis
        """
        self.half_window = half_window
        self.layer_pitch = layer_pitch
        self._fits = {}

    def __len__(self):
        return len(self._fits)

    def __contains__(self, cluster):
        return cluster.id in self._fits

    def add(self, clusters):
        """Fit each cluster that does not have a fit yet.

        Parameters
        ----------
        clusters : List[Cluster]
            Clusters to fit
        """
        for cluster in clusters:
            if cluster.id in self._fits:
                continue

            try:
                fit = SlidingLinearFit(cluster, self.half_window, self.layer_pitch)
            except FitError as err:
                logger.debug("Skipping cluster %d: %s", cluster.id, err)
                continue

            self.insert(fit)

    def insert(self, fit):
        """Store a fit, keyed by the id of its cluster.

        Parameters
        ----------
        fit : SlidingLinearFit
            Fit to store
        """
        if fit.cluster.id in self._fits:
            raise KeyError(f"A fit already exists for cluster {fit.cluster.id}.")

        self._fits[fit.cluster.id] = fit

    def get(self, cluster):
        """Fetch the fit of a cluster.

        Parameters
        ----------
        cluster : Cluster
            Cluster to fetch the fit for

        Returns
        -------
        SlidingLinearFit
            Cached fit (None if the cluster could not be fitted)
        """
        return self._fits.get(cluster.id)
