"""Numba JIT compiled implementation of radius query routines.

This module is dedicated to 2D view positions, stored as
(drift coordinate, wire coordinate) pairs. Queries are partitioned along
the drift coordinate: reference points are sorted once and each query only
scans the window of references within one radius of it in `x`.
"""

import numba as nb
import numpy as np

__all__ = ["sqeuclidean", "radius_mask", "neighbor_mask"]


@nb.njit(cache=True)
def sqeuclidean(x: nb.float32[:], y: nb.float32[:]) -> nb.float32:
    """Compute the squared Euclidean distance between two 2D points.

    Parameters
    ----------
    x : np.ndarray
        (2) Coordinates of the first point
    y : np.ndarray
        (2) Coordinates of the second point

    Returns
    -------
    float
        Squared Euclidean distance
    """
    return (y[0] - x[0]) ** 2 + (y[1] - x[1]) ** 2


@nb.njit(cache=True)
def radius_mask(
    x: nb.float32[:, :], y: nb.float32[:, :], radius: nb.float32
) -> nb.boolean[:]:
    """Finds which query points have at least one reference point strictly
    closer than some radius.

    Parameters
    ----------
    x : np.ndarray
        (N, 2) Query points
    y : np.ndarray
        (M, 2) Reference points
    radius : float
        Maximum distance (exclusive)

    Returns
    -------
    np.ndarray
        (N) Boolean mask of query points with a reference point in range
    """
    # Sort the reference points along the drift coordinate
    order = np.argsort(y[:, 0])
    ref = y[order]
    ref_x = ref[:, 0].copy()

    # Only scan the reference window which can be within the radius
    r2 = radius * radius
    mask = np.zeros(len(x), dtype=np.bool_)
    for i in range(len(x)):
        lo = np.searchsorted(ref_x, x[i, 0] - radius)
        hi = np.searchsorted(ref_x, x[i, 0] + radius, side="right")
        for j in range(lo, hi):
            if sqeuclidean(x[i], ref[j]) < r2:
                mask[i] = True
                break

    return mask


@nb.njit(cache=True)
def neighbor_mask(x: nb.float32[:, :], radius: nb.float32) -> nb.boolean[:]:
    """Finds which points have at least one *other* point of the same set
    strictly closer than some radius.

    Parameters
    ----------
    x : np.ndarray
        (N, 2) Point coordinates
    radius : float
        Maximum distance (exclusive)

    Returns
    -------
    np.ndarray
        (N) Boolean mask of points which are not isolated
    """
    order = np.argsort(x[:, 0])
    pts = x[order]
    pts_x = pts[:, 0].copy()

    r2 = radius * radius
    mask = np.zeros(len(x), dtype=np.bool_)
    for i in range(len(pts)):
        lo = np.searchsorted(pts_x, pts[i, 0] - radius)
        hi = np.searchsorted(pts_x, pts[i, 0] + radius, side="right")
        for j in range(lo, hi):
            if j != i and sqeuclidean(pts[i], pts[j]) < r2:
                mask[order[i]] = True
                break

    return mask

