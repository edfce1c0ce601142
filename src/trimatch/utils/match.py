"""Functions used to match clusters across three projection views.

A pair of clusters from two views is turned into a set of predicted
positions in the third view. These are in turn associated with the hits
of the third view, and the association is subjected to a sequence of
consistency checks before it is accepted.
"""

import numpy as np

from trimatch.math.distance import neighbor_mask, radius_mask

from .enums import SampleStatus

__all__ = [
    "x_overlap",
    "check_x_overlap",
    "sampling_positions",
    "project_positions",
    "associate_hits",
    "check_cluster_spans",
    "select_matched_hits",
    "matched_point_fraction",
]


def x_overlap(cluster1, cluster2):
    """Computes the shared drift coordinate range of two clusters.

    Parameters
    ----------
    cluster1 : Cluster
        First cluster
    cluster2 : Cluster
        Second cluster

    Returns
    -------
    overlap : float
        Length of the shared drift range (negative if disjoint)
    span : float
        Length of the drift range covered by either cluster
    """
    x_min1, x_max1 = cluster1.x_span
    x_min2, x_max2 = cluster2.x_span
    overlap = min(x_max1, x_max2) - max(x_min1, x_min2)
    span = max(x_max1, x_max2) - min(x_min1, x_min2)

    return overlap, span


def check_x_overlap(cluster1, cluster2, min_overlap, min_overlap_fraction):
    """Checks that two clusters overlap enough along the drift coordinate.

    Parameters
    ----------
    cluster1 : Cluster
        First cluster
    cluster2 : Cluster
        Second cluster
    min_overlap : float
        Minimum shared drift range
    min_overlap_fraction : float
        Minimum ratio of shared drift range to total drift range

    Returns
    -------
    bool
        `True` if the pair passes the overlap requirements
    """
    overlap, span = x_overlap(cluster1, cluster2)
    if overlap < min_overlap or span <= 0.0:
        return False

    return overlap / span >= min_overlap_fraction


def sampling_positions(x_min, x_max, num_points):
    """Evenly spaced drift coordinates at the center of `num_points` bins.

    Parameters
    ----------
    x_min : float
        Lower bound of the sampled range
    x_max : float
        Upper bound of the sampled range
    num_points : int
        Number of samples

    Returns
    -------
    np.ndarray
        (num_points) Drift coordinates
    """
    alpha = (0.5 + np.arange(num_points)) / num_points

    return x_min + alpha * (x_max - x_min)


def project_positions(fit1, fit2, geometry, num_points=100):
    """Predict the trajectory of a cluster pair in the third view.

    The shared drift range of the two clusters is sampled. Samples which
    fall outside of either fitted trajectory, or for which the geometry
    cannot resolve a position, are skipped.

    Parameters
    ----------
    fit1 : SlidingLinearFit
        Trajectory of the first cluster
    fit2 : SlidingLinearFit
        Trajectory of the second cluster
    geometry : WireGeometry
        Geometry used to merge two views into the third
    num_points : int, default 100
        Number of drift coordinates to sample

    Returns
    -------
    np.ndarray
        (K, 2) Predicted positions in the third view, K <= num_points
    """
    cluster1, cluster2 = fit1.cluster, fit2.cluster
    x_min1, x_max1 = cluster1.x_span
    x_min2, x_max2 = cluster2.x_span
    x_min, x_max = max(x_min1, x_min2), min(x_max1, x_max2)
    if x_max < x_min:
        return np.empty((0, 2), dtype=np.float32)

    positions = []
    for x in sampling_positions(x_min, x_max, num_points):
        position1, status1 = fit1.position_at(x)
        position2, status2 = fit2.position_at(x)
        if status1 != SampleStatus.OK or status2 != SampleStatus.OK:
            continue

        position3, _, status3 = geometry.merge_two_positions(
            cluster1.view, cluster2.view, position1, position2
        )
        if status3 != SampleStatus.OK:
            continue

        positions.append(position3)

    if not positions:
        return np.empty((0, 2), dtype=np.float32)

    return np.vstack(positions).astype(np.float32)


def associate_hits(positions, clusters, max_displacement):
    """Find the hits which lie close to any of the predicted positions.

    Parameters
    ----------
    positions : np.ndarray
        (K, 2) Predicted positions
    clusters : List[Cluster]
        Candidate clusters in the predicted view
    max_displacement : float
        Maximum distance (exclusive) between a hit and a predicted position

    Returns
    -------
    hit_index : np.ndarray
        (H) Ids of the associated hits
    hit_points : np.ndarray
        (H, 2) Positions of the associated hits
    associated : List[Cluster]
        Clusters which contribute at least one associated hit
    """
    hit_index, hit_points, associated = [], [], []
    for cluster in clusters:
        mask = radius_mask(
            np.asarray(cluster.points, dtype=np.float32), positions, max_displacement
        )
        if not mask.any():
            continue

        associated.append(cluster)
        hit_index.append(cluster.index[mask])
        hit_points.append(cluster.points[mask])

    if not associated:
        return np.empty(0, dtype=np.int64), np.empty((0, 2), dtype=np.float32), []

    return (
        np.concatenate(hit_index),
        np.vstack(hit_points).astype(np.float32),
        associated,
    )


def check_cluster_spans(clusters, cluster1, cluster2):
    """Checks that no associated cluster is longer than the seed clusters.

    Parameters
    ----------
    clusters : List[Cluster]
        Associated clusters
    cluster1 : Cluster
        First seed cluster
    cluster2 : Cluster
        Second seed cluster

    Returns
    -------
    bool
        `True` if all associated clusters fit within the shortest seed
    """
    max_length = min(cluster1.x_length, cluster2.x_length)
    for cluster in clusters:
        if cluster.x_length > max_length:
            return False

    return True


def select_matched_hits(hit_index, hit_points, max_displacement):
    """Drop the associated hits which have no other associated hit nearby.

    Parameters
    ----------
    hit_index : np.ndarray
        (H) Ids of the associated hits
    hit_points : np.ndarray
        (H, 2) Positions of the associated hits
    max_displacement : float
        Maximum distance (exclusive) to the nearest other hit

    Returns
    -------
    np.ndarray
        (M) Ids of the matched hits
    np.ndarray
        (M, 2) Positions of the matched hits
    """
    mask = neighbor_mask(hit_points, max_displacement)

    return hit_index[mask], hit_points[mask]


def matched_point_fraction(positions, hit_points, max_displacement):
    """Fraction of predicted positions explained by at least one hit.

    Parameters
    ----------
    positions : np.ndarray
        (K, 2) Predicted positions
    hit_points : np.ndarray
        (M, 2) Positions of the matched hits
    max_displacement : float
        Maximum distance (exclusive) between a hit and a predicted position

    Returns
    -------
    float
        Fraction of the predicted positions with a hit in range
    """
    if not len(positions):
        return 0.0

    mask = radius_mask(positions, hit_points, max_displacement)

    return float(np.mean(mask))
