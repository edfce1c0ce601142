"""Sets up fixtures general to the entire test suite of this package.

This file is read during the collection phase of pytest when running anything
inside this directory.

Most fixtures build toy events from a single straight track, projected onto
the three wire views. The track goes from (0, -10, 0) to (20, 10, 30) and is
sampled at 101 evenly spaced points, so that every view records the same
drift coordinates.
"""

import numpy as np
import pytest

from trimatch.data import ClusterStore
from trimatch.geo import WireGeometry
from trimatch.utils.enums import ViewEnum

TRACK_START = np.array([0.0, -10.0, 0.0])
TRACK_END = np.array([20.0, 10.0, 30.0])
NUM_TRACK_POINTS = 101


@pytest.fixture(name="geometry")
def fixture_geometry():
    """Default three-view wire geometry."""
    return WireGeometry()


@pytest.fixture(name="track_points")
def fixture_track_points():
    """3D points sampled along the toy track.

    Returns
    -------
    np.ndarray
        (101, 3) Point coordinates as (x, y, z)
    """
    t = np.linspace(0.0, 1.0, NUM_TRACK_POINTS)

    return TRACK_START + t[:, None] * (TRACK_END - TRACK_START)


@pytest.fixture(name="make_store")
def fixture_make_store(geometry, track_points):
    """Factory which builds a store from pieces of the toy track.

    Each cluster is specified as a `(view, index)` pair, where `index`
    selects the track points to project onto the view. Cluster `i` in the
    input list receives label `i`, hence cluster id `i` in the store.
    """

    def make_store(clusters, available=None):
        views, positions, labels = [], [], []
        for label, (view, index) in enumerate(clusters):
            index = np.asarray(index)
            views.append(np.full(len(index), int(view), dtype=np.int64))
            positions.append(geometry.project(track_points[index], view))
            labels.append(np.full(len(index), label, dtype=np.int64))

        view = np.concatenate(views)
        return ClusterStore.from_arrays(
            view,
            np.vstack(positions),
            np.ones(len(view), dtype=np.float32),
            np.concatenate(labels),
            available=available,
        )

    return make_store


@pytest.fixture(name="split_track_store")
def fixture_split_track_store(make_store):
    """Event where the track is whole in U and V, split in two halves in W.

    Cluster ids: 0 (U), 1 (V), 2 (first W half), 3 (second W half).
    """
    full = np.arange(NUM_TRACK_POINTS)
    return make_store(
        [
            (ViewEnum.U, full),
            (ViewEnum.V, full),
            (ViewEnum.W, full[:51]),
            (ViewEnum.W, full[51:]),
        ]
    )


@pytest.fixture(name="line_store")
def fixture_line_store():
    """Store with two W clusters of ten hits each on a horizontal line.

    Hits 0-9 belong to cluster 0, hits 10-19 to cluster 1.
    """
    num_hits = 20
    position = np.zeros((num_hits, 2), dtype=np.float32)
    position[:, 0] = np.arange(num_hits)

    return ClusterStore.from_arrays(
        np.full(num_hits, int(ViewEnum.W)),
        position,
        np.ones(num_hits),
        np.repeat([0, 1], 10),
    )
