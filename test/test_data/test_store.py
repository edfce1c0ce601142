"""Tests for the hit, cluster and event store data structures."""

import numpy as np
import pytest

from trimatch.data import Cluster, ClusterStore, Hit
from trimatch.utils.enums import ViewEnum
from trimatch.utils.errors import ClusterNotFoundError, InvariantViolationError


class TestCluster:
    """Test the cluster data structure."""

    def test_defaults(self):
        """Array attributes default to empty arrays of the right shape."""
        cluster = Cluster()

        assert len(cluster) == 0
        assert cluster.points.shape == (0, 2)
        assert cluster.index.dtype == np.int64
        assert cluster.length_squared == 0.0

    def test_extent(self):
        """Drift span and bounding box length."""
        points = np.array([[1.0, 0.0], [4.0, 4.0], [2.0, 1.0]], dtype=np.float32)
        cluster = Cluster(id=0, view=0, index=np.arange(3), points=points)

        assert cluster.size == 3
        assert cluster.x_span == (1.0, 4.0)
        assert cluster.x_length == pytest.approx(3.0)
        assert cluster.length_squared == pytest.approx(25.0)

    def test_as_dict(self):
        """Positions are not part of the stored attributes."""
        cluster = Cluster(id=3, view=1, index=np.arange(2), points=np.zeros((2, 2)))

        blob = cluster.as_dict()
        assert "points" not in blob
        assert blob["id"] == 3

    def test_hit(self):
        """Hit coordinate accessors."""
        hit = Hit(id=0, view=2, position=np.array([1.5, -2.0]), charge=3.0)

        assert hit.x == 1.5
        assert hit.wire == -2.0


class TestClusterStore:
    """Test the event arena."""

    def test_from_arrays(self, split_track_store):
        """One cluster per label, one list per view."""
        store = split_track_store

        assert store.num_hits == 303
        assert len(store.clusters) == 4
        assert store.lists["clusters_u"] == (0,)
        assert store.lists["clusters_v"] == (1,)
        assert store.lists["clusters_w"] == (2, 3)
        assert [c.size for c in store.get_list("clusters_w")] == [51, 50]
        assert store.positions.shape == (303, 2)

    def test_labels(self, line_store):
        """Labels are given by the live clusters."""
        np.testing.assert_array_equal(line_store.labels(), np.repeat([0, 1], 10))

    def test_available(self):
        """Availability is specified per cluster label."""
        store = ClusterStore.from_arrays(
            np.zeros(4, dtype=np.int64),
            np.arange(8).reshape(4, 2),
            np.ones(4),
            np.array([0, 0, 1, 1]),
            available=[True, False],
        )

        assert store.clusters[0].available
        assert not store.clusters[1].available

    def test_custom_list_names(self):
        """List names can be chosen per view."""
        names = {"u": "hits_u", "v": "hits_v", "w": "hits_w"}
        store = ClusterStore.from_arrays(
            np.array([0, 1, 2]),
            np.zeros((3, 2)),
            np.ones(3),
            np.array([0, 1, 2]),
            list_names=names,
        )

        assert set(store.lists) == set(names.values())
        assert store.lists["hits_v"] == (1,)

    def test_unclustered_hit(self):
        """Every hit must belong to a cluster."""
        with pytest.raises(AssertionError):
            ClusterStore.from_arrays(
                np.zeros(2, dtype=np.int64),
                np.zeros((2, 2)),
                np.ones(2),
                np.array([0, -1]),
            )

    def test_create(self, line_store):
        """New clusters get fresh ids and the positions of their hits."""
        cluster = line_store.create([12, 11])

        assert cluster.id == 2
        assert cluster.view == ViewEnum.W
        np.testing.assert_array_equal(cluster.index, [11, 12])
        np.testing.assert_array_equal(cluster.points[:, 0], [11.0, 12.0])

    def test_create_mixed_views(self):
        """A cluster cannot span several views."""
        store = ClusterStore()
        store.add_hits([0, 1], np.zeros((2, 2)), [1.0, 1.0])

        with pytest.raises(AssertionError):
            store.create([0, 1])

    def test_remove_hit(self, line_store):
        """Removing a hit updates the cluster index and positions."""
        line_store.remove_hit(0, 3)

        cluster = line_store.clusters[0]
        assert 3 not in cluster.index
        assert len(cluster.points) == 9

        with pytest.raises(KeyError):
            line_store.remove_hit(0, 3)

    def test_remove_last_hit(self):
        """The last hit of a cluster cannot be removed, it must be deleted."""
        store = ClusterStore()
        store.add_hits([0], np.zeros((1, 2)), [1.0])
        cluster = store.create([0])

        with pytest.raises(ValueError):
            store.remove_hit(cluster.id, 0)

    def test_delete(self, line_store):
        """A list which refers to a deleted cluster is inconsistent."""
        line_store.delete(0)

        assert 0 not in line_store.clusters
        with pytest.raises(KeyError):
            line_store.delete(0)
        with pytest.raises(InvariantViolationError):
            line_store.get_list("clusters_w")

    def test_missing_list(self, line_store):
        """Fetching an unknown list raises a lookup error."""
        with pytest.raises(ClusterNotFoundError):
            line_store.get_list("clusters_x")

        with pytest.raises(LookupError):
            line_store.get_list("clusters_x")

    def test_save_list(self, line_store):
        """Publishing a list never modifies a previous snapshot."""
        before = line_store.lists["clusters_w"]
        after = line_store.save_list("clusters_w", [1])

        assert before == (0, 1)
        assert after == (1,)
        assert line_store.lists["clusters_w"] == (1,)

        with pytest.raises(AssertionError):
            line_store.save_list("clusters_w", [7])

    def test_check_ownership(self, line_store):
        """A hit shared by two clusters of a list is an invariant violation."""
        line_store.check_ownership("clusters_w")

        shared = line_store.create([9, 10])
        line_store.save_list("clusters_w", [0, 1, shared.id])
        with pytest.raises(InvariantViolationError):
            line_store.check_ownership("clusters_w")
