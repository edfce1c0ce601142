"""Tests for the cross-view matching functions."""

import numpy as np
import pytest

from trimatch.data import Cluster
from trimatch.utils.fit import SlidingLinearFit
from trimatch.utils.match import (
    associate_hits,
    check_cluster_spans,
    check_x_overlap,
    matched_point_fraction,
    project_positions,
    sampling_positions,
    select_matched_hits,
    x_overlap,
)


def span_cluster(x_min, x_max, cluster_id=0, num_points=11):
    """Horizontal cluster covering a range of drift coordinates."""
    points = np.zeros((num_points, 2), dtype=np.float32)
    points[:, 0] = np.linspace(x_min, x_max, num_points)

    return Cluster(
        id=cluster_id, view=0, index=np.arange(num_points), points=points
    )


class TestOverlap:
    """Test the drift coordinate overlap gate."""

    def test_x_overlap(self):
        """Shared and total drift ranges."""
        overlap, span = x_overlap(span_cluster(0.0, 10.0), span_cluster(2.0, 12.0))

        assert overlap == pytest.approx(8.0)
        assert span == pytest.approx(12.0)

    def test_check_x_overlap(self):
        """Both the absolute and relative overlap are required."""
        c1, c2 = span_cluster(0.0, 10.0), span_cluster(2.0, 12.0)

        assert check_x_overlap(c1, c2, 3.0, 0.6)
        assert not check_x_overlap(c1, c2, 3.0, 0.8)
        assert not check_x_overlap(c1, c2, 9.0, 0.0)

    def test_disjoint(self):
        """Disjoint clusters never pass."""
        c1, c2 = span_cluster(0.0, 1.0), span_cluster(5.0, 6.0)

        assert x_overlap(c1, c2)[0] < 0.0
        assert not check_x_overlap(c1, c2, 0.0, 0.0)


class TestProjection:
    """Test the prediction of trajectories in the third view."""

    def test_sampling_positions(self):
        """Samples are taken at the center of evenly spaced bins."""
        np.testing.assert_allclose(
            sampling_positions(0.0, 10.0, 5), [1.0, 3.0, 5.0, 7.0, 9.0]
        )

    def test_project_positions(self, split_track_store, geometry):
        """U and V views of the track predict the W view of the track."""
        fit_u = SlidingLinearFit(split_track_store.clusters[0])
        fit_v = SlidingLinearFit(split_track_store.clusters[1])

        positions = project_positions(fit_u, fit_v, geometry, num_points=100)

        assert positions.dtype == np.float32
        assert 90 <= len(positions) <= 100
        np.testing.assert_allclose(
            positions[:, 1], 1.5 * positions[:, 0], atol=1e-3
        )
        assert np.all((positions[:, 0] > 0.0) & (positions[:, 0] < 20.0))

    def test_project_disjoint(self, geometry):
        """Fits with no common range predict nothing."""
        fit1 = SlidingLinearFit(span_cluster(0.0, 5.0, cluster_id=0))
        fit2 = SlidingLinearFit(span_cluster(10.0, 15.0, cluster_id=1))
        fit2.cluster.view = 1

        positions = project_positions(fit1, fit2, geometry)

        assert positions.shape == (0, 2)


class TestAssociation:
    """Test the association of third view hits to predicted positions."""

    def test_associate_hits(self, split_track_store):
        """Hits of both halves of the track are associated."""
        store = split_track_store
        x = np.linspace(0.0, 20.0, 50)
        positions = np.stack([x, 1.5 * x], axis=1).astype(np.float32)
        clusters = store.get_list("clusters_w")

        hit_index, hit_points, associated = associate_hits(positions, clusters, 1.5)

        assert [c.id for c in associated] == [2, 3]
        assert len(hit_index) == 101
        assert hit_points.shape == (101, 2)
        np.testing.assert_array_equal(
            np.sort(hit_index),
            np.concatenate([clusters[0].index, clusters[1].index]),
        )

    def test_associate_nothing(self, split_track_store):
        """Far away predictions associate no hit."""
        positions = np.array([[100.0, 100.0]], dtype=np.float32)
        clusters = split_track_store.get_list("clusters_w")

        hit_index, hit_points, associated = associate_hits(positions, clusters, 1.5)

        assert len(hit_index) == 0
        assert hit_points.shape == (0, 2)
        assert associated == []

    def test_check_cluster_spans(self):
        """Associated clusters cannot be longer than the shortest seed."""
        seed1, seed2 = span_cluster(0.0, 10.0), span_cluster(0.0, 8.0)

        assert check_cluster_spans([span_cluster(1.0, 9.0)], seed1, seed2)
        assert check_cluster_spans([span_cluster(0.0, 8.0)], seed1, seed2)
        assert not check_cluster_spans([span_cluster(0.0, 9.0)], seed1, seed2)
        assert check_cluster_spans([], seed1, seed2)

    def test_select_matched_hits(self):
        """Isolated hits are dropped."""
        hit_index = np.array([10, 11, 12, 13])
        hit_points = np.array(
            [[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [50.0, 0.0]], dtype=np.float32
        )

        index, points = select_matched_hits(hit_index, hit_points, 5.0)

        np.testing.assert_array_equal(index, [10, 11, 12])
        assert points.shape == (3, 2)

    def test_matched_point_fraction(self):
        """Fraction of predictions with a hit in range."""
        x = np.arange(4, dtype=np.float32)
        positions = np.stack([x, np.zeros(4, np.float32)], axis=1)
        hit_points = np.array([[0.0, 0.2], [1.0, -0.2]], dtype=np.float32)

        assert matched_point_fraction(positions, hit_points, 0.5) == 0.5
        assert matched_point_fraction(positions[:0], hit_points, 0.5) == 0.0
