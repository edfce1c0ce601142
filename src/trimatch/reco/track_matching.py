"""Cosmic-ray track matching across the three projection views.

Segmentation in each view is done independently, so a single through-going
track may be split into several clusters in one view and not in the others.
For each cyclic pair of views, this algorithm predicts the trajectory of
every pair of clean clusters in the third view, finds the third-view hits
which follow that trajectory and re-clusters them so that cluster
boundaries become consistent across views.
"""

from collections import defaultdict

from trimatch.geo import WireGeometry, geo_factory
from trimatch.utils.cluster import modify_clusters
from trimatch.utils.enums import ViewEnum
from trimatch.utils.errors import ClusterNotFoundError
from trimatch.utils.fit import SlidingFitCache
from trimatch.utils.globals import CLUSTER_LIST_NAMES
from trimatch.utils.logger import logger
from trimatch.utils.match import (
    associate_hits,
    check_cluster_spans,
    check_x_overlap,
    matched_point_fraction,
    project_positions,
    select_matched_hits,
)

from .base import RecoBase

__all__ = ["CosmicTrackMatchingAlgorithm"]

# (first view, second view, predicted view) of each matching pass
VIEW_PASSES = (
    (ViewEnum.U, ViewEnum.V, ViewEnum.W),
    (ViewEnum.V, ViewEnum.W, ViewEnum.U),
    (ViewEnum.W, ViewEnum.U, ViewEnum.V),
)


class CosmicTrackMatchingAlgorithm(RecoBase):
    """Re-clusters hits in one view using the tracks matched in the other two.

    Typical configuration should look like:

    .. code-block:: yaml

        reco:
          cosmic_track_matching:
            cluster_min_length: 10.0
            min_matched_hits: 10
    """

    name = "cosmic_track_matching"
    aliases = ("cosmic_ray_track_matching",)
    need_geometry = True

    def __init__(
        self,
        input_cluster_list_names=None,
        cluster_min_length=10.0,
        sliding_fit_half_window=15,
        layer_pitch=0.3,
        min_x_overlap=3.0,
        min_x_overlap_fraction=0.8,
        max_point_displacement=1.5,
        max_hit_displacement=5.0,
        min_matched_point_fraction=0.8,
        min_matched_hits=10,
        num_sampling_points=100,
        geometry=None,
        trace=None,
    ):
        """Store the matching parameters.

        Parameters
        ----------
        input_cluster_list_names : Dict[str, str], optional
            Name of the cluster list of each view (`u`, `v` and `w` keys)
        cluster_min_length : float, default 10.0
            Minimum length of a cluster to seed a match
        sliding_fit_half_window : int, default 15
            Half-window of the sliding trajectory fits, in layers
        layer_pitch : float, default 0.3
            Layer width used in the sliding trajectory fits
        min_x_overlap : float, default 3.0
            Minimum shared drift range of two seed clusters
        min_x_overlap_fraction : float, default 0.8
            Minimum ratio of shared to total drift range of two seed clusters
        max_point_displacement : float, default 1.5
            Maximum distance between a hit and a predicted position
        max_hit_displacement : float, default 5.0
            Maximum distance between a matched hit and its closest neighbor
        min_matched_point_fraction : float, default 0.8
            Minimum fraction of predicted positions explained by matched hits
        min_matched_hits : int, default 10
            Minimum number of matched hits
        num_sampling_points : int, default 100
            Number of drift coordinates sampled along the shared range
        geometry : Union[WireGeometry, dict, str], optional
            Detector geometry (or its configuration). Default wire geometry
            if not specified.
        trace : callable, optional
            Hook called as `trace(stage, **info)` on candidate rejection,
            candidate acceptance and view commit
        """
        super().__init__()

        names = dict(CLUSTER_LIST_NAMES)
        if input_cluster_list_names is not None:
            unknown = set(input_cluster_list_names) - set(names)
            assert not unknown, f"Unknown view label(s): {unknown}"
            names.update(input_cluster_list_names)
        self.list_names = {v: names[v.label] for v in ViewEnum}

        assert num_sampling_points > 0, "Must sample at least one position."
        self.cluster_min_length = cluster_min_length
        self.sliding_fit_half_window = sliding_fit_half_window
        self.layer_pitch = layer_pitch
        self.min_x_overlap = min_x_overlap
        self.min_x_overlap_fraction = min_x_overlap_fraction
        self.max_point_displacement = max_point_displacement
        self.max_hit_displacement = max_hit_displacement
        self.min_matched_point_fraction = min_matched_point_fraction
        self.min_matched_hits = min_matched_hits
        self.num_sampling_points = num_sampling_points

        if geometry is None:
            geometry = WireGeometry()
        elif isinstance(geometry, (str, dict)):
            geometry = geo_factory(geometry)
        self.geometry = geometry

        self.trace = trace

    def process(self, data):
        """Match the tracks of one event and re-partition its clusters.

        Parameters
        ----------
        data : dict
            Dictionary of data products

        Returns
        -------
        dict
            Matching status, per-view summary of the cluster changes,
            per-view cluster counts and number of accepted candidates
        """
        store = data["store"]
        before = self.count_clusters(store)
        try:
            summary, num_accepted = self.run(store)

        except ClusterNotFoundError as err:
            logger.info("Skipping track matching: %s", err)
            status, num_accepted = "not_found", 0
            keys = ("created", "deleted", "modified", "unchanged")
            summary = {v.label: {k: [] for k in keys} for v in ViewEnum}

        else:
            status = "success"

        after = self.count_clusters(store)
        counts = {
            v.label: {"before": before[v.label], "after": after[v.label]}
            for v in ViewEnum
        }

        return {
            "match_status": status,
            "match_summary": summary,
            "match_counts": counts,
            "match_num_accepted": num_accepted,
        }

    def count_clusters(self, store):
        """Number of clusters in the input list of each view.

        Parameters
        ----------
        store : ClusterStore
            Event arena which owns the clusters

        Returns
        -------
        Dict[str, int]
            Number of clusters per view label (-1 if the list is missing)
        """
        counts = {}
        for v in ViewEnum:
            name = self.list_names[v]
            counts[v.label] = len(store.lists[name]) if name in store.lists else -1

        return counts

    def run(self, store):
        """Run the three matching passes, then commit them view by view.

        Parameters
        ----------
        store : ClusterStore
            Event arena which owns the clusters

        Returns
        -------
        Dict[str, dict]
            Summary of the cluster changes, per view label
        int
            Number of accepted match candidates, over all passes
        """
        # Snapshot the available clusters of each view, select clean ones
        available = {
            v: self.get_available_clusters(store, self.list_names[v]) for v in ViewEnum
        }
        clean = {v: self.select_clean_clusters(available[v]) for v in ViewEnum}

        # Fit each clean cluster once, for use in every pairing
        fits = SlidingFitCache(self.sliding_fit_half_window, self.layer_pitch)
        for v in ViewEnum:
            fits.add(clean[v])

        # Evaluate all the candidates before any view is modified
        associations = {}
        for view1, view2, view3 in VIEW_PASSES:
            associations[view3] = self.select_matched_tracks(
                fits, clean[view1], clean[view2], available[view3]
            )
        num_accepted = sum(len(a[1]) for a in associations.values())

        # Commit the new cluster boundaries, one view at a time
        summary = {}
        for v in ViewEnum:
            hit_associations, cluster_associations = associations[v]
            result = modify_clusters(
                store, self.list_names[v], hit_associations, cluster_associations
            )
            self._trace("commit", view=v, **result)
            summary[v.label] = result

        return summary, num_accepted

    def get_available_clusters(self, store, list_name):
        """Fetch the available clusters of a list, largest first.

        Parameters
        ----------
        store : ClusterStore
            Event arena which owns the clusters
        list_name : str
            Name of the cluster list

        Returns
        -------
        List[Cluster]
            Available clusters, sorted by decreasing number of hits
        """
        clusters = [c for c in store.get_list(list_name) if c.available]
        if not clusters:
            raise ClusterNotFoundError(list_name)

        return sorted(clusters, key=lambda c: (-c.size, c.id))

    def select_clean_clusters(self, clusters):
        """Select the clusters which are long enough to seed a match.

        Parameters
        ----------
        clusters : List[Cluster]
            Input clusters

        Returns
        -------
        List[Cluster]
            Clean clusters
        """
        min_length_sq = self.cluster_min_length**2

        return [c for c in clusters if c.length_squared >= min_length_sq]

    def select_matched_tracks(self, fits, clusters1, clusters2, clusters3):
        """Evaluate every pair of seed clusters against the third view.

        Parameters
        ----------
        fits : SlidingFitCache
            Trajectory fits of the seed clusters
        clusters1 : List[Cluster]
            Clean clusters of the first view
        clusters2 : List[Cluster]
            Clean clusters of the second view
        clusters3 : List[Cluster]
            Available clusters of the third view

        Returns
        -------
        hit_associations : Dict[int, Set[int]]
            Candidate ids which claimed each hit id
        cluster_associations : Dict[int, Set[int]]
            Hit ids claimed by each candidate id
        """
        hit_associations = defaultdict(set)
        cluster_associations = defaultdict(set)

        # Need clusters from three distinct views
        if not clusters1 or not clusters2 or not clusters3:
            return hit_associations, cluster_associations

        views = {clusters1[0].view, clusters2[0].view, clusters3[0].view}
        if len(views) != 3:
            return hit_associations, cluster_associations

        candidate_id = 0
        for cluster1 in clusters1:
            fit1 = fits.get(cluster1)
            if fit1 is None:
                continue

            for cluster2 in clusters2:
                fit2 = fits.get(cluster2)
                if fit2 is None:
                    continue

                candidate_id += 1
                matched = self.match_pair(candidate_id, fit1, fit2, clusters3)
                if matched is None:
                    continue

                for hit_id in matched.tolist():
                    hit_associations[hit_id].add(candidate_id)
                    cluster_associations[candidate_id].add(hit_id)

        logger.debug(
            "Evaluated %d candidate(s) for view %s, %d accepted.",
            candidate_id,
            ViewEnum(clusters3[0].view).name,
            len(cluster_associations),
        )

        return hit_associations, cluster_associations

    def match_pair(self, candidate_id, fit1, fit2, clusters):
        """Find the hits of the third view which follow a pair of tracks.

        Parameters
        ----------
        candidate_id : int
            Identifier of the match candidate
        fit1 : SlidingLinearFit
            Trajectory of the first seed cluster
        fit2 : SlidingLinearFit
            Trajectory of the second seed cluster
        clusters : List[Cluster]
            Available clusters of the third view

        Returns
        -------
        np.ndarray
            Ids of the matched hits (None if the candidate is rejected)
        """
        cluster1, cluster2 = fit1.cluster, fit2.cluster
        if not check_x_overlap(
            cluster1, cluster2, self.min_x_overlap, self.min_x_overlap_fraction
        ):
            return self._reject(candidate_id, "x_overlap")

        positions = project_positions(
            fit1, fit2, self.geometry, self.num_sampling_points
        )
        if not len(positions):
            return self._reject(candidate_id, "projection")

        hit_index, hit_points, associated = associate_hits(
            positions, clusters, self.max_point_displacement
        )
        if not check_cluster_spans(associated, cluster1, cluster2):
            return self._reject(candidate_id, "cluster_span")

        matched_index, matched_points = select_matched_hits(
            hit_index, hit_points, self.max_hit_displacement
        )
        if len(matched_index) < self.min_matched_hits:
            return self._reject(candidate_id, "matched_hits")

        fraction = matched_point_fraction(
            positions, matched_points, self.max_point_displacement
        )
        if fraction < self.min_matched_point_fraction:
            return self._reject(candidate_id, "point_fraction")

        self._trace(
            "accept",
            candidate_id=candidate_id,
            clusters=(cluster1.id, cluster2.id),
            positions=positions,
            hits=matched_index,
        )

        return matched_index

    def _reject(self, candidate_id, reason):
        """Report a rejected candidate to the trace hook.

        Parameters
        ----------
        candidate_id : int
            Identifier of the match candidate
        reason : str
            Name of the failed requirement
        """
        self._trace("reject", candidate_id=candidate_id, reason=reason)

    def _trace(self, stage, **info):
        """Forward an event to the trace hook, if there is one."""
        if self.trace is not None:
            self.trace(stage, **info)
