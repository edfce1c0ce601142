"""Event-level arena which owns all the hits and clusters of one event.

Clusters are referred to by integer ids throughout. Cluster lists are
published as immutable tuples of cluster ids: replacing a list never
mutates a snapshot held by someone else.
"""

import numpy as np

from trimatch.utils.enums import ViewEnum
from trimatch.utils.errors import ClusterNotFoundError, InvariantViolationError
from trimatch.utils.globals import CLUSTER_LIST_NAMES, INVAL_ID

from .cluster import Cluster
from .hit import Hit

__all__ = ["ClusterStore"]


class ClusterStore:
    """Owns the hits and clusters of one event.

    Attributes
    ----------
    hits : List[Hit]
        List of hits, the index of a hit in this list is its id
    clusters : Dict[int, Cluster]
        Map from cluster id to live cluster objects
    lists : Dict[str, Tuple[int]]
        Published cluster lists, as tuples of cluster ids
    """

    def __init__(self):
        """Initialize an empty store."""
        self.hits = []
        self.clusters = {}
        self.lists = {}
        self._positions = np.empty((0, 2), dtype=np.float32)
        self._next_id = 0

    @classmethod
    def from_arrays(
        cls, view, position, charge, cluster, available=None, list_names=None
    ):
        """Build a store from flat per-hit arrays.

        Parameters
        ----------
        view : np.ndarray
            (N) View of each hit
        position : np.ndarray
            (N, 2) Position of each hit
        charge : np.ndarray
            (N) Charge of each hit
        cluster : np.ndarray
            (N) Cluster label of each hit
        available : np.ndarray, optional
            (C) Availability flag of each cluster label. All available if
            not specified.
        list_names : Dict[str, str], optional
            Name of the cluster list to publish for each view label

        Returns
        -------
        ClusterStore
            Populated store
        """
        cluster = np.asarray(cluster, dtype=np.int64)
        assert np.all(cluster > INVAL_ID), "Every hit must belong to a cluster."
        list_names = list_names or CLUSTER_LIST_NAMES

        store = cls()
        store.add_hits(view, position, charge)

        # Build one cluster per label, sort them into per-view lists
        view_ids = {v: [] for v in ViewEnum}
        for label in np.unique(cluster):
            is_available = True if available is None else bool(available[label])
            index = np.flatnonzero(cluster == label)
            new_cluster = store.create(index, available=is_available)
            view_ids[ViewEnum(new_cluster.view)].append(new_cluster.id)

        for v, ids in view_ids.items():
            store.save_list(list_names[v.label], ids)

        return store

    @property
    def num_hits(self):
        """Number of hits in the event.

        Returns
        -------
        int
            Number of hits
        """
        return len(self.hits)

    @property
    def positions(self):
        """Positions of all the hits in the event.

        Returns
        -------
        np.ndarray
            (N, 2) Hit positions
        """
        return self._positions

    def add_hits(self, view, position, charge):
        """Register new hits in the arena.

        Parameters
        ----------
        view : np.ndarray
            (N) View of each hit
        position : np.ndarray
            (N, 2) Position of each hit
        charge : np.ndarray
            (N) Charge of each hit

        Returns
        -------
        np.ndarray
            (N) Ids assigned to the new hits
        """
        position = np.asarray(position, dtype=np.float32).reshape(-1, 2)
        assert len(view) == len(position) == len(charge), (
            "The hit view, position and charge arrays must have the same length."
        )

        offset = len(self.hits)
        for i, (v, pos, q) in enumerate(zip(view, position, charge)):
            self.hits.append(
                Hit(id=offset + i, view=int(v), position=pos.copy(), charge=float(q))
            )

        self._positions = np.vstack([self._positions, position])

        return np.arange(offset, len(self.hits), dtype=np.int64)

    def create(self, index, available=True):
        """Create a new cluster from a set of hit ids.

        Parameters
        ----------
        index : array_like
            Ids of the hits that make up the cluster
        available : bool, default True
            Availability flag of the new cluster

        Returns
        -------
        Cluster
            Newly created cluster
        """
        index = np.unique(np.asarray(index, dtype=np.int64))
        assert len(index), "Cannot create a cluster without hits."
        views = {self.hits[i].view for i in index}
        assert len(views) == 1, "All the hits of a cluster must share a view."

        cluster = Cluster(
            id=self._next_id,
            view=views.pop(),
            index=index,
            points=self._positions[index],
            available=available,
        )
        self.clusters[cluster.id] = cluster
        self._next_id += 1

        return cluster

    def delete(self, cluster_id):
        """Delete a cluster from the arena. Its hits are left orphaned.

        Parameters
        ----------
        cluster_id : int
            Id of the cluster to delete
        """
        if cluster_id not in self.clusters:
            raise KeyError(f"Cluster {cluster_id} does not exist.")

        del self.clusters[cluster_id]

    def remove_hit(self, cluster_id, hit_id):
        """Remove one hit from a cluster.

        Parameters
        ----------
        cluster_id : int
            Id of the cluster to remove the hit from
        hit_id : int
            Id of the hit to remove
        """
        cluster = self.clusters[cluster_id]
        keep = cluster.index != hit_id
        if keep.all():
            raise KeyError(f"Hit {hit_id} is not in cluster {cluster_id}.")
        if not keep.any():
            raise ValueError(
                f"Cannot remove the last hit of cluster {cluster_id}, delete it."
            )

        cluster.index = cluster.index[keep]
        cluster.points = cluster.points[keep]

    def get_list(self, name):
        """Returns the clusters of the current snapshot of a named list.

        Parameters
        ----------
        name : str
            Name of the cluster list

        Returns
        -------
        List[Cluster]
            Clusters in the list
        """
        if name not in self.lists:
            raise ClusterNotFoundError(name)

        clusters = []
        for cluster_id in self.lists[name]:
            if cluster_id not in self.clusters:
                raise InvariantViolationError(
                    f"List `{name}` refers to deleted cluster {cluster_id}."
                )
            clusters.append(self.clusters[cluster_id])

        return clusters

    def save_list(self, name, cluster_ids):
        """Publish a new snapshot of a named list, replacing the previous one.

        Parameters
        ----------
        name : str
            Name of the cluster list
        cluster_ids : Iterable[int]
            Ids of the clusters in the list

        Returns
        -------
        Tuple[int]
            Published snapshot
        """
        snapshot = tuple(int(i) for i in cluster_ids)
        missing = [i for i in snapshot if i not in self.clusters]
        assert not missing, f"Cannot publish unknown clusters: {missing}"
        self.lists[name] = snapshot

        return snapshot

    def check_ownership(self, name):
        """Check that every hit in a list is owned by exactly one cluster.

        Parameters
        ----------
        name : str
            Name of the cluster list
        """
        index = [c.index for c in self.get_list(name)]
        if not index:
            return

        _, counts = np.unique(np.concatenate(index), return_counts=True)
        if np.any(counts > 1):
            raise InvariantViolationError(
                f"{np.sum(counts > 1)} hit(s) of list `{name}` are owned by "
                "more than one cluster."
            )

    def labels(self):
        """Returns the cluster label of each hit, as given by the live clusters.

        Returns
        -------
        np.ndarray
            (N) Cluster id of each hit (-1 if the hit is not in any cluster)
        """
        labels = np.full(self.num_hits, INVAL_ID, dtype=np.int64)
        for cluster in self.clusters.values():
            labels[cluster.index] = cluster.id

        return labels
