"""Commits hit reassignments to the clusters of one view.

Given the hits claimed by each accepted match candidate, moves the claimed
hits out of their current clusters and into one new cluster per candidate.
Hits claimed by more than one candidate are left where they are.
"""

from collections import defaultdict

from trimatch.utils.errors import InvariantViolationError
from trimatch.utils.logger import logger

__all__ = ["modify_clusters"]


def modify_clusters(store, list_name, hit_associations, cluster_associations):
    """Re-partition the hits of one view according to the match candidates.

    Parameters
    ----------
    store : ClusterStore
        Event arena which owns the clusters
    list_name : str
        Name of the cluster list of the view to modify
    hit_associations : Dict[int, Set[int]]
        Candidate ids which claimed each hit id
    cluster_associations : Dict[int, Set[int]]
        Hit ids claimed by each candidate id

    Returns
    -------
    dict
        Ids of the `created`, `deleted`, `modified` and `unchanged` clusters
    """
    summary = {"created": [], "deleted": [], "modified": [], "unchanged": []}

    # Build the ownership tables from the current state of the list
    hits_to_clusters = defaultdict(set)
    clusters_to_hits = {}
    for cluster in store.get_list(list_name):
        if not cluster.available:
            continue

        clusters_to_hits[cluster.id] = set(cluster.index.tolist())
        for hit_id in cluster.index.tolist():
            hits_to_clusters[hit_id].add(cluster.id)

    # Sort the unambiguous claims into removals and creations
    clusters_to_modify = defaultdict(set)
    clusters_to_create = defaultdict(set)
    candidate_owners = defaultdict(set)
    for candidate_id in sorted(cluster_associations):
        for hit_id in sorted(cluster_associations[candidate_id]):
            if len(hit_associations[hit_id]) > 1:
                continue

            owners = hits_to_clusters.get(hit_id, ())
            if len(owners) != 1:
                raise InvariantViolationError(
                    f"Hit {hit_id} is owned by {len(owners)} cluster(s) in list "
                    f"`{list_name}`, expected exactly one."
                )

            owner = next(iter(owners))
            clusters_to_modify[owner].add(hit_id)
            clusters_to_create[candidate_id].add(hit_id)
            candidate_owners[candidate_id].add(owner)

    # A candidate which claims exactly one whole cluster leaves it in place
    for candidate_id, hit_ids in list(clusters_to_create.items()):
        owners = candidate_owners[candidate_id]
        if len(owners) != 1:
            continue

        owner = next(iter(owners))
        if hit_ids == clusters_to_hits[owner]:
            del clusters_to_create[candidate_id]
            del clusters_to_modify[owner]
            summary["unchanged"].append(owner)

    if not clusters_to_create:
        return summary

    # Remove the claimed hits from their current clusters
    for cluster_id, hit_ids in clusters_to_modify.items():
        if not clusters_to_hits[cluster_id] - hit_ids:
            store.delete(cluster_id)
            summary["deleted"].append(cluster_id)
        else:
            for hit_id in sorted(hit_ids):
                store.remove_hit(cluster_id, hit_id)
            summary["modified"].append(cluster_id)

    # Create one new cluster per candidate
    for candidate_id in sorted(clusters_to_create):
        hit_ids = clusters_to_create[candidate_id]
        if not hit_ids:
            raise InvariantViolationError(
                f"Match candidate {candidate_id} has no hit left to cluster."
            )

        summary["created"].append(store.create(sorted(hit_ids)).id)

    # Publish the updated list, replacing the previous snapshot
    deleted = set(summary["deleted"])
    kept = [i for i in store.lists[list_name] if i not in deleted]
    store.save_list(list_name, kept + summary["created"])

    logger.debug(
        "Re-partitioned list `%s`: %d created, %d deleted, %d modified.",
        list_name,
        len(summary["created"]),
        len(summary["deleted"]),
        len(summary["modified"]),
    )

    return summary
