"""Cluster manipulation utilities."""

from .repartition import modify_clusters
