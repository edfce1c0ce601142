"""Data structures used to represent the hits and clusters of an event."""

from .cluster import Cluster
from .hit import Hit
from .store import ClusterStore
