"""Reconstruction algorithms which operate on the clusters of one event."""

from .manager import RecoManager
from .track_matching import CosmicTrackMatchingAlgorithm
