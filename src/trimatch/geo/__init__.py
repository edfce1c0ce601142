"""Detector geometry classes."""

from .factories import geo_factory
from .wire import WireGeometry
