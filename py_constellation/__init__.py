"""Constellation graphs from visited places."""

from .core import Constellation, ConstellationOptions, GeoPoint, Viewport, build_constellation

__version__ = "0.1.0"

__all__ = ['Constellation', 'ConstellationOptions', 'GeoPoint', 'Viewport', 'build_constellation']
