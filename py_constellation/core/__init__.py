"""
Core constellation building functionality.
"""

from .geodesy import GeoPoint, BoundingBox, haversine_m
from .span_analysis import SpanAnalysis, analyze_span
from .clustering import Cluster, cluster_locations
from .intensity import scale_intensity, scale_intensities
from .projection import Viewport, ProjectionMapper, project_point
from .connectivity import Connection, ConnectivityBuilder, DisjointSet
from .constellation import Constellation, ConstellationOptions, Star, build_constellation
from .layout import reveal, rescale
from .locations import collapse_track, most_visited

__all__ = ['GeoPoint', 'BoundingBox', 'haversine_m',
           'SpanAnalysis', 'analyze_span',
           'Cluster', 'cluster_locations',
           'scale_intensity', 'scale_intensities',
           'Viewport', 'ProjectionMapper', 'project_point',
           'Connection', 'ConnectivityBuilder', 'DisjointSet',
           'Constellation', 'ConstellationOptions', 'Star', 'build_constellation',
           'reveal', 'rescale',
           'collapse_track', 'most_visited']
