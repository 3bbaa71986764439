"""
Geographic span analysis.

Derives the bounding box of a set of locations and the adaptive clustering
radius used by the cluster engine. The radius scales with the diagonal span
of the input, which keeps the cluster count roughly constant from city trips
to intercontinental ones.
"""

import math
from dataclasses import dataclass
from typing import Sequence

import structlog

from .geodesy import BoundingBox, bounding_box, haversine_m

logger = structlog.get_logger()

SPAN_RADIUS_FRACTION = 0.08
MIN_CLUSTER_RADIUS_M = 2_000.0
MAX_CLUSTER_RADIUS_M = 100_000.0


@dataclass(frozen=True)
class SpanAnalysis:
    """Bounds and clustering radius derived from a location set."""
    bounds: BoundingBox
    span_m: float            # NW corner to SE corner, great-circle
    cluster_radius_m: float


def cluster_radius_for_span(span_m: float,
                            fraction: float = SPAN_RADIUS_FRACTION,
                            min_radius_m: float = MIN_CLUSTER_RADIUS_M,
                            max_radius_m: float = MAX_CLUSTER_RADIUS_M) -> float:
    """
    Clamp a fraction of the diagonal span into the allowed radius range.

    A non-finite span falls back to the minimum radius.
    """
    if not math.isfinite(span_m):
        return min_radius_m
    return max(min_radius_m, min(max_radius_m, span_m * fraction))


def analyze_span(points: Sequence[Sequence[float]],
                 fraction: float = SPAN_RADIUS_FRACTION,
                 min_radius_m: float = MIN_CLUSTER_RADIUS_M,
                 max_radius_m: float = MAX_CLUSTER_RADIUS_M) -> SpanAnalysis:
    """
    Compute the bounding box, diagonal span and cluster radius.

    Args:
        points: Non-empty sequence of (lat, lon) points
        fraction: Share of the diagonal span used as radius
        min_radius_m: Radius floor in meters
        max_radius_m: Radius cap in meters

    Returns:
        SpanAnalysis for the input

    Raises:
        ValueError: If ``points`` is empty
    """
    if len(points) == 0:
        raise ValueError("analyze_span requires at least one location")

    bounds = bounding_box(points)
    if bounds is None:
        # Every coordinate is NaN; nothing to measure
        nan = float("nan")
        bounds = BoundingBox(nan, nan, nan, nan)
        span_m = nan
    else:
        span_m = haversine_m(bounds.northwest, bounds.southeast)

    radius = cluster_radius_for_span(span_m, fraction, min_radius_m, max_radius_m)

    logger.debug("Span analyzed",
                 locations=len(points),
                 span_km=round(span_m / 1000, 3) if math.isfinite(span_m) else None,
                 cluster_radius_km=round(radius / 1000, 3))

    return SpanAnalysis(bounds=bounds, span_m=span_m, cluster_radius_m=radius)
