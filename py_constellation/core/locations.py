"""
Preparation and statistics over raw visited locations.

A photo library yields many coordinates per place. ``collapse_track`` reduces
a time-ordered track to one location per place before it is handed to the
constellation pipeline, and ``most_visited`` finds the busiest place.
"""

from typing import List, Optional, Sequence

import structlog

from .geodesy import GeoPoint, haversine_m

logger = structlog.get_logger()

TRACK_MINIMUM_DISTANCE_M = 1609.34  # One mile
MOST_VISITED_RADIUS_M = 5_000.0


def collapse_track(points: Sequence[Sequence[float]],
                   minimum_distance_m: float = TRACK_MINIMUM_DISTANCE_M) -> List[GeoPoint]:
    """
    Drop consecutive points that stay near the last kept point.

    The first point is always kept; a later point is kept only if it lies
    more than ``minimum_distance_m`` from the previously kept one.

    Args:
        points: (lat, lon) points in time order
        minimum_distance_m: Movement needed to count as a new place

    Returns:
        Kept points, in order
    """
    kept: List[GeoPoint] = []
    for point in points:
        point = GeoPoint(float(point[0]), float(point[1]))
        if not kept or haversine_m(kept[-1], point) > minimum_distance_m:
            kept.append(point)

    logger.debug("Track collapsed", points=len(points), places=len(kept))
    return kept


def most_visited(points: Sequence[Sequence[float]],
                 radius_m: float = MOST_VISITED_RADIUS_M) -> Optional[GeoPoint]:
    """
    Find the anchor of the busiest place.

    Each point joins the first existing place whose anchor is strictly within
    ``radius_m``; otherwise it anchors a new place. The anchor with the most
    points wins, earliest place on ties.

    Returns:
        Anchor of the most visited place, or None for no points
    """
    anchors: List[GeoPoint] = []
    counts: List[int] = []

    for point in points:
        point = GeoPoint(float(point[0]), float(point[1]))
        for i, anchor in enumerate(anchors):
            if haversine_m(point, anchor) < radius_m:
                counts[i] += 1
                break
        else:
            anchors.append(point)
            counts.append(1)

    if not anchors:
        return None

    best = counts.index(max(counts))
    return anchors[best]
