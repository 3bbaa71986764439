"""
Greedy single-link clustering of visited locations.

The first remaining location seeds a cluster and absorbs every remaining
location strictly within the cluster radius of it. Absorbed locations are
never reconsidered, so results depend on input order. This is a visual
grouping, not a centroid analysis.
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
import structlog

from .geodesy import GeoPoint, as_coordinate_array, haversine_many_m

logger = structlog.get_logger()


@dataclass(frozen=True)
class Cluster:
    """A group of nearby locations collapsed to their mean position."""
    center: GeoPoint
    member_count: int


def cluster_locations(points: Sequence[Sequence[float]], radius_m: float) -> List[Cluster]:
    """
    Group locations into clusters around greedily chosen seeds.

    Args:
        points: (lat, lon) points in visiting order
        radius_m: Great-circle radius in meters; members are strictly closer

    Returns:
        Clusters in the order their seeds were picked
    """
    coords = as_coordinate_array(points)
    remaining = np.arange(len(coords))
    clusters: List[Cluster] = []

    while len(remaining) > 0:
        seed = remaining[0]
        rest = remaining[1:]

        distances = haversine_many_m(coords[seed], coords[rest])
        # NaN distances compare False and stay in the working list
        near = distances < radius_m

        members = np.concatenate(([seed], rest[near]))
        remaining = rest[~near]

        center_lat, center_lon = np.mean(coords[members], axis=0)
        clusters.append(Cluster(
            center=GeoPoint(float(center_lat), float(center_lon)),
            member_count=int(len(members)),
        ))

    logger.debug("Clusters formed",
                 locations=len(coords),
                 clusters=len(clusters),
                 radius_m=round(radius_m, 1))

    return clusters
