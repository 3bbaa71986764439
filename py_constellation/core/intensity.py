"""Visual intensity scale for clusters."""

import math
from typing import List, Sequence

from .clustering import Cluster

MIN_INTENSITY = 1
MAX_INTENSITY = 10


def scale_intensity(member_count: int, total_count: int,
                    min_intensity: int = MIN_INTENSITY,
                    max_intensity: int = MAX_INTENSITY) -> int:
    """
    Convert a cluster's share of all locations into a 1-10 intensity.

    Each 2% of the total is one step, rounded half up, so any cluster holding
    19% or more saturates at the maximum.

    Args:
        member_count: Locations in the cluster
        total_count: Locations across all clusters

    Returns:
        Integer intensity in ``[min_intensity, max_intensity]``

    Raises:
        ValueError: If ``total_count`` is not positive
    """
    if total_count <= 0:
        raise ValueError(f"total_count must be positive, got {total_count}")

    percentage = member_count / total_count * 100.0
    steps = math.floor(percentage / 2.0 + 0.5)
    return int(max(min_intensity, min(max_intensity, steps)))


def scale_intensities(clusters: Sequence[Cluster],
                      min_intensity: int = MIN_INTENSITY,
                      max_intensity: int = MAX_INTENSITY) -> List[int]:
    """Intensity for every cluster, normalized by the summed member counts."""
    total = sum(c.member_count for c in clusters)
    return [
        scale_intensity(c.member_count, total, min_intensity, max_intensity)
        for c in clusters
    ]
