"""
Constellation building pipeline.

Turns an ordered list of visited locations into stars (clustered, projected
points) and connections (a single connected edge set between them):

    span analysis -> clustering -> intensity + projection -> connectivity

Every call is independent and side-effect free apart from logging. Star ids
are indices into the returned star list and carry no meaning across calls.
"""

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence

import structlog

from .clustering import cluster_locations
from .connectivity import (
    BRIGHT_INTENSITY,
    BRIGHT_NEIGHBORS,
    DIM_NEIGHBORS,
    Connection,
    ConnectivityBuilder,
)
from .geodesy import GeoPoint
from .intensity import MAX_INTENSITY, MIN_INTENSITY, scale_intensities
from .projection import (
    BOUNDS_PADDING_FRACTION,
    VIEWPORT_PADDING,
    ProjectionMapper,
    ScreenPoint,
    validate_viewport,
)
from .span_analysis import (
    MAX_CLUSTER_RADIUS_M,
    MIN_CLUSTER_RADIUS_M,
    SPAN_RADIUS_FRACTION,
    analyze_span,
)

logger = structlog.get_logger()


@dataclass
class ConstellationOptions:
    """Tunable constants of the constellation pipeline."""

    # Clustering radius
    span_radius_fraction: float = SPAN_RADIUS_FRACTION  # Share of the diagonal span
    min_cluster_radius_m: float = MIN_CLUSTER_RADIUS_M
    max_cluster_radius_m: float = MAX_CLUSTER_RADIUS_M

    # Projection
    viewport_padding: float = VIEWPORT_PADDING  # Screen units on every side
    bounds_padding_fraction: float = BOUNDS_PADDING_FRACTION

    # Intensity scale
    min_intensity: int = MIN_INTENSITY
    max_intensity: int = MAX_INTENSITY

    # Nearest-neighbor pass
    bright_neighbors: int = BRIGHT_NEIGHBORS
    dim_neighbors: int = DIM_NEIGHBORS
    bright_intensity: int = BRIGHT_INTENSITY


@dataclass(frozen=True)
class Star:
    """A rendered node: one cluster with its intensity and screen position."""
    id: int
    coordinate: GeoPoint
    intensity: int
    screen_position: ScreenPoint


class Constellation(NamedTuple):
    """Stars in cluster discovery order and the connections between them."""
    stars: List[Star]
    connections: List[Connection]


def build_constellation(locations: Sequence[Sequence[float]],
                        viewport: Sequence[float],
                        options: Optional[ConstellationOptions] = None) -> Constellation:
    """
    Build a connected constellation from visited locations.

    Args:
        locations: (lat, lon) points in visiting order; order affects clustering
        viewport: Target ``(width, height)`` in screen units
        options: Pipeline constants (defaults when omitted)

    Returns:
        Constellation of stars and connections. Empty input gives an empty one.

    Raises:
        ValueError: If locations are given and the viewport is non-finite or
            narrower than twice ``options.viewport_padding`` on either axis.
            Such a viewport is rejected outright rather than clamped, since it
            leaves no drawable area; every other input, NaN locations included,
            produces a constellation.
    """
    options = options or ConstellationOptions()

    if len(locations) == 0:
        return Constellation(stars=[], connections=[])

    viewport = validate_viewport(viewport, options.viewport_padding)

    span = analyze_span(
        locations,
        fraction=options.span_radius_fraction,
        min_radius_m=options.min_cluster_radius_m,
        max_radius_m=options.max_cluster_radius_m,
    )

    clusters = cluster_locations(locations, span.cluster_radius_m)

    intensities = scale_intensities(clusters, options.min_intensity, options.max_intensity)
    centers = [c.center for c in clusters]
    mapper = ProjectionMapper(
        centers, viewport,
        padding=options.viewport_padding,
        bounds_padding_fraction=options.bounds_padding_fraction,
    )
    positions = mapper.project_all(centers)

    stars = [
        Star(id=i, coordinate=center, intensity=intensity, screen_position=position)
        for i, (center, intensity, position) in enumerate(zip(centers, intensities, positions))
    ]

    builder = ConnectivityBuilder(
        positions, intensities,
        bright_neighbors=options.bright_neighbors,
        dim_neighbors=options.dim_neighbors,
        bright_intensity=options.bright_intensity,
    )
    connections = builder.build()

    logger.info("Constellation built",
                locations=len(locations),
                span_km=round(span.span_m / 1000, 1) if math.isfinite(span.span_m) else None,
                cluster_radius_km=round(span.cluster_radius_m / 1000, 2),
                stars=len(stars),
                connections=len(connections),
                intensity_range=(min(intensities), max(intensities)))

    return Constellation(stars=stars, connections=connections)
