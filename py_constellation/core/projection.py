"""
Projection of geographic coordinates into a bounded 2D viewport.

Longitude maps linearly to x (west to east, left to right) and latitude to y
with north up. The mapping is fitted to the bounds of every cluster center,
grown by a fraction of its range, and inset by a fixed padding.
"""

import math
from typing import List, NamedTuple, Optional, Sequence, Tuple

import structlog

from .geodesy import BoundingBox, bounding_box

logger = structlog.get_logger()

VIEWPORT_PADDING = 40.0
BOUNDS_PADDING_FRACTION = 0.2

ScreenPoint = Tuple[float, float]


class Viewport(NamedTuple):
    """Target drawing area in screen units."""
    width: float
    height: float

    @property
    def center(self) -> ScreenPoint:
        return (self.width / 2, self.height / 2)


def validate_viewport(viewport: Sequence[float], padding: float = VIEWPORT_PADDING) -> Viewport:
    """
    Coerce a ``(width, height)`` pair into a Viewport.

    Raises:
        ValueError: If a dimension is non-finite or leaves no room inside the padding
    """
    width, height = float(viewport[0]), float(viewport[1])
    for name, value in (("width", width), ("height", height)):
        if not math.isfinite(value):
            raise ValueError(f"Viewport {name} must be finite, got {value}")
        if value < 2 * padding:
            raise ValueError(
                f"Viewport {name} {value} is smaller than twice the padding ({padding})"
            )
    return Viewport(width, height)


class ProjectionMapper:
    """Maps lat/lon coordinates onto a viewport fitted to a set of centers."""

    def __init__(self, centers: Sequence[Sequence[float]], viewport: Sequence[float],
                 padding: float = VIEWPORT_PADDING,
                 bounds_padding_fraction: float = BOUNDS_PADDING_FRACTION):
        """
        Args:
            centers: Cluster centers that define the mapped region
            viewport: Target ``(width, height)``
            padding: Inset from every viewport edge
            bounds_padding_fraction: Growth of the geographic bounds per axis
        """
        self.viewport = validate_viewport(viewport, padding)
        self.padding = padding

        bounds = bounding_box(centers)
        self.bounds: Optional[BoundingBox] = (
            bounds.padded(bounds_padding_fraction) if bounds is not None else None
        )

        self.usable_width = self.viewport.width - 2 * padding
        self.usable_height = self.viewport.height - 2 * padding

        logger.debug("Projection fitted",
                     centers=len(centers),
                     bounds=tuple(round(v, 4) for v in self.bounds) if self.bounds else None,
                     viewport=tuple(self.viewport))

    @staticmethod
    def _normalize(value: float, low: float, span: float) -> float:
        # Collapsed axis: everything sits in the middle
        if span == 0:
            return 0.5
        return (value - low) / span

    def project(self, point: Sequence[float]) -> ScreenPoint:
        """
        Project one (lat, lon) point into screen space.

        NaN coordinates and an empty center set both map to the viewport center.
        """
        lat, lon = point[0], point[1]
        if self.bounds is None or math.isnan(lat) or math.isnan(lon):
            return self.viewport.center

        norm_lon = self._normalize(lon, self.bounds.min_lon, self.bounds.lon_range)
        norm_lat = self._normalize(lat, self.bounds.min_lat, self.bounds.lat_range)

        x = self.padding + norm_lon * self.usable_width
        y = self.padding + (1 - norm_lat) * self.usable_height

        x = max(self.padding, min(self.viewport.width - self.padding, x))
        y = max(self.padding, min(self.viewport.height - self.padding, y))
        return (x, y)

    def project_all(self, points: Sequence[Sequence[float]]) -> List[ScreenPoint]:
        """Project every point in order."""
        return [self.project(p) for p in points]


def project_point(point: Sequence[float], centers: Sequence[Sequence[float]],
                  viewport: Sequence[float],
                  padding: float = VIEWPORT_PADDING) -> ScreenPoint:
    """Convenience wrapper projecting a single point against ``centers``."""
    return ProjectionMapper(centers, viewport, padding).project(point)
