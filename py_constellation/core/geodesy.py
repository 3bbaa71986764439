"""Geographic primitives shared by the constellation pipeline."""

import math
from typing import Iterable, NamedTuple, Optional, Sequence

import numpy as np

EARTH_RADIUS_M = 6_371_000.0


class GeoPoint(NamedTuple):
    """A latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float

    def is_finite(self) -> bool:
        return math.isfinite(self.latitude) and math.isfinite(self.longitude)


class BoundingBox(NamedTuple):
    """Axis-aligned latitude/longitude bounds."""
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    @property
    def northwest(self) -> GeoPoint:
        return GeoPoint(self.max_lat, self.min_lon)

    @property
    def southeast(self) -> GeoPoint:
        return GeoPoint(self.min_lat, self.max_lon)

    @property
    def lat_range(self) -> float:
        return self.max_lat - self.min_lat

    @property
    def lon_range(self) -> float:
        return self.max_lon - self.min_lon

    def padded(self, fraction: float) -> "BoundingBox":
        """Grow each axis by ``fraction`` of its range on both sides."""
        lat_pad = self.lat_range * fraction
        lon_pad = self.lon_range * fraction
        return BoundingBox(
            min_lat=self.min_lat - lat_pad,
            max_lat=self.max_lat + lat_pad,
            min_lon=self.min_lon - lon_pad,
            max_lon=self.max_lon + lon_pad,
        )


def as_coordinate_array(points: Iterable[Sequence[float]]) -> np.ndarray:
    """Stack points into an ``(n, 2)`` float array of ``[lat, lon]`` rows."""
    coords = np.array([[p[0], p[1]] for p in points], dtype=np.float64)
    return coords.reshape(-1, 2)


def bounding_box(points: Iterable[Sequence[float]]) -> Optional[BoundingBox]:
    """
    Compute the bounds of the finite points in a collection.

    NaN or infinite coordinates are skipped.

    Returns:
        BoundingBox, or None when no finite point exists
    """
    coords = as_coordinate_array(points)
    finite = coords[np.all(np.isfinite(coords), axis=1)]
    if len(finite) == 0:
        return None

    return BoundingBox(
        min_lat=float(np.min(finite[:, 0])),
        max_lat=float(np.max(finite[:, 0])),
        min_lon=float(np.min(finite[:, 1])),
        max_lon=float(np.max(finite[:, 1])),
    )


def haversine_m(a: Sequence[float], b: Sequence[float]) -> float:
    """Great-circle distance in meters between two (lat, lon) points."""
    lat1 = math.radians(a[0])
    lon1 = math.radians(a[1])
    lat2 = math.radians(b[0])
    lon2 = math.radians(b[1])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Rounding can push h a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(1.0, h)))


def haversine_many_m(origin: Sequence[float], coords: np.ndarray) -> np.ndarray:
    """
    Vectorized great-circle distance from one point to many.

    Args:
        origin: (lat, lon) of the reference point
        coords: ``(n, 2)`` array of ``[lat, lon]`` rows

    Returns:
        Array of n distances in meters. NaN rows yield NaN.
    """
    if len(coords) == 0:
        return np.empty(0, dtype=np.float64)

    lat1 = np.radians(origin[0])
    lon1 = np.radians(origin[1])
    lat2 = np.radians(coords[:, 0])
    lon2 = np.radians(coords[:, 1])

    h = (np.sin((lat2 - lat1) / 2) ** 2
         + np.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2) ** 2)
    return 2 * EARTH_RADIUS_M * np.arcsin(np.sqrt(np.minimum(1.0, h)))
