#!/usr/bin/env python3
"""
Simple demo script showing constellation building.
"""

import numpy as np
from py_constellation.core import (
    build_constellation,
    collapse_track,
    most_visited,
    rescale,
    reveal,
)


def make_trip(seed=42):
    """A photo library's worth of points around a few cities."""
    rng = np.random.default_rng(seed)
    cities = {
        'Lisbon': (38.72, -9.14),
        'Madrid': (40.42, -3.70),
        'Paris': (48.86, 2.35),
        'Berlin': (52.52, 13.40),
        'Rome': (41.90, 12.50),
    }
    visits = {'Lisbon': 40, 'Madrid': 15, 'Paris': 60, 'Berlin': 10, 'Rome': 25}

    points = []
    for name, (lat, lon) in cities.items():
        scatter = rng.normal(0, 0.05, size=(visits[name], 2))
        points += [(lat + dlat, lon + dlon) for dlat, dlon in scatter]
    return points


def main():
    """Demonstrate the constellation pipeline."""
    print("Py-Constellation Demo")
    print("=" * 40)

    points = make_trip()
    print(f"\nRaw track: {len(points)} points")

    places = collapse_track(points)
    print(f"Collapsed track: {len(places)} places")

    busiest = most_visited(points)
    print(f"Most visited: ({busiest.latitude:.2f}, {busiest.longitude:.2f})")

    width, height = 400, 400
    stars, connections = build_constellation(points, (width, height))

    print(f"\nConstellation ({width}x{height}):")
    print("-" * 30)
    print(f"  Stars: {len(stars)}")
    print(f"  Connections: {len(connections)}")
    for star in stars:
        x, y = star.screen_position
        bar = '*' * star.intensity
        print(f"    #{star.id:2d} ({star.coordinate.latitude:6.2f}, "
              f"{star.coordinate.longitude:6.2f}) -> ({x:5.1f}, {y:5.1f}) {bar}")

    print("\nReveal animation:")
    print("-" * 30)
    for progress in (0.25, 0.5, 0.75, 1.0):
        visible = reveal((stars, connections), progress)
        print(f"  {progress:4.0%}: {len(visible.stars)} stars, "
              f"{len(visible.connections)} connections")

    print("\nExport at 1024x1024:")
    print("-" * 30)
    exported = rescale((stars, connections), 1024)
    xs = [s.screen_position[0] for s in exported.stars]
    ys = [s.screen_position[1] for s in exported.stars]
    print(f"  x range: {min(xs):.1f}-{max(xs):.1f}")
    print(f"  y range: {min(ys):.1f}-{max(ys):.1f}")


if __name__ == "__main__":
    main()
