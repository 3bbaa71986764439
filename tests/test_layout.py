"""Tests for reveal and rescale of built constellations."""

import numpy as np
import pytest

from py_constellation.core.connectivity import Connection
from py_constellation.core.constellation import Constellation, Star, build_constellation
from py_constellation.core.geodesy import GeoPoint
from py_constellation.core.layout import rescale, reveal


def make_constellation(positions, connections=()):
    stars = [
        Star(id=i, coordinate=GeoPoint(float(i), float(i)), intensity=5, screen_position=p)
        for i, p in enumerate(positions)
    ]
    return Constellation(stars=stars, connections=[Connection(a, b) for a, b in connections])


TRIANGLE = make_constellation([(100, 100), (200, 100), (150, 300)], [(0, 1), (1, 2), (0, 2)])
CHAIN = make_constellation(
    [(50, 50), (60, 50), (70, 50), (80, 50)], [(0, 1), (1, 2), (2, 3)]
)


class TestReveal:
    """Test progressive reveal."""

    def test_full_progress_keeps_everything(self):
        """Test that progress 1 returns the whole constellation."""
        assert reveal(CHAIN, 1.0) == CHAIN

    def test_zero_progress_is_empty(self):
        """Test that progress 0 shows nothing."""
        assert reveal(CHAIN, 0.0) == Constellation([], [])

    def test_half_progress(self):
        """Test that only connections between visible stars are kept."""
        stars, connections = reveal(CHAIN, 0.5)

        assert [s.id for s in stars] == [0, 1]
        assert connections == [Connection(0, 1)]

    def test_prefix_is_floored(self):
        """Test that partial stars are not shown."""
        stars, connections = reveal(CHAIN, 0.74)
        assert len(stars) == 2
        assert len(connections) == 1

    @pytest.mark.parametrize("progress,expected", [(-0.5, 0), (1.7, 4)])
    def test_progress_clamped(self, progress, expected):
        """Test that out-of-range progress is clamped."""
        assert len(reveal(CHAIN, progress).stars) == expected

    def test_dangling_connection_rejected(self):
        """Test that connections to unknown stars are an error."""
        broken = Constellation(CHAIN.stars, [Connection(0, 9)])
        with pytest.raises(ValueError):
            reveal(broken, 0.5)


class TestRescale:
    """Test fitting into a square canvas."""

    def test_fits_larger_extent(self):
        """Test translation and uniform scaling by the larger extent."""
        stars, connections = rescale(TRIANGLE, 800)

        # Height 200 -> 720 sets the scale at 3.6
        np.testing.assert_allclose(
            [s.screen_position for s in stars],
            [(40, 40), (400, 40), (220, 760)],
        )
        assert connections == TRIANGLE.connections
        assert [s.id for s in stars] == [0, 1, 2]

    def test_keeps_star_attributes(self):
        """Test that only positions change."""
        stars, _ = rescale(TRIANGLE, 800)
        for old, new in zip(TRIANGLE.stars, stars):
            assert (new.id, new.coordinate, new.intensity) == (old.id, old.coordinate, old.intensity)

    def test_zero_extent_axis(self):
        """Test that a flat layout scales by its only non-zero extent."""
        stars, _ = rescale(make_constellation([(100, 50), (300, 50)], [(0, 1)]), 800)
        np.testing.assert_allclose([s.screen_position for s in stars], [(40, 40), (760, 40)])

    def test_single_star_centered(self):
        """Test that a single star goes to the canvas center."""
        stars, _ = rescale(make_constellation([(123, 45)]), 800)
        assert stars[0].screen_position == (400, 400)

    def test_empty(self):
        """Test that an empty constellation stays empty."""
        assert rescale(Constellation([], []), 800) == Constellation([], [])

    def test_custom_padding(self):
        """Test a custom canvas padding."""
        stars, _ = rescale(TRIANGLE, 100, padding=10)
        np.testing.assert_allclose(
            [s.screen_position for s in stars],
            [(10, 10), (50, 10), (30, 90)],
        )

    @pytest.mark.parametrize("target_size", [60, float("nan")])
    def test_invalid_target_rejected(self, target_size):
        """Test that a canvas without room for the padding is rejected."""
        with pytest.raises(ValueError):
            rescale(TRIANGLE, target_size)

    def test_dangling_connection_rejected(self):
        """Test that connections to unknown stars are an error."""
        broken = Constellation(TRIANGLE.stars, [Connection(0, 3)])
        with pytest.raises(ValueError):
            rescale(broken, 800)

    def test_built_constellation_fits(self):
        """Test rescaling a real pipeline result."""
        locations = [(48.85, 2.35), (51.5, -0.12), (41.9, 12.5), (40.4, -3.7)]
        built = build_constellation(locations, (400, 300))

        stars, _ = rescale(built, 1000)

        positions = np.array([s.screen_position for s in stars])
        assert positions.min() >= 40 - 1e-9
        assert positions.max() <= 960 + 1e-9
        assert np.isclose(positions.max(axis=0) - positions.min(axis=0), 920).any()
