"""Tests for constellation connectivity."""

import numpy as np
import pytest
from scipy.sparse import coo_matrix
from scipy.sparse.csgraph import connected_components

from py_constellation.core.connectivity import Connection, ConnectivityBuilder, DisjointSet


def count_components(n_stars, edges):
    """Count connected components independently of the code under test."""
    if n_stars == 0:
        return 0
    rows = np.array([e.from_id for e in edges], dtype=np.int64)
    cols = np.array([e.to_id for e in edges], dtype=np.int64)
    graph = coo_matrix((np.ones(len(edges)), (rows, cols)), shape=(n_stars, n_stars))
    n_components, _ = connected_components(graph, directed=False)
    return n_components


def three_islands():
    """Three tight triangles of stars far apart on screen."""
    positions = []
    for offset in (0, 1000, 2000):
        positions += [(offset, 0), (offset + 1, 0), (offset, 1)]
    return positions


class TestDisjointSet:
    """Test the union-find structure."""

    def test_singletons(self):
        """Test that every element starts in its own set."""
        dsu = DisjointSet(4)
        assert dsu.components() == [[0], [1], [2], [3]]

    def test_union_and_find(self):
        """Test merging sets."""
        dsu = DisjointSet(5)

        assert dsu.union(0, 3)
        assert dsu.union(3, 4)
        assert not dsu.union(0, 4)

        assert dsu.find(0) == dsu.find(4)
        assert dsu.find(1) != dsu.find(0)

    def test_components_ordered_by_lowest_member(self):
        """Test that components come out in discovery order."""
        dsu = DisjointSet(6)
        dsu.union(5, 1)
        dsu.union(4, 2)
        dsu.union(3, 0)

        assert dsu.components() == [[0, 3], [1, 5], [2, 4]]

    def test_long_chain(self):
        """Test path compression on a deep chain."""
        dsu = DisjointSet(1000)
        for i in range(999):
            dsu.union(i, i + 1)

        assert len(dsu.components()) == 1
        root = dsu.find(999)
        assert all(dsu.parent[i] == root for i in range(1000) if dsu.find(i) == root)


class TestNearestNeighborEdges:
    """Test pass A."""

    def test_two_stars(self):
        """Test that two stars get a single edge."""
        builder = ConnectivityBuilder([(0, 0), (10, 0)], [1, 1])
        assert builder.nearest_neighbor_edges() == [Connection(0, 1)]

    def test_duplicates_skipped(self):
        """Test that reverse pairs are not added twice."""
        builder = ConnectivityBuilder([(0, 0), (10, 0), (30, 0)], [1, 1, 1])
        assert builder.nearest_neighbor_edges() == [
            Connection(0, 1), Connection(0, 2), Connection(1, 2),
        ]

    def test_dim_star_gets_two_neighbors(self):
        """Test the neighbor count below the brightness threshold."""
        positions = [(0, 0), (1, 0), (0, 1), (-1, 0), (0, -1)]
        builder = ConnectivityBuilder(positions, [2, 1, 1, 1, 1])

        edges = builder.nearest_neighbor_edges()
        assert [e for e in edges if e.from_id == 0] == [Connection(0, 1), Connection(0, 2)]

    def test_bright_star_gets_three_neighbors(self):
        """Test the neighbor count at the brightness threshold."""
        positions = [(0, 0), (1, 0), (0, 1), (-1, 0), (0, -1)]
        builder = ConnectivityBuilder(positions, [3, 1, 1, 1, 1])

        edges = builder.nearest_neighbor_edges()
        assert [e for e in edges if e.from_id == 0] == [
            Connection(0, 1), Connection(0, 2), Connection(0, 3),
        ]

    def test_ties_keep_star_order(self):
        """Test that equal distances resolve to the lower star index."""
        positions = [(0, 0), (5, 0), (-5, 0), (0, 5)]
        builder = ConnectivityBuilder(positions, [1, 1, 1, 1])

        edges = builder.nearest_neighbor_edges()
        assert edges[:2] == [Connection(0, 1), Connection(0, 2)]

    def test_islands_stay_disconnected(self):
        """Test that pass A alone leaves distant groups apart."""
        positions = three_islands()
        builder = ConnectivityBuilder(positions, [1] * len(positions))

        edges = builder.nearest_neighbor_edges()
        assert len(edges) == 9
        assert count_components(len(positions), edges) == 3


class TestBridgeComponents:
    """Test pass B."""

    def test_bridges_chain_islands(self):
        """Test that three islands get exactly two bridges between closest pairs."""
        positions = three_islands()
        builder = ConnectivityBuilder(positions, [1] * len(positions))

        edges = builder.nearest_neighbor_edges()
        bridged = builder.bridge_components(edges)

        assert bridged[:len(edges)] == edges
        assert bridged[len(edges):] == [Connection(1, 3), Connection(4, 6)]
        assert count_components(len(positions), bridged) == 1

    def test_connected_input_unchanged(self):
        """Test that a connected edge set gets no bridges."""
        builder = ConnectivityBuilder([(0, 0), (1, 0), (2, 0)], [1, 1, 1])
        edges = [Connection(0, 1), Connection(1, 2)]
        assert builder.bridge_components(edges) == edges

    def test_bridges_from_no_edges(self):
        """Test that bridging alone connects fully isolated stars."""
        positions = [(0, 0), (100, 0), (50, 80), (300, 300)]
        builder = ConnectivityBuilder(positions, [1] * 4)

        bridged = builder.bridge_components([])

        assert len(bridged) == 3
        assert count_components(4, bridged) == 1


class TestRepairIsolated:
    """Test pass C."""

    def test_isolated_stars_connected(self):
        """Test that stars without edges link to their nearest star."""
        builder = ConnectivityBuilder([(0, 0), (10, 0), (30, 0)], [1, 1, 1])
        assert builder.repair_isolated([]) == [Connection(0, 1), Connection(2, 1)]

    def test_repair_ties_pick_first(self):
        """Test that the nearest star is the first one on ties."""
        builder = ConnectivityBuilder([(0, 0), (-5, 0), (5, 0)], [1, 1, 1])
        assert builder.repair_isolated([]) == [Connection(0, 1), Connection(2, 0)]

    def test_connected_stars_untouched(self):
        """Test that stars with edges are left alone."""
        builder = ConnectivityBuilder([(0, 0), (10, 0)], [1, 1])
        assert builder.repair_isolated([Connection(0, 1)]) == [Connection(0, 1)]

    def test_single_star(self):
        """Test that a lone star cannot be repaired."""
        builder = ConnectivityBuilder([(0, 0)], [5])
        assert builder.repair_isolated([]) == []


class TestBuild:
    """Test the full three-pass build."""

    @pytest.mark.parametrize("n_stars", [0, 1])
    def test_trivial_sizes(self, n_stars):
        """Test that zero or one star gives no edges."""
        builder = ConnectivityBuilder([(0, 0)] * n_stars, [1] * n_stars)
        assert builder.build() == []

    def test_mismatched_inputs_rejected(self):
        """Test that positions and intensities must align."""
        with pytest.raises(ValueError):
            ConnectivityBuilder([(0, 0), (1, 1)], [1])

    def test_coincident_stars(self):
        """Test stars sharing one screen position."""
        edges = ConnectivityBuilder([(200, 200)] * 4, [1] * 4).build()

        assert count_components(4, edges) == 1
        assert all(e.from_id != e.to_id for e in edges)

    def test_connection_key_ignores_direction(self):
        """Test that reversed connections share a key."""
        assert Connection(2, 7).key == Connection(7, 2).key


@pytest.mark.parametrize("seed", range(8))
def test_random_layouts_connected_without_duplicates(seed):
    """Test connectivity and edge uniqueness on random star layouts."""
    rng = np.random.default_rng(seed)
    n_stars = int(rng.integers(2, 60))
    # Clumped layout so that pass A tends to leave islands
    anchors = rng.uniform(40, 760, size=(int(rng.integers(1, 6)), 2))
    positions = anchors[rng.integers(0, len(anchors), n_stars)] + rng.normal(0, 5, (n_stars, 2))
    intensities = rng.integers(1, 11, n_stars).tolist()

    edges = ConnectivityBuilder(positions.tolist(), intensities).build()

    assert count_components(n_stars, edges) == 1
    keys = [e.key for e in edges]
    assert len(keys) == len(set(keys))
    assert all(e.from_id != e.to_id for e in edges)
