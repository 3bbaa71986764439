"""
Connection graph construction for constellation stars.

Works purely in screen space over projected stars, in three passes:

1. Nearest-neighbor edges: every star links to its 2-3 closest stars,
   giving a locally dense web.
2. Island bridging: connected components are found with a disjoint set and
   chained together through their closest star pairs.
3. Isolated-star repair: any star still without an edge links to its
   nearest star.

Distances are never thresholded; long bridges are kept so that the result is
always a single component.
"""

from typing import Dict, FrozenSet, List, NamedTuple, Sequence, Set, Tuple

import numpy as np
import structlog
from scipy.spatial.distance import cdist

logger = structlog.get_logger()

BRIGHT_NEIGHBORS = 3
DIM_NEIGHBORS = 2
BRIGHT_INTENSITY = 3


class Connection(NamedTuple):
    """Undirected edge between two stars, referenced by star index."""
    from_id: int
    to_id: int

    @property
    def key(self) -> FrozenSet[int]:
        """Orientation-free identity of the edge."""
        return frozenset((self.from_id, self.to_id))


class DisjointSet:
    """Union-find over ``0..n-1`` with path compression and union by rank."""

    def __init__(self, n: int):
        self.parent = list(range(n))
        self.rank = [0] * n

    def find(self, i: int) -> int:
        root = i
        while self.parent[root] != root:
            root = self.parent[root]
        # Path compression
        while self.parent[i] != root:
            next_i = self.parent[i]
            self.parent[i] = root
            i = next_i
        return root

    def union(self, a: int, b: int) -> bool:
        """Merge the sets of ``a`` and ``b``. Returns False if already joined."""
        root_a, root_b = self.find(a), self.find(b)
        if root_a == root_b:
            return False
        if self.rank[root_a] < self.rank[root_b]:
            root_a, root_b = root_b, root_a
        self.parent[root_b] = root_a
        if self.rank[root_a] == self.rank[root_b]:
            self.rank[root_a] += 1
        return True

    def components(self) -> List[List[int]]:
        """Members of each set, ordered by their lowest member."""
        groups: Dict[int, List[int]] = {}
        for i in range(len(self.parent)):
            groups.setdefault(self.find(i), []).append(i)
        return list(groups.values())


class ConnectivityBuilder:
    """Builds a connected edge set over projected stars."""

    def __init__(self, positions: Sequence[Sequence[float]], intensities: Sequence[int],
                 bright_neighbors: int = BRIGHT_NEIGHBORS,
                 dim_neighbors: int = DIM_NEIGHBORS,
                 bright_intensity: int = BRIGHT_INTENSITY):
        """
        Args:
            positions: Screen ``(x, y)`` of each star, indexed by star id
            intensities: Intensity of each star, same order
            bright_neighbors: Neighbor count for stars at or above ``bright_intensity``
            dim_neighbors: Neighbor count for dimmer stars
            bright_intensity: Intensity threshold for the larger neighbor count
        """
        if len(positions) != len(intensities):
            raise ValueError(
                f"Got {len(positions)} positions but {len(intensities)} intensities"
            )

        self.n_stars = len(positions)
        self.intensities = list(intensities)
        self.bright_neighbors = bright_neighbors
        self.dim_neighbors = dim_neighbors
        self.bright_intensity = bright_intensity

        points = np.asarray(positions, dtype=np.float64).reshape(-1, 2)
        self.distances = cdist(points, points) if self.n_stars else np.empty((0, 0))

    def _neighbor_count(self, star: int) -> int:
        if self.intensities[star] >= self.bright_intensity:
            return self.bright_neighbors
        return self.dim_neighbors

    def nearest_neighbor_edges(self) -> List[Connection]:
        """Pass A: link each star to its closest stars, skipping duplicates."""
        edges: List[Connection] = []
        seen: Set[FrozenSet[int]] = set()

        for star in range(self.n_stars):
            # Stable sort keeps index order on equal distances
            order = np.argsort(self.distances[star], kind="stable")
            neighbors = [int(j) for j in order if j != star]

            for neighbor in neighbors[:self._neighbor_count(star)]:
                edge = Connection(star, neighbor)
                if edge.key in seen:
                    continue
                seen.add(edge.key)
                edges.append(edge)

        logger.debug("Nearest-neighbor edges built", stars=self.n_stars, edges=len(edges))
        return edges

    def _closest_pair(self, group_a: Sequence[int], group_b: Sequence[int]) -> Tuple[int, int]:
        block = self.distances[np.ix_(group_a, group_b)]
        # argmin returns the first minimum in row-major order
        flat = int(np.argmin(block))
        i, j = divmod(flat, len(group_b))
        return group_a[i], group_b[j]

    def bridge_components(self, edges: Sequence[Connection]) -> List[Connection]:
        """
        Pass B: chain disconnected components together.

        Components are taken in order of their lowest star index; each one is
        joined to the next through its closest pair of stars.

        Returns:
            The input edges followed by any bridging edges
        """
        dsu = DisjointSet(self.n_stars)
        for edge in edges:
            dsu.union(edge.from_id, edge.to_id)

        components = dsu.components()
        bridged = list(edges)

        for current, following in zip(components, components[1:]):
            a, b = self._closest_pair(current, following)
            bridged.append(Connection(a, b))
            dsu.union(a, b)
            logger.debug("Bridged island",
                         from_star=a, to_star=b,
                         distance=round(float(self.distances[a, b]), 2))

        if len(components) > 1:
            logger.debug("Islands bridged", components=len(components),
                         bridges=len(components) - 1)
        return bridged

    def repair_isolated(self, edges: Sequence[Connection]) -> List[Connection]:
        """
        Pass C: connect every star without an edge to its nearest star.

        Returns:
            The input edges followed by any repair edges
        """
        repaired = list(edges)
        if self.n_stars < 2:
            return repaired

        degree = [0] * self.n_stars
        for edge in repaired:
            degree[edge.from_id] += 1
            degree[edge.to_id] += 1

        for star in range(self.n_stars):
            if degree[star] > 0:
                continue
            row = self.distances[star].copy()
            row[star] = np.inf
            nearest = int(np.argmin(row))
            repaired.append(Connection(star, nearest))
            degree[star] += 1
            degree[nearest] += 1
            logger.debug("Connected isolated star", star=star, nearest=nearest)

        return repaired

    def build(self) -> List[Connection]:
        """Run all three passes and return the final connection list."""
        if self.n_stars < 2:
            return []

        edges = self.nearest_neighbor_edges()
        edges = self.bridge_components(edges)
        return self.repair_isolated(edges)
