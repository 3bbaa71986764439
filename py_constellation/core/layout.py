"""
Pure post-processing of a built constellation.

These are projections over an existing result for its consumers: a reveal
animation draws a growing prefix of the stars, and exports redraw the whole
figure on a canvas of another size. Neither reruns the pipeline.
"""

import math
from dataclasses import replace
from typing import Sequence

import numpy as np
import structlog

from .connectivity import Connection
from .constellation import Constellation, Star
from .projection import VIEWPORT_PADDING

logger = structlog.get_logger()


def _check_connections(stars: Sequence[Star], connections: Sequence[Connection]) -> None:
    ids = {star.id for star in stars}
    for connection in connections:
        if connection.from_id not in ids or connection.to_id not in ids:
            raise ValueError(
                f"Connection {connection.from_id}-{connection.to_id} references a missing star"
            )


def reveal(constellation: Constellation, progress: float) -> Constellation:
    """
    Take the prefix of stars visible at a given reveal progress.

    Args:
        constellation: Built constellation
        progress: Reveal fraction, clamped to [0, 1]

    Returns:
        The first ``floor(len(stars) * progress)`` stars and the connections
        whose endpoints are both among them

    Raises:
        ValueError: If a connection references a star that is not in the list
    """
    stars, connections = constellation
    _check_connections(stars, connections)

    progress = max(0.0, min(1.0, progress))
    visible = stars[:math.floor(len(stars) * progress)]
    visible_ids = {star.id for star in visible}

    return Constellation(
        stars=list(visible),
        connections=[
            c for c in connections
            if c.from_id in visible_ids and c.to_id in visible_ids
        ],
    )


def rescale(constellation: Constellation, target_size: float,
            padding: float = VIEWPORT_PADDING) -> Constellation:
    """
    Fit a constellation's screen positions into a square canvas.

    Positions are translated to the origin, scaled uniformly so the larger
    extent fills ``target_size - 2 * padding``, and offset by ``padding``.
    Relative layout and aspect ratio are preserved.

    Args:
        constellation: Built constellation
        target_size: Side length of the target canvas
        padding: Inset from each canvas edge

    Returns:
        Constellation with the same ids and connections and new positions

    Raises:
        ValueError: If the canvas cannot hold the padding, or a connection
            references a star that is not in the list
    """
    stars, connections = constellation
    _check_connections(stars, connections)

    usable = target_size - 2 * padding
    if not math.isfinite(target_size) or usable < 0:
        raise ValueError(
            f"Target size {target_size} is smaller than twice the padding ({padding})"
        )

    if not stars:
        return Constellation(stars=[], connections=list(connections))

    positions = np.array([star.screen_position for star in stars], dtype=np.float64)
    low = positions.min(axis=0)
    extent = positions.max(axis=0) - low

    factors = [usable / e for e in extent if e > 0]
    if factors:
        scale = min(factors)
        scaled = (positions - low) * scale + padding
    else:
        # Every star shares one position
        scale = 0.0
        scaled = np.full_like(positions, target_size / 2)

    logger.debug("Constellation rescaled", stars=len(stars),
                 target_size=target_size, scale=round(scale, 4))

    return Constellation(
        stars=[
            replace(star, screen_position=(float(x), float(y)))
            for star, (x, y) in zip(stars, scaled)
        ],
        connections=list(connections),
    )
