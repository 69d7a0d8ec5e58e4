from __future__ import annotations

"""River tracing from the foot of mountains down to the ocean."""

import logging
import random
from typing import Dict, List, Optional

from .cell import MOUNTAIN_TERRAIN, Coordinate, TerrainType
from .grid import CARDINAL_DIRECTIONS, Grid
from .settings import MAX_RIVER_ATTEMPTS, MAX_RIVER_STEPS, RIVERS_PER_BIAS, GenerationSettings

logger = logging.getLogger("worldmap.hydrology")
logger.addHandler(logging.NullHandler())

RiverPath = List[Coordinate]

RIVER_BED = frozenset({TerrainType.GRASSLAND, TerrainType.HILL})

# Straight move first, then the two diagonals that keep the heading
HEADING_MOVES: Dict[Coordinate, List[Coordinate]] = {
    (1, 0): [(1, 0), (1, -1), (1, 1)],
    (-1, 0): [(-1, 0), (-1, -1), (-1, 1)],
    (0, 1): [(0, 1), (-1, 1), (1, 1)],
    (0, -1): [(0, -1), (-1, -1), (1, -1)],
}


def river_sources(grid: Grid) -> List[Coordinate]:
    """Grassland and hill tiles touching a mountain, row-major."""
    return [
        cell.coord
        for cell in grid
        if cell.terrain in RIVER_BED and grid.is_adjacent_to(cell.x, cell.y, MOUNTAIN_TERRAIN)
    ]


def walk_river(
    grid: Grid,
    source: Coordinate,
    rng: random.Random,
    max_steps: int = MAX_RIVER_STEPS,
) -> Optional[RiverPath]:
    """
    Walk from ``source`` in one random cardinal heading until a tile touching
    the ocean is reached.

    Returns the full path, or None when the walk hits a dead end or runs out
    of steps. Nothing is written to the grid.
    """
    heading = rng.choice(CARDINAL_DIRECTIONS)
    moves = HEADING_MOVES[heading]
    path: RiverPath = [source]
    x, y = source

    for _ in range(max_steps):
        if grid.is_adjacent_to(x, y, (TerrainType.OCEAN,), diagonal=False):
            return path
        options = [
            (x + dx, y + dy)
            for dx, dy in moves
            if grid.terrain_at(x + dx, y + dy) in RIVER_BED
        ]
        if not options:
            return None
        x, y = rng.choice(options)
        path.append((x, y))

    if grid.is_adjacent_to(x, y, (TerrainType.OCEAN,), diagonal=False):
        return path
    return None


def trace_rivers(grid: Grid, settings: GenerationSettings, rng: random.Random) -> List[RiverPath]:
    """
    Trace up to ``RIVERS_PER_BIAS * river_bias`` rivers from shuffled sources.

    Only complete source-to-coast paths are committed as river terrain.
    """
    target = int(RIVERS_PER_BIAS * settings.river_bias)
    sources = river_sources(grid)
    rng.shuffle(sources)

    rivers: List[RiverPath] = []
    attempts = 0
    abandoned = 0
    for source in sources:
        if len(rivers) >= target or attempts >= MAX_RIVER_ATTEMPTS:
            break
        attempts += 1
        # An earlier river may already run through this source
        if grid.terrain_at(*source) not in RIVER_BED:
            continue
        path = walk_river(grid, source, rng)
        if path is None:
            abandoned += 1
            continue
        for x, y in path:
            grid.set_terrain(x, y, TerrainType.RIVER)
        rivers.append(path)

    logger.debug(
        "Rivers: %d/%d traced from %d sources (%d abandoned, %d attempts)",
        len(rivers),
        target,
        len(sources),
        abandoned,
        attempts,
    )
    return rivers


__all__ = ["HEADING_MOVES", "RiverPath", "river_sources", "trace_rivers", "walk_river"]
