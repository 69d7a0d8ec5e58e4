from __future__ import annotations

"""Fill one-tile ocean inlets with the surrounding land terrain."""

import logging
from typing import Dict, List, Optional

from .cell import TerrainType
from .grid import SURROUNDING_DIRECTIONS, Grid

logger = logging.getLogger("worldmap.coast")
logger.addHandler(logging.NullHandler())

# An ocean tile is filled when more than this many of its 8 neighbours are land
INLET_THRESHOLD = 5


def _modal_land_neighbor(terrain: List[List[TerrainType]], x: int, y: int) -> Optional[TerrainType]:
    """
    Most frequent non-ocean neighbour terrain, or None when the tile has at most
    ``INLET_THRESHOLD`` land neighbours. Ties go to the first type met in scan order.
    """
    rows, cols = len(terrain), len(terrain[0])
    counts: Dict[TerrainType, int] = {}
    for dx, dy in SURROUNDING_DIRECTIONS:
        nx, ny = x + dx, y + dy
        if 0 <= nx < cols and 0 <= ny < rows:
            t = terrain[ny][nx]
            if t is not TerrainType.OCEAN:
                counts[t] = counts.get(t, 0) + 1
    if sum(counts.values()) <= INLET_THRESHOLD:
        return None
    best, best_count = None, 0
    for t, n in counts.items():
        if n > best_count:
            best, best_count = t, n
    return best


def smooth_coast(grid: Grid) -> int:
    """
    Recolour ocean tiles enclosed by land to their modal land neighbour.

    Each sweep reads a snapshot of the grid; sweeps repeat until nothing
    changes, so a second call is a no-op. Returns the number of tiles filled.
    """
    filled = 0
    for _ in range(grid.cols * grid.rows):
        terrain = [[cell.terrain for cell in row] for row in grid.cells]
        changes = []
        for y in range(grid.rows):
            for x in range(grid.cols):
                if terrain[y][x] is not TerrainType.OCEAN:
                    continue
                modal = _modal_land_neighbor(terrain, x, y)
                if modal is not None:
                    changes.append((x, y, modal))
        if not changes:
            break
        for x, y, modal in changes:
            grid.set_terrain(x, y, modal)
        filled += len(changes)
    logger.debug("Coast smoothing filled %d ocean tiles", filled)
    return filled


__all__ = ["INLET_THRESHOLD", "smooth_coast"]
