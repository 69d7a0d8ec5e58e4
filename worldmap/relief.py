from __future__ import annotations

"""Mountain ranges traced along long land runs, and hills around them."""

import logging
import random
from dataclasses import dataclass
from typing import List

from .cell import MOUNTAIN_TERRAIN, TerrainType
from .grid import Grid
from .random_utils import roll
from .settings import MAX_RANGE_LENGTH, MIN_RANGE_LENGTH, MIN_RANGE_RUN, GenerationSettings

logger = logging.getLogger("worldmap.relief")
logger.addHandler(logging.NullHandler())

RANGE_TERRAIN = frozenset({TerrainType.GRASSLAND, TerrainType.TUNDRA})
HILL_BLOCKERS = frozenset({TerrainType.OCEAN, TerrainType.ICE}) | MOUNTAIN_TERRAIN

ICY_SEGMENT_CHANCE = 0.6
WIDTH_CHANGE_CHANCE = 0.25

# Perpendicular offsets covered by a range segment of each width
_SEGMENT_OFFSETS = {1: (0,), 2: (0, 1), 3: (-1, 0, 1)}


@dataclass(frozen=True)
class LandRun:
    """A maximal straight run of range terrain along one row or column."""

    horizontal: bool
    line: int
    start: int
    end: int  # exclusive

    @property
    def length(self) -> int:
        return self.end - self.start


def find_land_runs(grid: Grid, min_length: int = MIN_RANGE_RUN) -> List[LandRun]:
    """Scan rows, then columns, for runs of grassland/tundra at least ``min_length`` long."""
    runs: List[LandRun] = []

    def scan(horizontal: bool, line: int, extent: int) -> None:
        start = None
        for i in range(extent + 1):
            if i < extent:
                x, y = (i, line) if horizontal else (line, i)
                inside = grid.cells[y][x].terrain in RANGE_TERRAIN
            else:
                inside = False
            if inside and start is None:
                start = i
            elif not inside and start is not None:
                if i - start >= min_length:
                    runs.append(LandRun(horizontal, line, start, i))
                start = None

    for y in range(grid.rows):
        scan(True, y, grid.cols)
    for x in range(grid.cols):
        scan(False, x, grid.rows)
    return runs


def trace_range(grid: Grid, run: LandRun, rng: random.Random) -> int:
    """
    Random-walk a mountain range along ``run``. Returns the number of tiles raised.
    """
    along_extent = grid.cols if run.horizontal else grid.rows
    perp_extent = grid.rows if run.horizontal else grid.cols

    length = rng.randint(MIN_RANGE_LENGTH, MAX_RANGE_LENGTH)
    direction = rng.choice((-1, 1))
    along = rng.randint(run.start, run.end - 1)
    perp = run.line
    width = rng.randint(1, 3)
    raised = 0

    for _ in range(length):
        if not 0 <= along < along_extent:
            break
        terrain = TerrainType.MOUNTAIN
        if width == 3 and roll(rng, ICY_SEGMENT_CHANCE):
            terrain = TerrainType.ICY_MOUNTAIN
        for offset in _SEGMENT_OFFSETS[width]:
            p = perp + offset
            if not 0 <= p < perp_extent:
                continue
            x, y = (along, p) if run.horizontal else (p, along)
            cell = grid.cells[y][x]
            if cell.terrain not in RANGE_TERRAIN:
                continue
            if grid.is_adjacent_to(x, y, (TerrainType.OCEAN,)):
                continue
            cell.set_terrain(terrain)
            raised += 1

        along += direction
        perp = max(0, min(perp_extent - 1, perp + rng.choice((-1, 0, 1))))
        if roll(rng, WIDTH_CHANGE_CHANCE):
            width = rng.randint(1, 3)
    return raised


def place_mountains(grid: Grid, settings: GenerationSettings, rng: random.Random) -> int:
    """Turn some long land runs into mountain ranges. Returns the range count."""
    ranges = 0
    for run in find_land_runs(grid):
        if not roll(rng, settings.mountain_bias):
            continue
        trace_range(grid, run, rng)
        ranges += 1
    return ranges


def place_hills(grid: Grid, settings: GenerationSettings, rng: random.Random) -> int:
    """Scatter hills, densest next to mountains."""
    hills = 0
    for cell in grid:
        if cell.terrain in HILL_BLOCKERS:
            continue
        if grid.is_adjacent_to(cell.x, cell.y, MOUNTAIN_TERRAIN):
            chance = 0.6 * settings.hill_bias
        else:
            neighbors = grid.neighbors8(cell.x, cell.y)
            interior = len(neighbors) == 8 and all(
                grid.cells[ny][nx].terrain not in HILL_BLOCKERS for nx, ny in neighbors
            )
            chance = 0.3 * settings.hill_bias if interior else 0.0
        if roll(rng, chance):
            cell.set_terrain(TerrainType.HILL)
            hills += 1
    return hills


def apply_relief(grid: Grid, settings: GenerationSettings, rng: random.Random) -> None:
    ranges = place_mountains(grid, settings, rng)
    hills = place_hills(grid, settings, rng)
    logger.debug("Relief: %d mountain ranges, %d hills", ranges, hills)


__all__ = [
    "LandRun",
    "apply_relief",
    "find_land_runs",
    "place_hills",
    "place_mountains",
    "trace_range",
]
