from __future__ import annotations

"""Deserts, plains, forests/jungles and flood plains derived from the terrain so far."""

import logging
import math
import random
from collections import deque
from dataclasses import dataclass
from typing import List

from .cell import MOUNTAIN_TERRAIN, TerrainType
from .grid import Grid
from .random_utils import roll
from .settings import GenerationSettings

logger = logging.getLogger("worldmap.biomes")
logger.addHandler(logging.NullHandler())

WATER = frozenset({TerrainType.OCEAN, TerrainType.RIVER})
VEGETATION = frozenset({TerrainType.FOREST, TerrainType.JUNGLE})

DESERT_BLOCKERS = frozenset(
    {TerrainType.ICE, TerrainType.OCEAN, TerrainType.RIVER, TerrainType.DESERT, TerrainType.TUNDRA}
) | MOUNTAIN_TERRAIN
PLAINS_BLOCKERS = DESERT_BLOCKERS | {TerrainType.HILL}

# Distances are in tiles, measured with 8-neighbour steps
DESERT_MIN_WATER_DISTANCE = 4
EQUATORIAL_DESERT_ROWS = 5
PLAINS_MIN_WATER_DISTANCE = 2
EQUATORIAL_PLAINS_ROWS = 10
JUNGLE_ROWS = 7
LUSH_GRASS_NEIGHBORS = 5
VEGETATION_SPREAD_CHANCE = 0.4


@dataclass
class BiomeReport:
    deserts: int = 0
    plains: int = 0
    forests: int = 0
    jungles: int = 0
    flood_plains: int = 0


def equator_row(grid: Grid) -> int:
    return grid.rows // 2


def water_distance(grid: Grid) -> List[List[float]]:
    """
    Steps from every tile to the nearest ocean or river tile, moving in eight
    directions. ``math.inf`` when the grid has no water at all.
    """
    dist: List[List[float]] = [[math.inf] * grid.cols for _ in range(grid.rows)]
    queue = deque()
    for cell in grid:
        if cell.terrain in WATER:
            dist[cell.y][cell.x] = 0
            queue.append((cell.x, cell.y))
    while queue:
        x, y = queue.popleft()
        step = dist[y][x] + 1
        for nx, ny in grid.neighbors8(x, y):
            if dist[ny][nx] > step:
                dist[ny][nx] = step
                queue.append((nx, ny))
    return dist


def place_deserts(grid: Grid, settings: GenerationSettings, rng: random.Random) -> int:
    """Deserts far from water; the required distance halves near the equator."""
    dist = water_distance(grid)
    equator = equator_row(grid)
    converted = 0
    for cell in grid:
        if cell.terrain in DESERT_BLOCKERS:
            continue
        min_dist = DESERT_MIN_WATER_DISTANCE
        if abs(cell.y - equator) <= EQUATORIAL_DESERT_ROWS:
            min_dist //= 2
        if dist[cell.y][cell.x] < min_dist or not roll(rng, settings.desert_bias):
            continue
        cell.set_terrain(TerrainType.DESERT)
        converted += 1
        for nx, ny in grid.neighbors8(cell.x, cell.y):
            neighbor = grid.cells[ny][nx]
            if neighbor.terrain not in DESERT_BLOCKERS and roll(rng, 0.5 * settings.desert_bias):
                neighbor.set_terrain(TerrainType.DESERT)
                converted += 1
    return converted


def place_plains(grid: Grid, settings: GenerationSettings, rng: random.Random) -> int:
    dist = water_distance(grid)
    equator = equator_row(grid)
    converted = 0
    for cell in grid:
        if cell.terrain in PLAINS_BLOCKERS:
            continue
        if grid.is_adjacent_to(cell.x, cell.y, (TerrainType.DESERT,)):
            chance = 0.3 * settings.plains_bias
        elif dist[cell.y][cell.x] > PLAINS_MIN_WATER_DISTANCE:
            band = 0.7 if abs(cell.y - equator) <= EQUATORIAL_PLAINS_ROWS else 0.4
            chance = band * settings.plains_bias
        else:
            chance = 0.0
        if roll(rng, chance):
            cell.set_terrain(TerrainType.PLAINS)
            converted += 1
    return converted


def place_vegetation(grid: Grid, settings: GenerationSettings, rng: random.Random) -> BiomeReport:
    """
    Grow forest (jungle near the equator) on well-watered or lush grassland,
    then let it spread once into neighbouring grassland.
    """
    report = BiomeReport()
    equator = equator_row(grid)
    snapshot = grid.copy()

    for cell in snapshot:
        if cell.terrain is not TerrainType.GRASSLAND:
            continue
        x, y = cell.x, cell.y
        if snapshot.is_adjacent_to(x, y, (TerrainType.DESERT,)):
            continue
        by_river = snapshot.is_adjacent_to(x, y, (TerrainType.RIVER,))
        if by_river:
            chance = 0.7 * settings.vegetation_bias
        else:
            grass = sum(
                1
                for nx, ny in snapshot.neighbors8(x, y)
                if snapshot.cells[ny][nx].terrain is TerrainType.GRASSLAND
            )
            if grass < LUSH_GRASS_NEIGHBORS:
                continue
            chance = 0.8 * settings.vegetation_bias
        if roll(rng, chance):
            jungle = abs(y - equator) <= JUNGLE_ROWS
            grid.set_terrain(x, y, TerrainType.JUNGLE if jungle else TerrainType.FOREST)

    spread_from = [cell.coord for cell in grid if cell.terrain in VEGETATION]
    for x, y in spread_from:
        terrain = grid.cells[y][x].terrain
        for nx, ny in grid.neighbors4(x, y):
            neighbor = grid.cells[ny][nx]
            if neighbor.terrain is TerrainType.GRASSLAND and roll(rng, VEGETATION_SPREAD_CHANCE):
                neighbor.set_terrain(terrain)

    report.forests = grid.count(TerrainType.FOREST)
    report.jungles = grid.count(TerrainType.JUNGLE)
    return report


def place_flood_plains(grid: Grid, settings: GenerationSettings, rng: random.Random) -> int:
    """Grassland touching both a river and the ocean may become flood plain."""
    converted = 0
    for cell in grid:
        if cell.terrain is not TerrainType.GRASSLAND:
            continue
        if not grid.is_adjacent_to(cell.x, cell.y, (TerrainType.RIVER,)):
            continue
        if not grid.is_adjacent_to(cell.x, cell.y, (TerrainType.OCEAN,)):
            continue
        if roll(rng, settings.flood_plain_bias):
            cell.set_terrain(TerrainType.FLOOD_PLAIN)
            converted += 1
    return converted


def apply_biomes(grid: Grid, settings: GenerationSettings, rng: random.Random) -> BiomeReport:
    """Run the desert, plains, vegetation and flood plain passes in order."""
    deserts = place_deserts(grid, settings, rng)
    plains = place_plains(grid, settings, rng)
    report = place_vegetation(grid, settings, rng)
    report.deserts = deserts
    report.plains = plains
    report.flood_plains = place_flood_plains(grid, settings, rng)
    logger.debug("Biomes: %s", report)
    return report


__all__ = [
    "BiomeReport",
    "apply_biomes",
    "equator_row",
    "place_deserts",
    "place_flood_plains",
    "place_plains",
    "place_vegetation",
    "water_distance",
]
