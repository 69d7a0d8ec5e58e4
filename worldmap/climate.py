from __future__ import annotations

"""Ice and tundra placement driven by the temperature (polar coldness) setting."""

import logging
import math
import random
from dataclasses import dataclass
from typing import List

from .cell import Cell, TerrainType
from .grid import Grid
from .random_utils import roll, weighted_choice
from .settings import GenerationSettings

logger = logging.getLogger("worldmap.climate")
logger.addHandler(logging.NullHandler())

# Tundra chance for the rows just outside the polar band, moving away from the pole
TUNDRA_FALLOFF: List[float] = [0.9, 0.8, 0.7, 0.6, 0.5]

# Freeze chance on the outermost band row and the row inside it; deeper rows always freeze
EDGE_FREEZE_CHANCE = 0.5
NEAR_EDGE_FREEZE_CHANCE = 0.8


@dataclass
class ClimateReport:
    band_height: int = 0
    ice_seeded: int = 0
    swaps: int = 0
    frozen: int = 0
    tundra: int = 0


def polar_band_height(temperature: float, rows: int) -> int:
    """Rows from each pole that count as polar, never more than half the grid."""
    band = max(0, 15 - math.floor((30 - temperature) / 4))
    return min(band, rows // 2)


def pole_distance(y: int, rows: int) -> int:
    """Rows between ``y`` and the nearest pole (0 on the first and last row)."""
    return min(y, rows - 1 - y)


def seed_ice(grid: Grid, temperature: float, rng: random.Random) -> int:
    """Turn ``temperature`` percent of the ocean, chosen at random, into ice."""
    ocean = grid.cells_of(TerrainType.OCEAN)
    ice_count = min(len(ocean), max(0, int(temperature * len(ocean) / 100)))
    for cell in rng.sample(ocean, ice_count):
        cell.set_terrain(TerrainType.ICE)
    return ice_count


def redistribute_polar_ice(grid: Grid, band: int, rng: random.Random) -> int:
    """
    Swap ice outside the polar bands with ocean inside them.

    Polar ocean tiles closer to the pole are drawn with higher weight. The
    number of ice tiles on the grid does not change. Returns the swap count.
    """
    if band <= 0:
        return 0
    mid_ice: List[Cell] = []
    polar_ocean: List[Cell] = []
    for cell in grid:
        dist = pole_distance(cell.y, grid.rows)
        if cell.terrain is TerrainType.ICE and dist >= band:
            mid_ice.append(cell)
        elif cell.terrain is TerrainType.OCEAN and dist < band:
            polar_ocean.append(cell)

    swaps = min(len(mid_ice), len(polar_ocean))
    rng.shuffle(mid_ice)
    weights = [float(band - pole_distance(c.y, grid.rows)) for c in polar_ocean]
    for ice_cell in mid_ice[:swaps]:
        index = weighted_choice(rng, range(len(polar_ocean)), weights)
        target = polar_ocean.pop(index)
        weights.pop(index)
        ice_cell.set_terrain(TerrainType.OCEAN)
        target.set_terrain(TerrainType.ICE)
    return swaps


def freeze_polar_land(grid: Grid, band: int, rng: random.Random) -> int:
    """Ice over land inside the polar bands, tapering at the band edge."""
    frozen = 0
    for cell in grid:
        if cell.terrain in (TerrainType.ICE, TerrainType.OCEAN):
            continue
        dist = pole_distance(cell.y, grid.rows)
        if dist >= band:
            continue
        if dist == band - 1:
            chance = EDGE_FREEZE_CHANCE
        elif dist == band - 2:
            chance = NEAR_EDGE_FREEZE_CHANCE
        else:
            chance = 1.0
        if roll(rng, chance):
            cell.set_terrain(TerrainType.ICE)
            frozen += 1
    return frozen


def apply_tundra(grid: Grid, band: int, rng: random.Random) -> int:
    """Tundra on all remaining polar land and, with falling chance, just outside it."""
    converted = 0
    for cell in grid:
        if cell.terrain in (TerrainType.ICE, TerrainType.OCEAN):
            continue
        dist = pole_distance(cell.y, grid.rows)
        if dist < band:
            chance = 1.0
        elif dist - band < len(TUNDRA_FALLOFF):
            chance = TUNDRA_FALLOFF[dist - band]
        else:
            continue
        if roll(rng, chance):
            cell.set_terrain(TerrainType.TUNDRA)
            converted += 1
    return converted


def apply_climate(grid: Grid, settings: GenerationSettings, rng: random.Random) -> ClimateReport:
    """Run ice seeding, polar redistribution, polar freeze and tundra banding."""
    report = ClimateReport()
    if settings.temperature <= 0:
        logger.debug("Temperature %.1f: no ice or tundra", settings.temperature)
        return report

    report.band_height = polar_band_height(settings.temperature, grid.rows)
    report.ice_seeded = seed_ice(grid, settings.temperature, rng)
    report.swaps = redistribute_polar_ice(grid, report.band_height, rng)
    report.frozen = freeze_polar_land(grid, report.band_height, rng)
    report.tundra = apply_tundra(grid, report.band_height, rng)
    logger.debug("Climate: %s", report)
    return report


__all__ = [
    "ClimateReport",
    "TUNDRA_FALLOFF",
    "apply_climate",
    "apply_tundra",
    "freeze_polar_land",
    "pole_distance",
    "polar_band_height",
    "redistribute_polar_ice",
    "seed_ice",
]
