from __future__ import annotations

"""Placement of continents and islands onto an all-ocean grid."""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from .cell import Coordinate, TerrainType
from .grid import Grid
from .region import RegionGrower
from .settings import (
    CONTINENT_LAND_SHARE,
    MAX_PLACEMENT_ATTEMPTS,
    PLACEMENT_MARGIN,
    GenerationSettings,
)

logger = logging.getLogger("worldmap.landmass")
logger.addHandler(logging.NullHandler())

CONTINENT = "continent"
ISLAND = "island"


@dataclass(frozen=True)
class Landmass:
    """A placed continent or island."""

    kind: str
    seed: Coordinate
    target: int
    size: int

    @property
    def is_short(self) -> bool:
        return self.size < self.target


@dataclass
class PlacementReport:
    """What the placer achieved compared to what was requested."""

    continents_requested: int = 0
    islands_requested: int = 0
    placed: List[Landmass] = field(default_factory=list)
    skipped: List[Tuple[str, int]] = field(default_factory=list)

    @property
    def continents(self) -> List[Landmass]:
        return [m for m in self.placed if m.kind == CONTINENT]

    @property
    def islands(self) -> List[Landmass]:
        return [m for m in self.placed if m.kind == ISLAND]

    @property
    def short_regions(self) -> List[Landmass]:
        return [m for m in self.placed if m.is_short]

    @property
    def land_tiles(self) -> int:
        return sum(m.size for m in self.placed)


def land_budget(grid: Grid, settings: GenerationSettings) -> Tuple[int, int, int]:
    """
    Return ``(total_land_tiles, per_continent, per_island)``.

    Continents take ``CONTINENT_LAND_SHARE`` of the land when islands are
    requested; a kind with a count of zero leaves the whole budget to the other.
    """
    total = int(round(settings.land_area / 100.0 * grid.cols * grid.rows))
    if settings.continents <= 0 and settings.islands <= 0:
        return total, 0, 0
    if settings.islands <= 0:
        continent_share = 1.0
    elif settings.continents <= 0:
        continent_share = 0.0
    else:
        continent_share = CONTINENT_LAND_SHARE
    continent_land = int(total * continent_share)
    island_land = total - continent_land
    per_continent = continent_land // settings.continents if settings.continents > 0 else 0
    per_island = island_land // settings.islands if settings.islands > 0 else 0
    return total, per_continent, per_island


def _placement_bounds(grid: Grid) -> Tuple[int, int, int, int]:
    """Inclusive (x_min, x_max, y_min, y_max) seed bounds."""
    x_min, x_max = PLACEMENT_MARGIN, grid.cols - 1 - PLACEMENT_MARGIN
    y_min, y_max = PLACEMENT_MARGIN, grid.rows - 1 - PLACEMENT_MARGIN
    if x_min > x_max:
        x_min, x_max = 0, grid.cols - 1
    if y_min > y_max:
        y_min, y_max = 0, grid.rows - 1
    return x_min, x_max, y_min, y_max


def min_continent_distance(grid: Grid, settings: GenerationSettings) -> float:
    if settings.min_continent_distance is not None:
        return settings.min_continent_distance
    return min(grid.cols, grid.rows) / 4.0


class LandmassPlacer:
    """Stamps continents, then islands, as grassland onto the grid."""

    def __init__(
        self,
        grid: Grid,
        settings: GenerationSettings,
        rng: random.Random,
        grower: Optional[RegionGrower] = None,
    ) -> None:
        self.grid = grid
        self.settings = settings
        self.rng = rng
        self.grower = grower or RegionGrower.from_settings(grid, rng, settings)
        self.occupied: Set[Coordinate] = set()
        self.continent_seeds: List[Coordinate] = []
        self.min_distance = min_continent_distance(grid, settings)

    def _seed_allowed(self, seed: Coordinate, kind: str) -> bool:
        if seed in self.occupied:
            return False
        if kind == CONTINENT:
            for other in self.continent_seeds:
                if math.hypot(seed[0] - other[0], seed[1] - other[1]) < self.min_distance:
                    return False
        return True

    def place_one(self, kind: str, target: int) -> Optional[Landmass]:
        """
        Try up to ``MAX_PLACEMENT_ATTEMPTS`` seeds for one landmass.

        An exact-size region is accepted at once; otherwise the largest region
        grown is used. Returns None when no seed satisfied the constraints.
        """
        x_min, x_max, y_min, y_max = _placement_bounds(self.grid)
        best: Optional[Set[Coordinate]] = None
        best_seed: Optional[Coordinate] = None

        for _ in range(MAX_PLACEMENT_ATTEMPTS):
            seed = (self.rng.randint(x_min, x_max), self.rng.randint(y_min, y_max))
            if not self._seed_allowed(seed, kind):
                continue
            region = self.grower.grow(seed, target, self.occupied)
            if best is None or len(region) > len(best):
                best, best_seed = region, seed
            if len(region) == target:
                break

        if best is None or best_seed is None:
            return None

        for x, y in best:
            self.grid.set_terrain(x, y, TerrainType.GRASSLAND)
        self.occupied.update(best)
        if kind == CONTINENT:
            self.continent_seeds.append(best_seed)
        return Landmass(kind=kind, seed=best_seed, target=target, size=len(best))

    def place_all(self) -> PlacementReport:
        report = PlacementReport(
            continents_requested=self.settings.continents,
            islands_requested=self.settings.islands,
        )
        total, per_continent, per_island = land_budget(self.grid, self.settings)
        logger.debug(
            "Land budget %d tiles: %d per continent, %d per island",
            total,
            per_continent,
            per_island,
        )

        # Continents first so islands cannot take the best seed locations
        for kind, count, target in (
            (CONTINENT, self.settings.continents, per_continent),
            (ISLAND, self.settings.islands, per_island),
        ):
            if count > 0 and target <= 0:
                logger.warning("Land budget too small for any %s; skipped %d", kind, count)
                report.skipped.extend((kind, index) for index in range(count))
                continue
            for index in range(count):
                mass = self.place_one(kind, target)
                if mass is None:
                    logger.warning(
                        "No valid seed for %s %d after %d attempts; skipped",
                        kind,
                        index + 1,
                        MAX_PLACEMENT_ATTEMPTS,
                    )
                    report.skipped.append((kind, index))
                    continue
                if mass.is_short:
                    logger.info(
                        "%s %d placed short of target: %d/%d tiles",
                        kind.capitalize(),
                        index + 1,
                        mass.size,
                        mass.target,
                    )
                report.placed.append(mass)

        logger.info(
            "Placed %d/%d continents and %d/%d islands (%d land tiles)",
            len(report.continents),
            report.continents_requested,
            len(report.islands),
            report.islands_requested,
            report.land_tiles,
        )
        return report


def place_landmasses(grid: Grid, settings: GenerationSettings, rng: random.Random) -> PlacementReport:
    """Place every requested continent and island onto ``grid``."""
    return LandmassPlacer(grid, settings, rng).place_all()


__all__ = [
    "CONTINENT",
    "ISLAND",
    "Landmass",
    "LandmassPlacer",
    "PlacementReport",
    "land_budget",
    "min_continent_distance",
    "place_landmasses",
]
