from __future__ import annotations

"""Organic region growth used to carve continents and islands."""

import logging
import math
import random
from collections import deque
from typing import AbstractSet, Dict, List, Optional, Set

from .cell import Coordinate
from .grid import Grid
from .random_utils import weighted_choice
from .settings import REGION_EDGE_MARGIN, GenerationSettings

logger = logging.getLogger("worldmap.region")
logger.addHandler(logging.NullHandler())


class RegionGrower:
    """
    Grows connected, non-circular regions on a grid.

    Growth favours frontier tiles with few region neighbours (fingers and
    peninsulas), tiles off the seed's column (east-west spread) and tiles far
    from the seed (elongation). When no biased candidate is left, a plain
    breadth-first fill tops the region up to the requested size.
    """

    def __init__(
        self,
        grid: Grid,
        rng: random.Random,
        *,
        east_west_bias: float = 0.5,
        distance_bias: float = 0.5,
        peninsula_bias: float = 0.7,
        edge_margin: int = REGION_EDGE_MARGIN,
    ) -> None:
        self.grid = grid
        self.rng = rng
        self.east_west_bias = east_west_bias
        self.distance_bias = distance_bias
        self.peninsula_bias = peninsula_bias
        self.edge_margin = edge_margin
        self._max_distance = math.hypot(grid.cols, grid.rows)

    @classmethod
    def from_settings(cls, grid: Grid, rng: random.Random, settings: GenerationSettings) -> "RegionGrower":
        return cls(
            grid,
            rng,
            east_west_bias=settings.east_west_bias,
            distance_bias=settings.distance_bias,
            peninsula_bias=settings.peninsula_bias,
        )

    def _in_growth_area(self, x: int, y: int) -> bool:
        return self.edge_margin <= x < self.grid.cols - self.edge_margin and 0 <= y < self.grid.rows

    def _weight(self, coord: Coordinate, seed: Coordinate, count: int) -> float:
        """``count`` is the number of region tiles 4-adjacent to ``coord``."""
        weight = 1.0 / (count + 1)
        if coord[0] != seed[0]:
            weight *= 1.0 + self.east_west_bias
        if self._max_distance > 0:
            dist = math.hypot(coord[0] - seed[0], coord[1] - seed[1])
            weight *= 1.0 + self.distance_bias * (dist / self._max_distance)
        if count <= 2:
            weight *= self.peninsula_bias
        return weight

    def _add_frontier(
        self,
        coord: Coordinate,
        frontier: Dict[Coordinate, int],
        region: AbstractSet[Coordinate],
        occupied: AbstractSet[Coordinate],
    ) -> None:
        """Register ``coord``'s neighbours as candidates and bump their counts."""
        for n in self.grid.neighbors4(*coord):
            if n in frontier:
                frontier[n] += 1
            elif n not in region and n not in occupied and self._in_growth_area(*n):
                frontier[n] = 1

    def grow(
        self,
        seed: Coordinate,
        target_count: int,
        occupied: Optional[AbstractSet[Coordinate]] = None,
    ) -> Set[Coordinate]:
        """
        Grow a connected region of ``target_count`` tiles from ``seed``.

        Args:
            seed (Coordinate): Starting tile; must be in bounds and unoccupied.
            target_count (int): Requested number of tiles.
            occupied (set, optional): Tiles the region must not include.

        Returns:
            Set[Coordinate]: At most ``target_count`` 4-connected tiles, exactly
            that many whenever enough unoccupied tiles are reachable from the seed.
        """
        occupied = occupied if occupied is not None else frozenset()
        if target_count <= 0 or seed not in self.grid or seed in occupied:
            return set()

        region: Set[Coordinate] = {seed}
        # candidate -> region neighbour count; dict order keeps draws reproducible
        frontier: Dict[Coordinate, int] = {}
        self._add_frontier(seed, frontier, region, occupied)

        while len(region) < target_count and frontier:
            candidates: List[Coordinate] = list(frontier)
            weights = [self._weight(c, seed, frontier[c]) for c in candidates]
            chosen = weighted_choice(self.rng, candidates, weights)
            del frontier[chosen]
            region.add(chosen)
            self._add_frontier(chosen, frontier, region, occupied)

        if len(region) < target_count:
            logger.debug(
                "Frontier exhausted at %d/%d tiles from %s; filling breadth-first",
                len(region),
                target_count,
                seed,
            )
            self._fill(region, target_count, occupied)
            if len(region) < target_count:
                logger.debug("Region from %s stopped short at %d/%d tiles", seed, len(region), target_count)
        return region

    def _fill(self, region: Set[Coordinate], target_count: int, occupied: AbstractSet[Coordinate]) -> None:
        """Breadth-first expansion ignoring shape bias and the edge margin."""
        queue = deque(sorted(region))
        while queue and len(region) < target_count:
            current = queue.popleft()
            for n in self.grid.neighbors4(*current):
                if n in region or n in occupied:
                    continue
                region.add(n)
                queue.append(n)
                if len(region) >= target_count:
                    return


__all__ = ["RegionGrower"]
