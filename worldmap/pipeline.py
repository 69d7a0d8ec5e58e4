from __future__ import annotations

"""
pipeline.py

Generation entry point. Builds a fresh ``GenerationContext`` per run and
applies the terrain passes in a fixed order:

  landmasses → climate → relief → coast smoothing → rivers → biomes

Each pass mutates the context's grid in place and records what it did in the
run's ``GenerationReport``. Nothing survives between runs.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .biomes import BiomeReport, apply_biomes
from .climate import ClimateReport, apply_climate
from .coast import smooth_coast
from .grid import Grid
from .hydrology import RiverPath, trace_rivers
from .landmass import PlacementReport, place_landmasses
from .random_utils import make_rng
from .relief import apply_relief
from .settings import GRID_COLS, GRID_ROWS, GenerationSettings

logger = logging.getLogger("worldmap.pipeline")
logger.addHandler(logging.NullHandler())


@dataclass
class GenerationReport:
    """Diagnostics for one run; soft failures show up here rather than as errors."""

    seed: int = 0
    placement: PlacementReport = field(default_factory=PlacementReport)
    climate: ClimateReport = field(default_factory=ClimateReport)
    coast_filled: int = 0
    rivers: List[RiverPath] = field(default_factory=list)
    biomes: BiomeReport = field(default_factory=BiomeReport)
    timings: Dict[str, float] = field(default_factory=dict)


@dataclass
class GenerationContext:
    grid: Grid
    settings: GenerationSettings
    rng: random.Random
    report: GenerationReport


@dataclass
class GenerationResult:
    grid: Grid
    report: GenerationReport

    def __iter__(self):
        return iter((self.grid, self.report))


def _landmass_pass(ctx: GenerationContext) -> None:
    ctx.report.placement = place_landmasses(ctx.grid, ctx.settings, ctx.rng)


def _climate_pass(ctx: GenerationContext) -> None:
    ctx.report.climate = apply_climate(ctx.grid, ctx.settings, ctx.rng)


def _relief_pass(ctx: GenerationContext) -> None:
    apply_relief(ctx.grid, ctx.settings, ctx.rng)


def _coast_pass(ctx: GenerationContext) -> None:
    ctx.report.coast_filled = smooth_coast(ctx.grid)


def _river_pass(ctx: GenerationContext) -> None:
    ctx.report.rivers = trace_rivers(ctx.grid, ctx.settings, ctx.rng)


def _biome_pass(ctx: GenerationContext) -> None:
    ctx.report.biomes = apply_biomes(ctx.grid, ctx.settings, ctx.rng)


PASSES: List[Tuple[str, Callable[[GenerationContext], None]]] = [
    ("landmasses", _landmass_pass),
    ("climate", _climate_pass),
    ("relief", _relief_pass),
    ("coast", _coast_pass),
    ("rivers", _river_pass),
    ("biomes", _biome_pass),
]


def generate_world(
    settings: Optional[GenerationSettings] = None,
    *,
    cols: Optional[int] = None,
    rows: Optional[int] = None,
) -> GenerationResult:
    """
    Generate a fully classified grid.

    Args:
        settings (GenerationSettings, optional): Bias parameters. Defaults are used if None.
        cols (int, optional): Grid width in tiles; defaults to ``GRID_COLS``.
        rows (int, optional): Grid height in tiles; defaults to ``GRID_ROWS``.

    Returns:
        GenerationResult: The grid and the run's report (including the seed used).
    """
    settings = settings or GenerationSettings()
    grid = Grid(
        cols if cols is not None else GRID_COLS,
        rows if rows is not None else GRID_ROWS,
    )
    rng, seed = make_rng(settings.seed)
    ctx = GenerationContext(grid=grid, settings=settings, rng=rng, report=GenerationReport(seed=seed))

    logger.info("Generating %dx%d map with seed %d", grid.cols, grid.rows, seed)
    for name, run_pass in PASSES:
        started = time.perf_counter()
        run_pass(ctx)
        ctx.report.timings[name] = time.perf_counter() - started
        logger.debug("Pass '%s' finished in %.3fs", name, ctx.report.timings[name])

    return GenerationResult(grid=ctx.grid, report=ctx.report)


__all__ = [
    "GenerationContext",
    "GenerationReport",
    "GenerationResult",
    "PASSES",
    "generate_world",
]
