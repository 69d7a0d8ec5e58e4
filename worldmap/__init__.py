from __future__ import annotations

from .cell import TERRAIN_COLORS, Cell, CellType, Coordinate, TerrainType
from .grid import Grid, LoadStatus
from .landmass import Landmass, PlacementReport
from .persistence import GridLoadError, GridSaveError, load_grid, save_grid
from .pipeline import GenerationContext, GenerationReport, GenerationResult, generate_world
from .random_utils import make_rng, weighted_choice
from .region import RegionGrower
from .settings import GenerationSettings, adjust_settings

__all__ = [
    "Cell",
    "CellType",
    "Coordinate",
    "GenerationContext",
    "GenerationReport",
    "GenerationResult",
    "GenerationSettings",
    "Grid",
    "GridLoadError",
    "GridSaveError",
    "Landmass",
    "LoadStatus",
    "PlacementReport",
    "RegionGrower",
    "TERRAIN_COLORS",
    "TerrainType",
    "adjust_settings",
    "generate_world",
    "load_grid",
    "make_rng",
    "save_grid",
    "weighted_choice",
]
