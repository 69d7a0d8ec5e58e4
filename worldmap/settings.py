from __future__ import annotations

"""Grid constants and the bias-parameter record used for map generation."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Tuple

# Size of the world in pixels and the edge length of one tile.
WORLD_WIDTH = 1600
WORLD_HEIGHT = 800
CELL_SIZE = 8

# Default grid dimensions derived from the world size
GRID_COLS = WORLD_WIDTH // CELL_SIZE
GRID_ROWS = WORLD_HEIGHT // CELL_SIZE

# Columns at the east and west edges that organic growth will not enter
REGION_EDGE_MARGIN = 2

# Tiles kept free around the map border when picking landmass seeds
PLACEMENT_MARGIN = 2

# Maximum random seed picks per continent or island
MAX_PLACEMENT_ATTEMPTS = 50

# Share of the land budget that goes to continents when islands exist
CONTINENT_LAND_SHARE = 0.8

# River tracing limits
MAX_RIVER_ATTEMPTS = 10_000
MAX_RIVER_STEPS = 100
RIVERS_PER_BIAS = 50

# Mountain range limits
MIN_RANGE_RUN = 8
MIN_RANGE_LENGTH = 6
MAX_RANGE_LENGTH = 20


@dataclass
class GenerationSettings:
    seed: Optional[int] = None
    land_area: float = 30.0
    continents: int = 3
    islands: int = 6
    temperature: float = 15.0
    east_west_bias: float = 0.5
    distance_bias: float = 0.5
    peninsula_bias: float = 0.7
    min_continent_distance: Optional[float] = None
    mountain_bias: float = 0.3
    hill_bias: float = 0.5
    river_bias: float = 0.5
    desert_bias: float = 0.3
    plains_bias: float = 0.5
    vegetation_bias: float = 0.6
    flood_plain_bias: float = 0.5


# Allowed range for each float field. Fields not listed are clamped to [0, 1].
SETTING_RANGES: Dict[str, Tuple[float, float]] = {
    "land_area": (0.0, 100.0),
    "temperature": (0.0, 30.0),
    "east_west_bias": (0.0, 5.0),
    "distance_bias": (0.0, 5.0),
    "min_continent_distance": (0.0, float("inf")),
}

_NULLABLE_FIELDS = {"seed", "min_continent_distance"}
_COUNT_FIELDS = {"continents", "islands"}
_FLOAT_FIELDS = {
    f.name for f in fields(GenerationSettings) if f.name not in _COUNT_FIELDS and f.name != "seed"
}


def adjust_settings(settings: GenerationSettings, **kwargs: Any) -> None:
    """
    Adjust generation settings safely. Float values are clamped to the field's
    range (see ``SETTING_RANGES``); int/bool values are assigned only if types
    match; other mismatches raise TypeError. Unknown keys are ignored.

    Args:
        settings (GenerationSettings): The settings object to modify in-place.
        **kwargs: Field=value pairs indicating new settings.

    Raises:
        TypeError: If a provided value's type does not match the existing field's type.
    """
    for key, val in kwargs.items():
        if not hasattr(settings, key):
            continue
        is_number = isinstance(val, (int, float)) and not isinstance(val, bool)
        if key in _NULLABLE_FIELDS and val is None:
            setattr(settings, key, None)
        elif key == "seed" and isinstance(val, int) and not isinstance(val, bool):
            settings.seed = val
        elif key in _FLOAT_FIELDS and is_number:
            low, high = SETTING_RANGES.get(key, (0.0, 1.0))
            setattr(settings, key, float(max(low, min(high, float(val)))))
        elif key in _COUNT_FIELDS and isinstance(val, int) and not isinstance(val, bool):
            setattr(settings, key, max(0, val))
        else:
            raise TypeError(f"Cannot assign value of type {type(val)} to setting '{key}'.")


__all__ = [
    "CELL_SIZE",
    "CONTINENT_LAND_SHARE",
    "GRID_COLS",
    "GRID_ROWS",
    "GenerationSettings",
    "MAX_PLACEMENT_ATTEMPTS",
    "MAX_RANGE_LENGTH",
    "MAX_RIVER_ATTEMPTS",
    "MAX_RIVER_STEPS",
    "MIN_RANGE_LENGTH",
    "MIN_RANGE_RUN",
    "PLACEMENT_MARGIN",
    "REGION_EDGE_MARGIN",
    "RIVERS_PER_BIAS",
    "SETTING_RANGES",
    "WORLD_HEIGHT",
    "WORLD_WIDTH",
    "adjust_settings",
]
