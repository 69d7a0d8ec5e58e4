from __future__ import annotations

"""
Data model for a single map tile: terrain classification, walkability and an
opaque metadata bag, with JSON-friendly conversion used by grid snapshots.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple, Union

Coordinate = Tuple[int, int]


class TerrainType(Enum):
    OCEAN = "ocean"
    ICE = "ice"
    TUNDRA = "tundra"
    GRASSLAND = "grassland"
    MOUNTAIN = "mountain"
    ICY_MOUNTAIN = "icy_mountain"
    HILL = "hill"
    RIVER = "river"
    DESERT = "desert"
    PLAINS = "plains"
    FOREST = "forest"
    JUNGLE = "jungle"
    FLOOD_PLAIN = "flood_plain"


class CellType(Enum):
    EMPTY = "empty"
    WALKABLE = "walkable"
    IMPASSABLE = "impassable"


IMPASSABLE_TERRAIN = frozenset({TerrainType.MOUNTAIN, TerrainType.ICY_MOUNTAIN})
MOUNTAIN_TERRAIN = IMPASSABLE_TERRAIN


def cell_type_for(terrain: TerrainType) -> CellType:
    """Coarse classifier matching a terrain type."""
    if terrain in IMPASSABLE_TERRAIN:
        return CellType.IMPASSABLE
    if terrain is TerrainType.OCEAN:
        return CellType.EMPTY
    return CellType.WALKABLE


@dataclass
class Cell:
    """
    Represents a single tile in the grid.

    Core Attributes:
      x, y: Column and row of this tile.
      terrain: One of TerrainType. Defaults to OCEAN.
      walkable: False only for mountain terrain (including its icy variant).
      type: One of CellType, kept in sync with ``terrain``.
      metadata: Free-form per-cell data; never interpreted by generation.
    """

    x: int
    y: int
    terrain: TerrainType = TerrainType.OCEAN
    walkable: bool = True
    type: CellType = CellType.EMPTY
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.terrain, TerrainType):
            raise TypeError(f"terrain must be a TerrainType, not {type(self.terrain)}")
        if type(self.metadata) is not dict:
            raise TypeError("`metadata` must be a plain dict.")

    @property
    def coord(self) -> Coordinate:
        return (self.x, self.y)

    def set_terrain(self, terrain: Union[TerrainType, str]) -> None:
        """Change terrain and re-derive ``walkable`` and ``type``."""
        if not isinstance(terrain, TerrainType):
            terrain = TerrainType(terrain)
        self.terrain = terrain
        self.walkable = terrain not in IMPASSABLE_TERRAIN
        self.type = cell_type_for(terrain)

    def __repr__(self) -> str:
        base = f"Cell(x={self.x}, y={self.y}, terrain={self.terrain.value}"
        if not self.walkable:
            base += ", IMPASSABLE"
        if self.metadata:
            base += f", metadata={self.metadata}"
        return base + ")"

    def to_json(self) -> Dict[str, Any]:
        """Serializes the cell to a JSON-friendly dict."""
        return {
            "x": self.x,
            "y": self.y,
            "terrain": self.terrain.value,
            "walkable": self.walkable,
            "type": self.type.value,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Cell":
        """
        Rebuild a cell from ``to_json`` output.

        Raises:
            KeyError, ValueError or TypeError if the record is malformed.
        """
        if not isinstance(data, dict):
            raise TypeError(f"cell record must be a dict, not {type(data)}")
        x, y = data["x"], data["y"]
        if not (isinstance(x, int) and isinstance(y, int)) or isinstance(x, bool) or isinstance(y, bool):
            raise TypeError(f"cell coordinates must be integers, got {x!r}, {y!r}")
        terrain = TerrainType(data["terrain"])
        walkable = data.get("walkable", terrain not in IMPASSABLE_TERRAIN)
        if not isinstance(walkable, bool):
            raise TypeError("`walkable` must be a bool.")
        if walkable != (terrain not in IMPASSABLE_TERRAIN):
            raise ValueError(f"walkable={walkable} contradicts terrain {terrain.value}")
        cell_type = CellType(data.get("type", cell_type_for(terrain).value))
        if cell_type is not cell_type_for(terrain):
            raise ValueError(f"type {cell_type.value} contradicts terrain {terrain.value}")
        return cls(
            x=x,
            y=y,
            terrain=terrain,
            walkable=walkable,
            type=cell_type,
            metadata=dict(data.get("metadata") or {}),
        )


# Predefined colors for each terrain (RGBA), used by the map viewer.
TERRAIN_COLORS: Dict[TerrainType, Tuple[int, int, int, int]] = {
    TerrainType.OCEAN: (65, 105, 225, 255),
    TerrainType.ICE: (235, 245, 255, 255),
    TerrainType.TUNDRA: (200, 205, 190, 255),
    TerrainType.GRASSLAND: (110, 205, 88, 255),
    TerrainType.MOUNTAIN: (139, 137, 137, 255),
    TerrainType.ICY_MOUNTAIN: (190, 200, 215, 255),
    TerrainType.HILL: (107, 142, 35, 255),
    TerrainType.RIVER: (30, 144, 255, 255),
    TerrainType.DESERT: (237, 201, 175, 255),
    TerrainType.PLAINS: (189, 183, 107, 255),
    TerrainType.FOREST: (34, 139, 34, 255),
    TerrainType.JUNGLE: (0, 100, 0, 255),
    TerrainType.FLOOD_PLAIN: (120, 170, 140, 255),
}


__all__ = [
    "Cell",
    "CellType",
    "Coordinate",
    "IMPASSABLE_TERRAIN",
    "MOUNTAIN_TERRAIN",
    "TERRAIN_COLORS",
    "TerrainType",
    "cell_type_for",
]
