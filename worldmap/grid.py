from __future__ import annotations

"""
grid.py

Rectangular tile grid that every generation pass reads and writes.

- Fixed ``cols × rows`` array of ``Cell`` objects, no holes.
- Out-of-range reads return ``None`` and out-of-range writes are ignored.
- Snapshots are row-major nested lists of cell records; loading a snapshot of
  the wrong shape leaves the grid untouched and reports a ``LoadStatus``.
"""

import logging
import math
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional

from .cell import Cell, CellType, Coordinate, TerrainType
from .settings import CELL_SIZE, GRID_COLS, GRID_ROWS

logger = logging.getLogger("worldmap.grid")
logger.addHandler(logging.NullHandler())

CoordinateList = List[Coordinate]
CellSnapshot = List[List[Dict[str, Any]]]

# ─────────────────────────────────────────────────────────────────────────────
# == NEIGHBOR CONSTANTS ==

# Cardinal directions: E, W, S, N
CARDINAL_DIRECTIONS: List[Coordinate] = [(1, 0), (-1, 0), (0, 1), (0, -1)]

# All eight surrounding offsets in scan order (top row first, left to right)
SURROUNDING_DIRECTIONS: List[Coordinate] = [
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
]

_CELL_FIELDS = {"terrain", "walkable", "type", "metadata"}


class LoadStatus(Enum):
    """Outcome of ``Grid.deserialize``. Only ``OK`` is truthy."""

    OK = "ok"
    SHAPE_MISMATCH = "shape_mismatch"
    MALFORMED = "malformed"

    def __bool__(self) -> bool:
        return self is LoadStatus.OK


# ─────────────────────────────────────────────────────────────────────────────
# == GRID ==

class Grid:
    __slots__ = ("cols", "rows", "cell_size", "cells")

    def __init__(
        self,
        cols: int = GRID_COLS,
        rows: int = GRID_ROWS,
        *,
        cell_size: int = CELL_SIZE,
    ) -> None:
        """
        Create an all-ocean grid.

        Args:
            cols (int): Number of columns (x extent).
            rows (int): Number of rows (y extent).
            cell_size (int): Edge length of one tile in world pixels.
        """
        if cols <= 0 or rows <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {cols}x{rows}")
        self.cols: int = cols
        self.rows: int = rows
        self.cell_size: int = cell_size
        self.cells: List[List[Cell]] = [
            [Cell(x, y) for x in range(cols)] for y in range(rows)
        ]

    @classmethod
    def for_world(cls, world_width: int, world_height: int, cell_size: int = CELL_SIZE) -> "Grid":
        """Build a grid covering a world of the given pixel size."""
        return cls(world_width // cell_size, world_height // cell_size, cell_size=cell_size)

    # ─────────────────────────────────────────────────────────────────────────
    # == BOUNDS & ACCESS ==

    def is_valid(self, x: Any, y: Any) -> bool:
        """True if (x, y) are integers inside the grid."""
        if isinstance(x, bool) or isinstance(y, bool):
            return False
        if not (isinstance(x, int) and isinstance(y, int)):
            return False
        return 0 <= x < self.cols and 0 <= y < self.rows

    def __contains__(self, coord: Coordinate) -> bool:
        x, y = coord
        return self.is_valid(x, y)

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """Return the cell at (x, y), or None when out of bounds."""
        if not self.is_valid(x, y):
            return None
        return self.cells[y][x]

    def terrain_at(self, x: int, y: int) -> Optional[TerrainType]:
        cell = self.get_cell(x, y)
        return cell.terrain if cell else None

    def set_cell_data(self, x: int, y: int, **partial: Any) -> None:
        """
        Merge the given fields into the cell at (x, y). Fields that are not
        passed keep their value. A new ``terrain`` re-derives ``walkable`` and
        ``type`` unless those are passed explicitly too.

        Raises:
            TypeError: If an unknown field name is given.
        """
        unknown = set(partial) - _CELL_FIELDS
        if unknown:
            raise TypeError(f"Unknown cell field(s): {', '.join(sorted(unknown))}")
        cell = self.get_cell(x, y)
        if cell is None:
            return
        if "terrain" in partial:
            cell.set_terrain(partial["terrain"])
        if "walkable" in partial:
            cell.walkable = bool(partial["walkable"])
        if "type" in partial:
            value = partial["type"]
            cell.type = value if isinstance(value, CellType) else CellType(value)
        if "metadata" in partial:
            cell.metadata = dict(partial["metadata"])

    def set_terrain(self, x: int, y: int, terrain: TerrainType) -> None:
        """Shortcut for ``set_cell_data(x, y, terrain=terrain)``."""
        cell = self.get_cell(x, y)
        if cell is not None:
            cell.set_terrain(terrain)

    def __iter__(self) -> Iterator[Cell]:
        for row in self.cells:
            yield from row

    def iter_all_coords(self) -> Iterable[Coordinate]:
        """Yield every (x, y) pair in row-major order."""
        for y in range(self.rows):
            for x in range(self.cols):
                yield (x, y)

    def cells_of(self, *terrains: TerrainType) -> List[Cell]:
        """All cells whose terrain is one of ``terrains``, row-major."""
        wanted = set(terrains)
        return [c for c in self if c.terrain in wanted]

    def count(self, *terrains: TerrainType) -> int:
        wanted = set(terrains)
        return sum(1 for c in self if c.terrain in wanted)

    def terrain_counts(self) -> Dict[TerrainType, int]:
        """Number of tiles per terrain type (types with zero tiles omitted)."""
        counts: Dict[TerrainType, int] = {}
        for c in self:
            counts[c.terrain] = counts.get(c.terrain, 0) + 1
        return counts

    # ─────────────────────────────────────────────────────────────────────────
    # == NEIGHBORS ==

    def neighbors4(self, x: int, y: int) -> CoordinateList:
        """In-bounds cardinal neighbor coordinates."""
        return [
            (x + dx, y + dy)
            for dx, dy in CARDINAL_DIRECTIONS
            if 0 <= x + dx < self.cols and 0 <= y + dy < self.rows
        ]

    def neighbors8(self, x: int, y: int) -> CoordinateList:
        """In-bounds surrounding coordinates, in scan order."""
        return [
            (x + dx, y + dy)
            for dx, dy in SURROUNDING_DIRECTIONS
            if 0 <= x + dx < self.cols and 0 <= y + dy < self.rows
        ]

    def is_adjacent_to(
        self,
        x: int,
        y: int,
        terrains: Iterable[TerrainType],
        *,
        diagonal: bool = True,
    ) -> bool:
        """True if any neighbor of (x, y) has one of ``terrains``."""
        wanted = set(terrains)
        coords = self.neighbors8(x, y) if diagonal else self.neighbors4(x, y)
        return any(self.cells[ny][nx].terrain in wanted for nx, ny in coords)

    # ─────────────────────────────────────────────────────────────────────────
    # == PICKING ==

    def screen_to_grid(self, screen_x: float, screen_y: float) -> Optional[Coordinate]:
        """
        Convert a world-pixel position (camera transform already undone) to a
        grid coordinate. Returns None outside the grid.
        """
        if not (math.isfinite(screen_x) and math.isfinite(screen_y)):
            return None
        x = int(screen_x // self.cell_size)
        y = int(screen_y // self.cell_size)
        if not self.is_valid(x, y):
            return None
        return (x, y)

    # ─────────────────────────────────────────────────────────────────────────
    # == SNAPSHOTS ==

    def serialize(self) -> CellSnapshot:
        """Row-major nested list of cell records."""
        return [[cell.to_json() for cell in row] for row in self.cells]

    def deserialize(self, blob: Any) -> LoadStatus:
        """
        Replace every cell from a ``serialize`` snapshot.

        The snapshot must have exactly ``rows`` rows of ``cols`` records each.
        On any failure the current cells are kept and a non-OK status is returned.
        """
        if not isinstance(blob, list) or len(blob) != self.rows:
            logger.warning(
                "Rejected grid snapshot: expected %d rows, got %s",
                self.rows,
                len(blob) if isinstance(blob, list) else type(blob).__name__,
            )
            return LoadStatus.SHAPE_MISMATCH
        if any(not isinstance(row, list) or len(row) != self.cols for row in blob):
            logger.warning("Rejected grid snapshot: rows must each hold %d cells", self.cols)
            return LoadStatus.SHAPE_MISMATCH

        new_cells: List[List[Cell]] = []
        try:
            for y, row in enumerate(blob):
                new_row: List[Cell] = []
                for x, record in enumerate(row):
                    cell = Cell.from_json(record)
                    if cell.coord != (x, y):
                        raise ValueError(f"cell record {cell.coord} stored at ({x}, {y})")
                    new_row.append(cell)
                new_cells.append(new_row)
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Rejected grid snapshot: malformed cell record: %s", e)
            return LoadStatus.MALFORMED

        self.cells = new_cells
        return LoadStatus.OK

    def copy(self) -> "Grid":
        """Independent deep copy of this grid."""
        clone = Grid(self.cols, self.rows, cell_size=self.cell_size)
        clone.cells = [
            [
                Cell(c.x, c.y, c.terrain, c.walkable, c.type, dict(c.metadata))
                for c in row
            ]
            for row in self.cells
        ]
        return clone

    def __repr__(self) -> str:
        return f"Grid(cols={self.cols}, rows={self.rows}, cell_size={self.cell_size})"


__all__ = [
    "CARDINAL_DIRECTIONS",
    "CellSnapshot",
    "CoordinateList",
    "Grid",
    "LoadStatus",
    "SURROUNDING_DIRECTIONS",
]
