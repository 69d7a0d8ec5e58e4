import random

import pytest

from helpers import fill
from worldmap.cell import MOUNTAIN_TERRAIN, TerrainType
from worldmap.grid import Grid
import worldmap.relief as relief
from worldmap.relief import LandRun, find_land_runs, place_hills, place_mountains, trace_range
from worldmap.settings import GenerationSettings


def island(cols=30, rows=30, border=1):
    """Grassland block with an ocean ring ``border`` tiles wide."""
    grid = Grid(cols, rows)
    for cell in grid:
        if border <= cell.x < cols - border and border <= cell.y < rows - border:
            cell.set_terrain(TerrainType.GRASSLAND)
    return grid


def test_find_land_runs_in_rows_and_columns():
    grid = Grid(20, 10)
    for x in range(2, 14):
        grid.set_terrain(x, 5, TerrainType.GRASSLAND)
    assert find_land_runs(grid) == [LandRun(horizontal=True, line=5, start=2, end=14)]

    grid = Grid(5, 12)
    for y in range(12):
        grid.set_terrain(2, y, TerrainType.TUNDRA)
    runs = find_land_runs(grid)
    assert runs == [LandRun(horizontal=False, line=2, start=0, end=12)]
    assert runs[0].length == 12


def test_short_runs_are_ignored():
    grid = Grid(20, 10)
    for x in range(3, 10):
        grid.set_terrain(x, 2, TerrainType.GRASSLAND)
    assert find_land_runs(grid, min_length=8) == []


@pytest.mark.parametrize("seed", range(6))
def test_ranges_stay_off_the_coast(seed):
    grid = island()
    rng = random.Random(seed)
    for run in find_land_runs(grid)[:10]:
        trace_range(grid, run, rng)
    mountains = grid.cells_of(*MOUNTAIN_TERRAIN)
    assert mountains
    for cell in mountains:
        assert not grid.is_adjacent_to(cell.x, cell.y, (TerrainType.OCEAN,))
        assert not cell.walkable


def test_range_only_raises_grassland_or_tundra():
    grid = island()
    for cell in grid:
        if cell.y % 2 == 0 and cell.terrain is TerrainType.GRASSLAND:
            cell.set_terrain(TerrainType.TUNDRA)
    grid.set_terrain(15, 15, TerrainType.ICE)
    rng = random.Random(7)
    for run in find_land_runs(grid):
        trace_range(grid, run, rng)
    assert grid.terrain_at(15, 15) is TerrainType.ICE


def test_zero_mountain_bias_places_no_ranges():
    grid = island()
    assert place_mountains(grid, GenerationSettings(mountain_bias=0.0), random.Random(0)) == 0
    assert grid.count(*MOUNTAIN_TERRAIN) == 0


def test_full_mountain_bias_traces_every_run():
    grid = island()
    runs = len(find_land_runs(grid))
    assert place_mountains(grid, GenerationSettings(mountain_bias=1.0), random.Random(0)) == runs


def test_hills_cluster_near_mountains():
    grid = island()
    grid.set_terrain(15, 15, TerrainType.MOUNTAIN)
    settings = GenerationSettings(hill_bias=0.0)
    assert place_hills(grid, settings, random.Random(0)) == 0

    settings = GenerationSettings(hill_bias=1.0)
    place_hills(grid, settings, random.Random(1))
    hills = grid.cells_of(TerrainType.HILL)
    assert hills
    for cell in hills:
        if not grid.is_adjacent_to(cell.x, cell.y, MOUNTAIN_TERRAIN):
            assert not grid.is_adjacent_to(cell.x, cell.y, (TerrainType.OCEAN, TerrainType.ICE))


def test_hills_never_replace_water_or_mountains():
    grid = island(border=3)
    grid.set_terrain(10, 10, TerrainType.ICE)
    grid.set_terrain(20, 20, TerrainType.MOUNTAIN)
    place_hills(grid, GenerationSettings(hill_bias=1.0), random.Random(2))
    assert grid.terrain_at(10, 10) is TerrainType.ICE
    assert grid.terrain_at(20, 20) is TerrainType.MOUNTAIN
    assert grid.count(TerrainType.OCEAN) == 30 * 30 - 24 * 24


@pytest.mark.parametrize("chance,expect_icy", [(1.0, True), (0.0, False)])
def test_wide_segments_can_be_icy(monkeypatch, chance, expect_icy):
    monkeypatch.setattr(relief, "ICY_SEGMENT_CHANCE", chance)
    grid = island(60, 60)
    place_mountains(grid, GenerationSettings(mountain_bias=1.0), random.Random(3))
    assert grid.count(TerrainType.MOUNTAIN) > 0
    assert (grid.count(TerrainType.ICY_MOUNTAIN) > 0) is expect_icy


def test_default_icy_chance_mixes_both_mountain_kinds():
    grid = island(60, 60)
    place_mountains(grid, GenerationSettings(mountain_bias=1.0), random.Random(4))
    assert grid.count(TerrainType.MOUNTAIN) > 0
    assert grid.count(TerrainType.ICY_MOUNTAIN) > 0
    assert all(not c.walkable for c in grid.cells_of(TerrainType.ICY_MOUNTAIN))
