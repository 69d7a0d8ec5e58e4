import random

from helpers import fill
from worldmap.cell import TerrainType
from worldmap.coast import smooth_coast
from worldmap.grid import Grid
from worldmap.landmass import place_landmasses
from worldmap.settings import GenerationSettings


def test_enclosed_ocean_tile_is_filled():
    grid = fill(Grid(5, 5), TerrainType.GRASSLAND)
    grid.set_terrain(2, 2, TerrainType.OCEAN)
    assert smooth_coast(grid) == 1
    assert grid.terrain_at(2, 2) is TerrainType.GRASSLAND
    assert grid.get_cell(2, 2).walkable


def test_five_land_neighbours_is_not_enough():
    grid = Grid(5, 5)
    for coord in [(1, 1), (2, 1), (3, 1), (1, 2), (3, 2)]:
        grid.set_terrain(*coord, TerrainType.GRASSLAND)
    assert smooth_coast(grid) == 0
    assert grid.terrain_at(2, 2) is TerrainType.OCEAN


def test_modal_terrain_wins_with_scan_order_tie_break():
    grid = Grid(3, 3)
    for coord in [(0, 0), (1, 0), (2, 0), (0, 1)]:
        grid.set_terrain(*coord, TerrainType.HILL)
    for coord in [(2, 1), (0, 2), (1, 2), (2, 2)]:
        grid.set_terrain(*coord, TerrainType.TUNDRA)
    smooth_coast(grid)
    assert grid.terrain_at(1, 1) is TerrainType.HILL

    grid.set_terrain(1, 1, TerrainType.OCEAN)
    grid.set_terrain(0, 1, TerrainType.TUNDRA)
    smooth_coast(grid)
    assert grid.terrain_at(1, 1) is TerrainType.TUNDRA


def test_open_ocean_is_untouched():
    grid = Grid(8, 8)
    assert smooth_coast(grid) == 0
    assert grid.count(TerrainType.OCEAN) == 64


def test_smoothing_is_idempotent():
    for seed in range(4):
        grid = Grid(40, 30)
        settings = GenerationSettings(land_area=45, continents=2, islands=4)
        place_landmasses(grid, settings, random.Random(seed))
        smooth_coast(grid)
        once = grid.serialize()
        assert smooth_coast(grid) == 0
        assert grid.serialize() == once
