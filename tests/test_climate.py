import random

import pytest

from helpers import FixedRandom, fill
from worldmap.cell import TerrainType
from worldmap.climate import (
    apply_climate,
    apply_tundra,
    freeze_polar_land,
    pole_distance,
    polar_band_height,
    redistribute_polar_ice,
    seed_ice,
)
from worldmap.grid import Grid
from worldmap.settings import GenerationSettings


@pytest.mark.parametrize(
    "temperature,rows,expected",
    [
        (30, 100, 15),
        (15, 100, 12),
        (2, 100, 8),
        (30, 10, 5),
        (30, 1, 0),
    ],
)
def test_polar_band_height(temperature, rows, expected):
    assert polar_band_height(temperature, rows) == expected


def test_pole_distance_is_symmetric():
    assert [pole_distance(y, 6) for y in range(6)] == [0, 1, 2, 2, 1, 0]


def test_seed_ice_uses_temperature_as_percentage():
    grid = Grid(10, 10)
    assert seed_ice(grid, 15, random.Random(0)) == 15
    assert grid.count(TerrainType.ICE) == 15


def test_redistribution_preserves_ice_count():
    grid = Grid(20, 40)
    for x in range(10):
        grid.set_terrain(x, 20, TerrainType.ICE)

    swaps = redistribute_polar_ice(grid, 5, random.Random(1))

    assert swaps == 10
    ice = grid.cells_of(TerrainType.ICE)
    assert len(ice) == 10
    assert all(pole_distance(c.y, grid.rows) < 5 for c in ice)


def test_redistribution_with_little_polar_ocean():
    grid = Grid(4, 10)
    fill(grid, TerrainType.GRASSLAND)
    grid.set_terrain(0, 0, TerrainType.OCEAN)
    for x in range(4):
        grid.set_terrain(x, 5, TerrainType.ICE)

    swaps = redistribute_polar_ice(grid, 2, random.Random(2))

    assert swaps == 1
    assert grid.count(TerrainType.ICE) == 4
    assert grid.terrain_at(0, 0) is TerrainType.ICE


def test_polar_land_freezes_fully_beyond_band_edge():
    grid = fill(Grid(10, 20), TerrainType.GRASSLAND)
    freeze_polar_land(grid, 4, random.Random(3))
    for cell in grid:
        dist = pole_distance(cell.y, grid.rows)
        if dist < 2:
            assert cell.terrain is TerrainType.ICE
        elif dist >= 4:
            assert cell.terrain is TerrainType.GRASSLAND


def test_tundra_covers_remaining_polar_land():
    grid = fill(Grid(10, 20), TerrainType.GRASSLAND)
    rng = random.Random(4)
    freeze_polar_land(grid, 4, rng)
    apply_tundra(grid, 4, rng)
    for cell in grid:
        dist = pole_distance(cell.y, grid.rows)
        if dist < 4:
            assert cell.terrain in (TerrainType.ICE, TerrainType.TUNDRA)
        elif dist >= 9:
            assert cell.terrain is TerrainType.GRASSLAND


def test_zero_temperature_disables_climate():
    grid = fill(Grid(10, 10), TerrainType.GRASSLAND)
    grid.set_terrain(0, 0, TerrainType.OCEAN)
    report = apply_climate(grid, GenerationSettings(temperature=0), random.Random(0))
    assert report.band_height == 0
    assert grid.count(TerrainType.ICE, TerrainType.TUNDRA) == 0


def test_apply_climate_reports_seeded_ice():
    grid = Grid(20, 20)
    report = apply_climate(grid, GenerationSettings(temperature=30), random.Random(5))
    assert report.band_height == 10
    assert report.ice_seeded == 120
    assert grid.count(TerrainType.ICE) == 120


@pytest.mark.parametrize(
    "draw,tundra_distances",
    [
        (0.75, {0, 1, 2, 3, 4, 5}),
        (0.45, {0, 1, 2, 3, 4, 5, 6, 7, 8}),
        (0.95, {0, 1, 2, 3}),
    ],
)
def test_tundra_falls_off_over_five_rows(draw, tundra_distances):
    grid = fill(Grid(6, 30), TerrainType.GRASSLAND)
    apply_tundra(grid, 4, FixedRandom(draw))
    for cell in grid:
        dist = pole_distance(cell.y, grid.rows)
        expected = TerrainType.TUNDRA if dist in tundra_distances else TerrainType.GRASSLAND
        assert cell.terrain is expected


def test_tundra_reaches_five_rows_past_the_band():
    grid = fill(Grid(30, 30), TerrainType.GRASSLAND)
    apply_tundra(grid, 4, random.Random(6))
    by_distance = {}
    for cell in grid:
        dist = pole_distance(cell.y, grid.rows)
        by_distance.setdefault(dist, []).append(cell.terrain is TerrainType.TUNDRA)
    for dist in range(4, 9):
        assert any(by_distance[dist])
    assert not any(by_distance[9])
