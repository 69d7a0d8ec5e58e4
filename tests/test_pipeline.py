import pytest

from worldmap.cell import IMPASSABLE_TERRAIN, TerrainType, cell_type_for
from worldmap.pipeline import PASSES, GenerationResult, generate_world
from worldmap.settings import GenerationSettings


def small_settings(**overrides):
    values = dict(seed=1234, land_area=40, continents=2, islands=3)
    values.update(overrides)
    return GenerationSettings(**values)


def test_same_seed_gives_same_map():
    first, _ = generate_world(small_settings(), cols=60, rows=40)
    second, _ = generate_world(small_settings(), cols=60, rows=40)
    assert first.serialize() == second.serialize()


def test_missing_seed_is_reported_and_replayable():
    grid, report = generate_world(small_settings(seed=None), cols=40, rows=30)
    assert isinstance(report.seed, int)
    replay, _ = generate_world(small_settings(seed=report.seed), cols=40, rows=30)
    assert replay.serialize() == grid.serialize()


def test_walkability_matches_terrain_everywhere():
    grid, _ = generate_world(small_settings(mountain_bias=1.0), cols=60, rows=40)
    for cell in grid:
        assert cell.walkable == (cell.terrain not in IMPASSABLE_TERRAIN)
        assert cell.type is cell_type_for(cell.terrain)


def test_result_unpacks_and_records_every_pass():
    result = generate_world(small_settings(), cols=30, rows=20)
    assert isinstance(result, GenerationResult)
    grid, report = result
    assert (grid.cols, grid.rows) == (30, 20)
    assert list(report.timings) == [name for name, _ in PASSES]


def test_rivers_in_report_are_on_the_map():
    grid, report = generate_world(small_settings(mountain_bias=1.0, river_bias=1.0), cols=80, rows=50)
    for path in report.rivers:
        assert len(set(path)) == len(path)
        assert all(grid.terrain_at(x, y) is TerrainType.RIVER for x, y in path)
        assert grid.is_adjacent_to(*path[-1], (TerrainType.OCEAN,), diagonal=False)


def test_no_land_requested_gives_open_ocean():
    grid, report = generate_world(small_settings(land_area=0, temperature=0), cols=20, rows=10)
    assert grid.terrain_counts() == {TerrainType.OCEAN: 200}
    assert report.placement.placed == []


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_zero_temperature_map_has_no_polar_terrain(seed):
    grid, _ = generate_world(small_settings(seed=seed, temperature=0), cols=40, rows=30)
    assert grid.count(TerrainType.ICE, TerrainType.TUNDRA) == 0
