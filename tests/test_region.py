import math
import random

import pytest

from helpers import is_connected
from worldmap.grid import Grid
from worldmap.region import RegionGrower


@pytest.mark.parametrize("seed", range(5))
def test_region_is_connected_and_exact_size(seed):
    grid = Grid(30, 20)
    grower = RegionGrower(grid, random.Random(seed))
    region = grower.grow((15, 10), 80)
    assert len(region) == 80
    assert (15, 10) in region
    assert is_connected(region)
    assert all(coord in grid for coord in region)


def test_region_avoids_occupied_tiles():
    grid = Grid(60, 20)
    rng = random.Random(1)
    grower = RegionGrower(grid, rng)
    first = grower.grow((10, 10), 60)
    second = grower.grow((50, 10), 60, occupied=first)
    assert not first & second
    assert len(second) == 60
    assert is_connected(second)


def test_region_stops_short_when_enclosed():
    grid = Grid(10, 10)
    occupied = {(x, y) for x in range(3, 10) for y in range(10)}
    grower = RegionGrower(grid, random.Random(2))
    region = grower.grow((1, 1), 50, occupied=occupied)
    # Only the three westmost columns are reachable
    assert len(region) == 30
    assert not region & occupied
    assert is_connected(region)


def test_fill_reaches_tiles_inside_edge_margin():
    grid = Grid(6, 6)
    grower = RegionGrower(grid, random.Random(0), edge_margin=2)
    region = grower.grow((3, 3), 36)
    assert len(region) == 36


@pytest.mark.parametrize(
    "seed_coord,target,occupied",
    [
        ((3, 3), 0, None),
        ((-1, 3), 10, None),
        ((3, 3), 10, {(3, 3)}),
    ],
)
def test_degenerate_requests_return_empty(seed_coord, target, occupied):
    grower = RegionGrower(Grid(8, 8), random.Random(0))
    assert grower.grow(seed_coord, target, occupied) == set()


def test_same_rng_seed_gives_same_region():
    a = RegionGrower(Grid(30, 20), random.Random(9)).grow((15, 10), 70)
    b = RegionGrower(Grid(30, 20), random.Random(9)).grow((15, 10), 70)
    assert a == b


def test_growth_does_not_mutate_grid():
    grid = Grid(12, 12)
    before = grid.serialize()
    RegionGrower(grid, random.Random(4)).grow((6, 6), 40)
    assert grid.serialize() == before


def plain_grower(**biases):
    values = dict(east_west_bias=0.0, distance_bias=0.0, peninsula_bias=1.0)
    values.update(biases)
    return RegionGrower(Grid(30, 40), random.Random(0), **values)


def test_weight_favours_candidates_with_few_region_neighbours():
    grower = plain_grower()
    seed = (5, 5)
    assert grower._weight((5, 6), seed, 1) == pytest.approx(1 / 2)
    assert grower._weight((5, 6), seed, 3) == pytest.approx(1 / 4)
    assert grower._weight((5, 6), seed, 1) > grower._weight((5, 6), seed, 3)


def test_weight_applies_peninsula_factor_up_to_two_neighbours():
    grower = plain_grower(peninsula_bias=0.5)
    seed = (5, 5)
    assert grower._weight((5, 6), seed, 2) == pytest.approx(1 / 3 * 0.5)
    assert grower._weight((5, 6), seed, 3) == pytest.approx(1 / 4)


def test_weight_east_west_factor_only_off_the_seed_column():
    grower = plain_grower(east_west_bias=1.5)
    seed = (5, 5)
    assert grower._weight((5, 6), seed, 3) == pytest.approx(1 / 4)
    assert grower._weight((6, 5), seed, 3) == pytest.approx(1 / 4 * 2.5)


def test_weight_grows_with_distance_from_seed():
    grower = plain_grower(distance_bias=2.0)
    seed = (5, 5)
    # Grid diagonal of a 30x40 grid is 50
    assert grower._weight((5, 15), seed, 3) == pytest.approx(1 / 4 * (1 + 2.0 * 10 / 50))
    assert grower._weight((5, 25), seed, 3) > grower._weight((5, 15), seed, 3)


def _seed_column_tiles(east_west_bias):
    total = 0
    for seed in range(8):
        grower = RegionGrower(Grid(60, 60), random.Random(seed), east_west_bias=east_west_bias)
        region = grower.grow((30, 30), 150)
        total += sum(1 for x, _ in region if x == 30)
    return total


def test_east_west_bias_steers_growth_off_the_seed_column():
    assert _seed_column_tiles(5.0) < _seed_column_tiles(0.0)


def _mean_seed_distance(distance_bias):
    total = 0.0
    for seed in range(10):
        grower = RegionGrower(
            Grid(20, 20),
            random.Random(seed),
            east_west_bias=0.0,
            distance_bias=distance_bias,
        )
        region = grower.grow((10, 10), 120)
        total += sum(math.hypot(x - 10, y - 10) for x, y in region) / len(region)
    return total


def test_distance_bias_elongates_regions():
    assert _mean_seed_distance(5.0) > _mean_seed_distance(0.0)
