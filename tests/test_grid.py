"""Tests for grid coordinate transforms and obstacle placement."""

import math
import random

import pytest

from navgrid.environment import PILLAR_BLOCK, Grid, GridPoint, PillarPlacementError


def blocked_cells(grid: Grid) -> set:
    return {(p.gx, p.gz) for p, cell in grid.iter_cells() if cell.blocked}


def pillar_footprints(grid: Grid) -> set:
    cells = set()
    for pillar in grid.pillars:
        size = int(pillar.size)
        anchor = grid.world_to_cell(pillar.x - pillar.size / 2, pillar.z - pillar.size / 2)
        assert anchor is not None
        for dx in range(size):
            for dz in range(size):
                cells.add((anchor.gx + dx, anchor.gz + dz))
    return cells


@pytest.mark.parametrize("width,height", [(10, 10), (7, 5), (1, 1), (200, 200)])
def test_world_cell_round_trip(width, height):
    grid = Grid(width, height)
    for gx in range(width):
        for gz in range(height):
            x, z = grid.cell_to_world(gx, gz)
            assert grid.world_to_cell(x, z) == GridPoint(gx, gz)


def test_world_origin_maps_to_center_cell():
    grid = Grid(200, 200)
    assert grid.world_to_cell(0.0, 0.0) == GridPoint(100, 100)
    assert grid.cell_to_world(100, 100) == (0.0, 0.0)
    # Anything inside a cell floors to that cell
    assert grid.world_to_cell(0.99, -0.01) == GridPoint(100, 99)


def test_world_to_cell_bounds():
    grid = Grid(10, 10)
    assert grid.world_to_cell(-5.0, -5.0) == GridPoint(0, 0)
    assert grid.world_to_cell(4.999, 4.999) == GridPoint(9, 9)
    assert grid.world_to_cell(5.0, 0.0) is None
    assert grid.world_to_cell(0.0, -5.01) is None
    assert grid.world_to_cell(math.nan, 0.0) is None
    assert grid.world_to_cell(math.inf, 0.0) is None


def test_zero_sized_grid_rejects_every_point():
    grid = Grid(0, 0)
    assert grid.world_to_cell(0.0, 0.0) is None
    assert grid.place_flag(0.0, 0.0) is False
    assert grid.generate_rocks(3) == []


def test_flag_is_unique():
    grid = Grid(10, 10)
    assert grid.place_flag(0.5, 0.5) is True
    assert grid.place_flag(-3.0, 2.0) is True

    flagged = [p for p, cell in grid.iter_cells() if cell.has_flag]
    assert flagged == [GridPoint(2, 7)]
    assert grid.flag_cell() == GridPoint(2, 7)


def test_flag_out_of_bounds_leaves_grid_untouched():
    grid = Grid(10, 10)
    assert grid.place_flag(1.0, 1.0) is True
    assert grid.place_flag(50.0, 0.0) is False
    assert grid.flag_cell() == GridPoint(6, 6)


def test_flag_refused_on_blocked_or_occupied_cell_clears_old_flag():
    grid = Grid(10, 10)
    grid.block(0, 0, "wall")
    grid.cell(1, 0).occupied = True

    assert grid.place_flag(2.0, 2.0) is True
    assert grid.place_flag(-5.0, -5.0) is False
    # The previous flag is always removed before the target cell is checked
    assert grid.flag_cell() is None

    assert grid.place_flag(-4.0, -5.0) is False
    assert grid.flag_cell() is None


def test_generate_pillars_replaces_previous_layout():
    grid = Grid(30, 30, rng=random.Random(7), pillar_size=2)

    first = grid.generate_pillars(10)
    assert len(first) == 10
    assert blocked_cells(grid) == pillar_footprints(grid)
    assert len(blocked_cells(grid)) == 10 * 4

    second = grid.generate_pillars(6)
    assert len(second) == 6
    assert grid.pillars == second
    assert blocked_cells(grid) == pillar_footprints(grid)
    assert len(blocked_cells(grid)) == 6 * 4

    for _, cell in grid.iter_cells():
        if not cell.blocked:
            assert cell.blocked_type == ""
        else:
            assert cell.blocked_type == PILLAR_BLOCK


def test_clearing_pillars_keeps_other_blockers():
    grid = Grid(12, 12, rng=random.Random(3), pillar_size=2)
    grid.block(0, 0, "wall")

    grid.generate_pillars(4)
    grid.generate_pillars(0)

    assert blocked_cells(grid) == {(0, 0)}
    assert grid.cell(0, 0).blocked_type == "wall"
    assert grid.pillars == []


def test_pillars_avoid_flag_and_rocks():
    for seed in range(20):
        grid = Grid(10, 10, rng=random.Random(seed), pillar_size=2)
        grid.cell(0, 0).occupied = True
        assert grid.place_flag(4.0, 4.0)

        grid.generate_pillars(5)

        assert not grid.cell(0, 0).blocked
        assert not grid.cell(9, 9).blocked
        assert grid.flag_cell() == GridPoint(9, 9)


def test_pillar_center_is_footprint_center():
    grid = Grid(2, 2, rng=random.Random(0), pillar_size=2)
    (pillar,) = grid.generate_pillars(1)
    # Only anchor (0, 0) fits; its 2x2 block spans world [-1, 1) on both axes
    assert (pillar.x, pillar.z, pillar.size) == (0.0, 0.0, 2.0)


def test_pillar_failure_rolls_back():
    grid = Grid(2, 2, rng=random.Random(0), pillar_size=2, pillar_max_attempts=5)
    original = grid.generate_pillars(1)

    with pytest.raises(PillarPlacementError):
        grid.generate_pillars(2)

    assert grid.pillars == original
    assert blocked_cells(grid) == {(0, 0), (1, 0), (0, 1), (1, 1)}


def test_pillar_settings_are_read_only():
    grid = Grid(6, 6, rng=random.Random(4), pillar_size=2, pillar_max_attempts=20)
    kept = grid.generate_pillars(2)

    with pytest.raises(AttributeError):
        grid.pillar_size = 3
    with pytest.raises(AttributeError):
        grid.pillar_max_attempts = 1

    assert grid.pillar_size == 2
    assert grid.pillar_max_attempts == 20
    with pytest.raises(PillarPlacementError):
        grid.generate_pillars(50)

    # Restored footprints still match the restored records
    assert grid.pillars == kept
    assert blocked_cells(grid) == pillar_footprints(grid)


def test_unbounded_attempts_still_place_pillars():
    grid = Grid(8, 8, rng=random.Random(5), pillar_size=2, pillar_max_attempts=0)
    assert len(grid.generate_pillars(4)) == 4
    assert len(blocked_cells(grid)) == 16


def test_snapshot_is_independent_of_later_edits():
    grid = Grid(10, 10, rng=random.Random(2), pillar_size=2)
    grid.block(1, 1, "wall")
    copy = grid.snapshot()

    grid.block(5, 5, "wall")
    assert grid.place_flag(-5.0, -5.0)
    grid.generate_pillars(2)
    grid.generate_rocks(1)

    assert blocked_cells(copy) == {(1, 1)}
    assert copy.flag_cell() is None
    assert copy.pillars == []
    assert copy.rocks == []
    assert (copy.width, copy.height, copy.pillar_size) == (10, 10, 2)


def test_pillar_larger_than_grid():
    grid = Grid(1, 3, pillar_size=2)
    with pytest.raises(PillarPlacementError):
        grid.generate_pillars(1)
    assert grid.pillars == []
    assert blocked_cells(grid) == set()


def test_generate_rocks_accumulates_and_marks_occupied():
    grid = Grid(40, 40, rng=random.Random(11))

    assert len(grid.generate_rocks(3)) == 3
    rocks = grid.generate_rocks(2)
    assert len(rocks) == 5

    occupied = {(p.gx, p.gz) for p, cell in grid.iter_cells() if cell.occupied}
    for rock in rocks:
        x, y, z = rock.position
        sx, sy, sz = rock.scale
        assert y == 0.0 and sy == 1.0
        assert 1 <= sx <= 5 and 1 <= sz <= 5
        anchor = grid.world_to_cell(x - sx / 2, z - sz / 2)
        assert anchor is not None
        for dx in range(int(sx)):
            for dz in range(int(sz)):
                assert (anchor.gx + dx, anchor.gz + dz) in occupied

    # Rocks are decorative; nothing is blocked
    assert blocked_cells(grid) == set()


def test_rocks_fit_tiny_grid():
    grid = Grid(2, 2, rng=random.Random(5))
    rocks = grid.generate_rocks(10)
    assert len(rocks) == 10
    for rock in rocks:
        assert rock.scale[0] <= 2 and rock.scale[2] <= 2
