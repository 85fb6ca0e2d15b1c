import pytest

from delver.dungeon.tiles import (
    MISSING,
    Cell,
    can_pass_door,
    collect_key,
    find_position,
    is_door,
    is_key,
    is_passable,
    validate_grid,
)
from delver.exceptions import MalformedGridError


GRID = [
    "#######",
    "#S a A#",
    "#  b E#",
    "#######",
]


def test_find_position_row_major_first_match():
    grid = ["#S#", "# S"]
    assert find_position(grid, "S") == Cell(0, 1)
    assert find_position(GRID, "E") == Cell(2, 5)


def test_find_position_missing_returns_sentinel():
    assert find_position(GRID, "f") == MISSING
    assert find_position([], "S") == Cell(-1, -1)


def test_cell_structural_equality_and_hash():
    assert Cell(1, 2) == Cell(1, 2)
    assert len({Cell(1, 2), Cell(1, 2), Cell(2, 1)}) == 2
    assert Cell(1, 1).is_adjacent(Cell(1, 2))
    assert not Cell(1, 1).is_adjacent(Cell(2, 2))
    assert not Cell(1, 1).is_adjacent(Cell(1, 1))


def test_is_passable_bounds_and_walls():
    assert is_passable(GRID, 1, 1)
    assert is_passable(GRID, 1, 2)
    assert not is_passable(GRID, 0, 0)
    assert not is_passable(GRID, -1, 1)
    assert not is_passable(GRID, 1, 7)
    assert not is_passable(GRID, 4, 1)


def test_is_passable_doors_depend_on_view():
    assert is_passable(GRID, 1, 5)
    assert not is_passable(GRID, 1, 5, doors_closed=True)
    # keys are ordinary floor for both views
    assert is_passable(GRID, 1, 3, doors_closed=True)


def test_can_pass_door():
    assert can_pass_door(" ", 0)
    assert can_pass_door("a", 0)
    assert not can_pass_door("A", 0)
    assert can_pass_door("A", 0b1)
    assert not can_pass_door("C", 0b011)
    assert can_pass_door("C", 0b100)
    assert can_pass_door("F", 1 << 5)


def test_collect_key():
    assert collect_key(" ", 0b10) == 0b10
    assert collect_key("A", 0) == 0
    assert collect_key("a", 0) == 0b1
    assert collect_key("c", 0b1) == 0b101
    assert collect_key("a", 0b1) == 0b1
    assert collect_key("f", 0) == 1 << 5


def test_symbol_classes():
    assert all(is_key(k) for k in "abcdef")
    assert all(is_door(d) for d in "ABCDF")
    assert not is_key("g")
    assert not is_door("G")
    assert not is_door("S") and not is_door("E")


def test_validate_grid_rectangular():
    assert validate_grid(GRID) == (4, 7)
    assert validate_grid([]) == (0, 0)


def test_validate_grid_ragged_rows_rejected():
    with pytest.raises(MalformedGridError) as ei:
        validate_grid(["#####", "#S E#", "###"])
    assert "row 2" in str(ei.value)
    # still a ValueError for callers that only know the builtin
    assert isinstance(ei.value, ValueError)


def test_exit_letter_is_never_a_door():
    grid = ["#####", "#S E#", "#####"]
    exit_pos = find_position(grid, "E")
    assert not is_door("E")
    assert is_passable(grid, exit_pos.row, exit_pos.col, doors_closed=True)
    assert can_pass_door("E", 0)
    # key e still exists, it just has no door it can open
    assert is_key("e")
    assert collect_key("e", 0) == 1 << 4
