import pytest

from delver.dungeon.pathfinding import (
    bfs_path,
    bfs_path_keys,
    count_reachable_keys,
    path_error,
    reachable_cells,
    validate_path,
)
from delver.dungeon.tiles import Cell, find_position, is_passable
from delver.exceptions import MalformedGridError


CORRIDOR = [
    "#######",
    "#S   E#",
    "#######",
]

WINDING = [
    "#########",
    "#S#     #",
    "# # ### #",
    "#   #  E#",
    "#########",
]

OPEN_ROOM = [
    "#######",
    "#S    #",
    "#  #  #",
    "#  #  #",
    "#    E#",
    "#######",
]

SMALL_FIXTURES = [CORRIDOR, WINDING, OPEN_ROOM]


def reference_distance(grid, start, goal):
    """Distance by repeated relaxation until nothing changes (no queue, no BFS order)."""
    inf = float("inf")
    cells = [
        Cell(r, c)
        for r in range(len(grid))
        for c in range(len(grid[0]))
        if is_passable(grid, r, c, doors_closed=True)
    ]
    dist = {cell: inf for cell in cells}
    dist[start] = 0
    changed = True
    while changed:
        changed = False
        for cell in cells:
            for nxt in cell.neighbors4():
                if nxt in dist and dist[cell] + 1 < dist[nxt]:
                    dist[nxt] = dist[cell] + 1
                    changed = True
    return dist.get(goal, inf)


def test_corridor_path():
    path = bfs_path(CORRIDOR)
    assert path == [Cell(1, c) for c in range(1, 6)]
    assert path[0] == Cell(1, 1)
    assert path[-1] == Cell(1, 5)
    assert validate_path(CORRIDOR, path)


@pytest.mark.parametrize("grid", SMALL_FIXTURES)
def test_bfs_matches_reference_distance(grid):
    path = bfs_path(grid)
    start = find_position(grid, "S")
    goal = find_position(grid, "E")
    assert len(path) - 1 == reference_distance(grid, start, goal)
    assert validate_path(grid, path)


def test_winding_path_turns_corners():
    path = bfs_path(WINDING)
    assert len(path) == 13
    rows = {c.row for c in path}
    assert rows == {1, 2, 3}


def test_wall_between_start_and_exit():
    assert bfs_path(["#######", "#S###E#", "#######"]) == []
    assert bfs_path_keys(["#######", "#S###E#", "#######"]) == []


@pytest.mark.parametrize(
    "grid",
    [
        ["#####", "#   #", "# E #", "#####"],
        ["#####", "# S #", "#   #", "#####"],
        [],
    ],
)
def test_missing_endpoint_returns_empty(grid):
    assert bfs_path(grid) == []
    assert bfs_path_keys(grid) == []


def test_start_next_to_exit():
    grid = ["####", "#SE#", "####"]
    assert bfs_path(grid) == [Cell(1, 1), Cell(1, 2)]


def test_basic_search_treats_doors_as_walls():
    grid = ["#######", "#S a#E#", "#  A  #", "#######"]
    # the only way round the wall at (1,4) is through door A
    assert bfs_path(grid) == []
    path = bfs_path_keys(grid)
    assert path
    assert Cell(2, 3) in path


def test_ragged_grid_fails_fast():
    with pytest.raises(MalformedGridError):
        bfs_path(["#####", "#S E#", "##"])
    with pytest.raises(MalformedGridError):
        bfs_path_keys(["#####", "#S E", "#####"])


def test_each_solve_returns_a_fresh_list():
    a = bfs_path(CORRIDOR)
    b = bfs_path(CORRIDOR)
    assert a == b
    assert a is not b


def test_reachable_cells_distances():
    dist = reachable_cells(CORRIDOR, Cell(1, 1))
    assert dist[Cell(1, 5)] == 4
    assert len(dist) == 5
    assert reachable_cells(CORRIDOR, Cell(0, 0)) == {}


def test_count_reachable_keys_ignores_doors(key_door_grid):
    assert count_reachable_keys(key_door_grid) == 2
    assert count_reachable_keys(["#####", "#S#a#", "#####"]) == 0
    assert count_reachable_keys(["#####", "# a #", "#####"]) == 0
    # duplicate letters count once
    assert count_reachable_keys(["#######", "#Sa a #", "#######"]) == 1


def test_validate_path_rejects_bad_walks():
    good = bfs_path(CORRIDOR)
    assert validate_path(CORRIDOR, good)
    assert not validate_path(CORRIDOR, [])
    assert not validate_path(CORRIDOR, good[1:])
    assert not validate_path(CORRIDOR, good[:-1])
    jump = [good[0], good[2], good[3], good[4]]
    assert "not a single cardinal move" in path_error(CORRIDOR, jump)
    stay = [good[0]] + good
    assert not validate_path(CORRIDOR, stay)
    through_wall = [Cell(1, 1), Cell(0, 1), Cell(1, 1)] + good[1:]
    assert "wall" in path_error(CORRIDOR, through_wall)


def test_exit_reached_without_any_keys():
    path = bfs_path(CORRIDOR)
    assert validate_path(CORRIDOR, path, respect_doors=True)
    assert path_error(CORRIDOR, path, respect_doors=True) is None
    assert bfs_path_keys(CORRIDOR) == path
