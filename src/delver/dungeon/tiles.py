from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple

from ..exceptions import MalformedGridError


WALL = "#"
FLOOR = " "
START = "S"
EXIT = "E"
KEYS = "abcdef"
DOORS = "ABCDEF"

# Rows are sequences of single-character symbols; the wire format is a list of str.
Grid = Sequence[Sequence[str]]

# Expansion order shared by every search: north, south, west, east.
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(frozen=True)
class Cell:
    """A (row, col) grid position. Row 0 is the top row, col 0 the leftmost column."""

    row: int
    col: int

    def neighbors4(self) -> Iterator["Cell"]:
        for dr, dc in NEIGHBOR_OFFSETS:
            yield Cell(self.row + dr, self.col + dc)

    def is_adjacent(self, other: "Cell") -> bool:
        return abs(self.row - other.row) + abs(self.col - other.col) == 1


MISSING = Cell(-1, -1)


def is_key(symbol: str) -> bool:
    """True for the key letters a-f."""
    return len(symbol) == 1 and symbol in KEYS


def is_door(symbol: str) -> bool:
    """True for the door letters A-F, except E which always marks the exit."""
    return len(symbol) == 1 and symbol in DOORS and symbol != EXIT


def validate_grid(grid: Grid) -> Tuple[int, int]:
    """Check the grid is rectangular and return its (rows, cols).

    An empty grid is reported as (0, 0). Ragged rows raise MalformedGridError so that
    searches never index past the end of a short row.
    """
    rows = len(grid)
    if rows == 0:
        return 0, 0
    cols = len(grid[0])
    for r, line in enumerate(grid):
        if len(line) != cols:
            raise MalformedGridError(
                f"Grid is not rectangular: row {r} has length {len(line)}, expected {cols}"
            )
    return rows, cols


def in_bounds(grid: Grid, row: int, col: int) -> bool:
    return 0 <= row < len(grid) and 0 <= col < len(grid[row])


def find_position(grid: Grid, symbol: str) -> Cell:
    """Return the first cell holding `symbol` in row-major order, or MISSING."""
    for r, line in enumerate(grid):
        for c, ch in enumerate(line):
            if ch == symbol:
                return Cell(r, c)
    return MISSING


def is_passable(grid: Grid, row: int, col: int, doors_closed: bool = False) -> bool:
    """True if (row, col) is in bounds and not a wall.

    With doors_closed=True doors count as walls, which is how the basic pathfinder
    sees the grid. The key-door pathfinder decides doors separately via can_pass_door.
    """
    if not in_bounds(grid, row, col):
        return False
    ch = grid[row][col]
    if ch == WALL:
        return False
    if doors_closed and is_door(ch):
        return False
    return True


def can_pass_door(symbol: str, key_mask: int) -> bool:
    """Non-door symbols are always passable; door X needs bit (X - "A") set in key_mask."""
    if not is_door(symbol):
        return True
    bit = ord(symbol) - ord("A")
    return bool((key_mask >> bit) & 1)


def collect_key(symbol: str, key_mask: int) -> int:
    if not is_key(symbol):
        return key_mask
    return key_mask | (1 << (ord(symbol) - ord("a")))


def to_rows(cells: List[List[str]]) -> List[str]:
    """Join a mutable character matrix back into the list-of-str wire format."""
    return ["".join(line) for line in cells]


def to_matrix(grid: Grid) -> List[List[str]]:
    return [list(line) for line in grid]


__all__ = [
    "WALL",
    "FLOOR",
    "START",
    "EXIT",
    "KEYS",
    "DOORS",
    "Grid",
    "NEIGHBOR_OFFSETS",
    "Cell",
    "MISSING",
    "is_key",
    "is_door",
    "validate_grid",
    "in_bounds",
    "find_position",
    "is_passable",
    "can_pass_door",
    "collect_key",
    "to_rows",
    "to_matrix",
]
