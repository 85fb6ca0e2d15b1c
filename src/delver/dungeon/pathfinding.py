from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .tiles import (
    EXIT,
    MISSING,
    START,
    WALL,
    Cell,
    Grid,
    NEIGHBOR_OFFSETS,
    can_pass_door,
    collect_key,
    find_position,
    in_bounds,
    is_door,
    is_key,
    is_passable,
    validate_grid,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchState:
    """A node of the key-door search: a position plus the keys collected on the way there.

    Two states on the same cell with different masks are different nodes. States are
    hashable and serve directly as visited-set and parent-map keys.
    """

    row: int
    col: int
    key_mask: int = 0

    @property
    def cell(self) -> Cell:
        return Cell(self.row, self.col)


def _reconstruct(parents: Dict[Cell, Cell], start: Cell, goal: Cell) -> List[Cell]:
    path = [goal]
    current = goal
    while current != start:
        current = parents[current]
        path.append(current)
    path.reverse()
    return path


def bfs_path(grid: Grid) -> List[Cell]:
    """Shortest path from S to E through floor cells; doors are always closed.

    Returns an empty list if S or E is missing or no route exists.
    """
    validate_grid(grid)
    start = find_position(grid, START)
    goal = find_position(grid, EXIT)
    if start == MISSING or goal == MISSING:
        logger.debug("bfs_path: missing endpoint (start=%s, exit=%s)", start, goal)
        return []

    q = deque([start])
    seen = {start}
    parents: Dict[Cell, Cell] = {}
    while q:
        cur = q.popleft()
        if cur == goal:
            path = _reconstruct(parents, start, goal)
            logger.debug("bfs_path: found path of %d cells (%d visited)", len(path), len(seen))
            return path
        for nxt in cur.neighbors4():
            if nxt in seen or not is_passable(grid, nxt.row, nxt.col, doors_closed=True):
                continue
            seen.add(nxt)
            parents[nxt] = cur
            q.append(nxt)

    logger.debug("bfs_path: exit unreachable after visiting %d cells", len(seen))
    return []


def bfs_path_keys(grid: Grid) -> List[Cell]:
    """Shortest path from S to E where stepping on a key collects it and doors need their key.

    The search runs over (row, col, key_mask) states, so the same cell may be revisited
    once more keys are held. Any mask is accepted at the exit.
    """
    validate_grid(grid)
    start = find_position(grid, START)
    goal = find_position(grid, EXIT)
    if start == MISSING or goal == MISSING:
        logger.debug("bfs_path_keys: missing endpoint (start=%s, exit=%s)", start, goal)
        return []

    origin = SearchState(start.row, start.col, 0)
    q = deque([origin])
    seen = {origin}
    parents: Dict[SearchState, SearchState] = {}
    while q:
        cur = q.popleft()
        if cur.row == goal.row and cur.col == goal.col:
            path = [cur.cell]
            state = cur
            while state != origin:
                state = parents[state]
                path.append(state.cell)
            path.reverse()
            logger.debug(
                "bfs_path_keys: found path of %d cells, keys=%s (%d states explored)",
                len(path),
                bin(cur.key_mask),
                len(seen),
            )
            return path
        for dr, dc in NEIGHBOR_OFFSETS:
            nr, nc = cur.row + dr, cur.col + dc
            if not is_passable(grid, nr, nc):
                continue
            symbol = grid[nr][nc]
            if not can_pass_door(symbol, cur.key_mask):
                continue
            nxt = SearchState(nr, nc, collect_key(symbol, cur.key_mask))
            if nxt in seen:
                continue
            seen.add(nxt)
            parents[nxt] = cur
            q.append(nxt)

    logger.debug("bfs_path_keys: exit unreachable after %d states", len(seen))
    return []


def reachable_cells(grid: Grid, start: Cell, doors_closed: bool = False) -> Dict[Cell, int]:
    """BFS distance map from `start` over passable cells (empty if start is not passable)."""
    if not is_passable(grid, start.row, start.col, doors_closed=doors_closed):
        return {}
    dist = {start: 0}
    q = deque([start])
    while q:
        cur = q.popleft()
        for nxt in cur.neighbors4():
            if nxt not in dist and is_passable(grid, nxt.row, nxt.col, doors_closed=doors_closed):
                dist[nxt] = dist[cur] + 1
                q.append(nxt)
    return dist


def count_reachable_keys(grid: Grid) -> int:
    """Number of distinct keys reachable from S when doors are ignored entirely."""
    validate_grid(grid)
    start = find_position(grid, START)
    if start == MISSING:
        return 0
    mask = 0
    for cell in reachable_cells(grid, start):
        mask = collect_key(grid[cell.row][cell.col], mask)
    return bin(mask).count("1")


def path_error(grid: Grid, path: Sequence[Cell], respect_doors: bool = False) -> Optional[str]:
    """Describe why `path` is not a valid S-to-E walk, or return None when it is."""
    if not path:
        return "path is empty"
    start = find_position(grid, START)
    goal = find_position(grid, EXIT)
    if start == MISSING or goal == MISSING:
        return "grid has no start or exit"
    if path[0] != start:
        return f"path starts at {path[0]}, not at start {start}"
    if path[-1] != goal:
        return f"path ends at {path[-1]}, not at exit {goal}"

    mask = 0
    prev: Optional[Cell] = None
    for i, cell in enumerate(path):
        if not in_bounds(grid, cell.row, cell.col):
            return f"step {i} at {cell} is out of bounds"
        symbol = grid[cell.row][cell.col]
        if symbol == WALL:
            return f"step {i} at {cell} is a wall"
        if prev is not None and not prev.is_adjacent(cell):
            return f"step {i} from {prev} to {cell} is not a single cardinal move"
        if respect_doors:
            if is_door(symbol) and not can_pass_door(symbol, mask):
                return f"step {i} crosses door {symbol!r} at {cell} without its key"
            if is_key(symbol):
                mask = collect_key(symbol, mask)
        prev = cell
    return None


def validate_path(grid: Grid, path: Sequence[Cell], respect_doors: bool = False) -> bool:
    error = path_error(grid, path, respect_doors=respect_doors)
    if error is not None:
        logger.debug("Invalid path: %s", error)
    return error is None


__all__ = [
    "SearchState",
    "bfs_path",
    "bfs_path_keys",
    "reachable_cells",
    "count_reachable_keys",
    "path_error",
    "validate_path",
]
