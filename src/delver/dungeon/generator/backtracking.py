from __future__ import annotations
import logging
import random
from typing import Iterator, List, Optional, Tuple

from ...rng import RNGManager, Seed
from ..pathfinding import reachable_cells
from ..tiles import EXIT, FLOOR, START, WALL, Cell, to_rows
from .base import DungeonGenerator

logger = logging.getLogger(__name__)

MIN_SIZE = 5
PLACEMENTS = ("farthest", "scan")

# Carving moves two cells at a time so a wall line always separates neighbouring cells.
CARVE_STEPS: Tuple[Tuple[int, int], ...] = ((-2, 0), (2, 0), (0, -2), (0, 2))

Frame = Tuple[int, int, Iterator[Tuple[int, int]]]


def normalize_dimensions(rows: int, cols: int) -> Tuple[int, int]:
    """Clamp to at least MIN_SIZE and bump even sizes to the next odd number."""
    rows = max(MIN_SIZE, int(rows))
    cols = max(MIN_SIZE, int(cols))
    if rows % 2 == 0:
        rows += 1
    if cols % 2 == 0:
        cols += 1
    return rows, cols


def _is_cell_center(row: int, col: int, rows: int, cols: int) -> bool:
    return 0 < row < rows - 1 and 0 < col < cols - 1 and row % 2 == 1 and col % 2 == 1


def _shuffled_steps(rng: random.Random) -> Iterator[Tuple[int, int]]:
    steps = list(CARVE_STEPS)
    rng.shuffle(steps)
    return iter(steps)


def carve_maze(rows: int, cols: int, rng: random.Random) -> List[List[str]]:
    """Carve a perfect maze by recursive backtracking from (1, 1).

    The recursion is kept on an explicit stack of (row, col, remaining directions)
    frames; each frame tries its shuffled directions in order and descends into the
    first unvisited cell before trying the next one, exactly like the recursive form.
    """
    rows, cols = normalize_dimensions(rows, cols)
    cells = [[WALL for _ in range(cols)] for _ in range(rows)]
    cells[1][1] = FLOOR

    stack: List[Frame] = [(1, 1, _shuffled_steps(rng))]
    carved = 1
    while stack:
        row, col, steps = stack[-1]
        step = next(steps, None)
        if step is None:
            stack.pop()
            continue
        nr, nc = row + step[0], col + step[1]
        if _is_cell_center(nr, nc, rows, cols) and cells[nr][nc] == WALL:
            cells[(row + nr) // 2][(col + nc) // 2] = FLOOR
            cells[nr][nc] = FLOOR
            carved += 1
            stack.append((nr, nc, _shuffled_steps(rng)))

    logger.debug("carve_maze: %dx%d grid, %d cells carved", rows, cols, carved)
    return cells


def punch_rooms(cells: List[List[str]], room_rate: int, rng: random.Random) -> int:
    """Open random interior walls to add loops; returns how many walls were removed.

    The attempt budget is room_rate percent of the maze cell count, capped at the number
    of interior walls. Picks that land on an already open cell are wasted, and the outer
    border is never touched.
    """
    rows = len(cells)
    cols = len(cells[0]) if rows else 0
    if room_rate < 0:
        logger.warning("Negative room rate %s treated as 0", room_rate)
        room_rate = 0
    if room_rate == 0 or rows < 3 or cols < 3:
        return 0

    maze_cells = ((rows - 1) // 2) * ((cols - 1) // 2)
    interior_walls = sum(
        1 for r in range(1, rows - 1) for c in range(1, cols - 1) if cells[r][c] == WALL
    )
    budget = min(maze_cells * room_rate // 100, interior_walls)

    punched = 0
    for _ in range(budget):
        r = rng.randrange(1, rows - 1)
        c = rng.randrange(1, cols - 1)
        if cells[r][c] == WALL:
            cells[r][c] = FLOOR
            punched += 1
    logger.debug("punch_rooms: rate=%d budget=%d punched=%d", room_rate, budget, punched)
    return punched


def _farthest(cells: List[List[str]], origin: Cell) -> Cell:
    dist = reachable_cells(cells, origin)
    # max() keeps the first of equally distant cells, i.e. BFS discovery order.
    return max(dist.items(), key=lambda kv: kv[1])[0]


def place_endpoints(
    cells: List[List[str]], placement: str = "farthest"
) -> Tuple[Optional[Cell], Optional[Cell]]:
    """Mark S and E on open interior cells and return their positions.

    "scan" uses the first and last open cells in row-major order. "farthest" runs a
    double BFS sweep from the first open cell, so S and E are always connected and
    roughly a diameter apart. With fewer than two open cells nothing is placed.
    """
    rows = len(cells)
    cols = len(cells[0]) if rows else 0
    open_cells = [
        Cell(r, c)
        for r in range(1, rows - 1)
        for c in range(1, cols - 1)
        if cells[r][c] == FLOOR
    ]
    if len(open_cells) < 2:
        logger.warning(
            "Only %d open cell(s) in %dx%d grid; start/exit not placed", len(open_cells), rows, cols
        )
        return None, None

    if placement not in PLACEMENTS:
        logger.warning("Unknown placement '%s', falling back to 'farthest'", placement)
        placement = "farthest"

    if placement == "scan":
        start, exit_pos = open_cells[0], open_cells[-1]
    else:
        start = _farthest(cells, open_cells[0])
        exit_pos = _farthest(cells, start)
        if exit_pos == start:
            start, exit_pos = open_cells[0], open_cells[-1]

    cells[start.row][start.col] = START
    cells[exit_pos.row][exit_pos.col] = EXIT
    return start, exit_pos


def generate_dungeon(
    rows: int,
    cols: int,
    room_rate: int = 20,
    *,
    seed: Seed = None,
    rng: Optional[random.Random] = None,
    placement: str = "farthest",
) -> List[str]:
    """Generate a maze dungeon with a start and an exit.

    Dimensions are normalized to odd values of at least 5. Each call uses its own RNG:
    `rng` if given, otherwise one derived from `seed` (None draws a random seed).
    """
    rows, cols = normalize_dimensions(rows, cols)
    if rng is None:
        rng = RNGManager(seed).context_rng("dungeon_layout", rows, cols, room_rate, placement)
    cells = carve_maze(rows, cols, rng)
    punch_rooms(cells, room_rate, rng)
    start, exit_pos = place_endpoints(cells, placement)
    logger.debug(
        "generate_dungeon: %dx%d room_rate=%d placement=%s start=%s exit=%s",
        rows,
        cols,
        room_rate,
        placement,
        start,
        exit_pos,
    )
    return to_rows(cells)


class BacktrackingGenerator(DungeonGenerator):
    """Perfect-maze generator with extra room punching and start/exit placement."""

    def __init__(self, room_rate: int = 20, placement: str = "farthest") -> None:
        self.room_rate = int(room_rate)
        self.placement = placement

    def generate(self, rows: int, cols: int, seed: Seed = None) -> List[str]:
        return generate_dungeon(rows, cols, self.room_rate, seed=seed, placement=self.placement)
