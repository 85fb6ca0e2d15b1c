from __future__ import annotations

from typing import Iterable, List, Optional

from .tiles import EXIT, START, Cell, Grid, in_bounds, to_matrix, to_rows

PATH_MARKER = "*"


def overlay_path(grid: Grid, path: Iterable[Cell], marker: str = PATH_MARKER) -> List[str]:
    """Return a copy of the grid with path cells drawn as `marker`.

    S and E stay visible and cells outside the grid are skipped; the input is not modified.
    """
    cells = to_matrix(grid)
    for cell in path:
        if not in_bounds(cells, cell.row, cell.col):
            continue
        if cells[cell.row][cell.col] in (START, EXIT):
            continue
        cells[cell.row][cell.col] = marker
    return to_rows(cells)


def render_grid(grid: Grid, title: Optional[str] = None) -> str:
    lines = ["".join(line) for line in grid]
    if title:
        lines.insert(0, f"{title}:")
    return "\n".join(lines)


__all__ = ["PATH_MARKER", "overlay_path", "render_grid"]
