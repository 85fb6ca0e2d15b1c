from __future__ import annotations

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import GRID_SCHEMA, build_settings, generate_from_settings, parse_args
from .dungeon import bfs_path, bfs_path_keys, overlay_path, render_grid
from .dungeon.tiles import Cell, validate_grid
from .exceptions import DelverError
from .logging_config import configure_logging
from .rng import resolve_seed
from .utils.json_loader import JsonLoaderError, load_json_file

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_PATH = 1
EXIT_BAD_INPUT = 2


def load_grid_file(path: Path) -> Tuple[List[str], bool]:
    """Read a grid from a .json file ({"grid": [...], "keys": bool}) or a plain text file.

    Returns the rows and whether the file asks for key/door solving.
    """
    if path.suffix.lower() == ".json":
        data = load_json_file(path, schema=GRID_SCHEMA, log=logger)
        grid = list(data["grid"])
        use_keys = bool(data["keys"])
    else:
        with path.open("r", encoding="utf-8") as f:
            grid = [line.rstrip("\r\n") for line in f]
        while grid and not grid[-1]:
            grid.pop()
        use_keys = False
    validate_grid(grid)
    return grid, use_keys


def _path_payload(path: List[Cell]) -> Dict[str, Any]:
    return {
        "found": bool(path),
        "length": len(path),
        "steps": max(0, len(path) - 1),
        "path": [[c.row, c.col] for c in path],
    }


def _cmd_generate(args) -> int:
    settings = build_settings(args)
    if settings.seed is None:
        settings = replace(settings, seed=resolve_seed(None))
        logger.info("No seed given; using seed %s", settings.seed)
    grid = generate_from_settings(settings)
    path = bfs_path(grid) if args.solve else []

    if args.json:
        data: Dict[str, Any] = {"settings": settings.to_dict(), "grid": grid}
        if args.solve:
            data["solution"] = _path_payload(path)
        print(json.dumps(data, indent=2, sort_keys=True))
    else:
        print(render_grid(grid, title=f"Generated {len(grid)}x{len(grid[0])} dungeon"))
        if args.solve:
            print()
            print(render_grid(overlay_path(grid, path), title="Solution"))
            print(f"Path length: {len(path)}")
    if args.solve and not path:
        return EXIT_NO_PATH
    return EXIT_OK


def _cmd_solve(args) -> int:
    grid, file_keys = load_grid_file(args.path)
    use_keys = args.keys or file_keys
    path = bfs_path_keys(grid) if use_keys else bfs_path(grid)

    if args.json:
        data = {"grid": grid, "keys": use_keys, "solution": _path_payload(path)}
        print(json.dumps(data, indent=2, sort_keys=True))
    elif path:
        print(render_grid(overlay_path(grid, path), title="Solution"))
        print(f"Path length: {len(path)}")
    else:
        print(render_grid(grid, title="Dungeon"))
        print("No path found")
    return EXIT_OK if path else EXIT_NO_PATH


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(level=logging.DEBUG if args.debug else None)

    handlers = {"generate": _cmd_generate, "solve": _cmd_solve}
    try:
        return handlers[args.command](args)
    except (DelverError, JsonLoaderError, OSError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
