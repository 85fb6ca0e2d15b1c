from importlib.metadata import version, PackageNotFoundError

from .dungeon import (
    Cell,
    bfs_path,
    bfs_path_keys,
    count_reachable_keys,
    find_position,
    generate_dungeon,
    overlay_path,
    render_grid,
    validate_path,
)

__all__ = [
    "__version__",
    "Cell",
    "bfs_path",
    "bfs_path_keys",
    "count_reachable_keys",
    "find_position",
    "generate_dungeon",
    "overlay_path",
    "render_grid",
    "validate_path",
]

try:
    __version__ = version("delver")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"
