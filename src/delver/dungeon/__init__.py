"""
Dungeon systems for delver.

Maze generation by recursive backtracking, the character-grid model, shortest-path
searches with and without key/door gating, and ASCII rendering of solutions.
"""
from .tiles import Cell, MISSING, can_pass_door, collect_key, find_position, is_passable
from .pathfinding import (
    SearchState,
    bfs_path,
    bfs_path_keys,
    count_reachable_keys,
    validate_path,
)
from .generator import BacktrackingGenerator, generate_dungeon
from .render import overlay_path, render_grid

__all__ = [
    "Cell",
    "MISSING",
    "SearchState",
    "BacktrackingGenerator",
    "bfs_path",
    "bfs_path_keys",
    "can_pass_door",
    "collect_key",
    "count_reachable_keys",
    "find_position",
    "generate_dungeon",
    "is_passable",
    "overlay_path",
    "render_grid",
    "validate_path",
]
