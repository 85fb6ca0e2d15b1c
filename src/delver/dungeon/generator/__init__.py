from .base import DungeonGenerator
from .backtracking import (
    MIN_SIZE,
    PLACEMENTS,
    BacktrackingGenerator,
    carve_maze,
    generate_dungeon,
    normalize_dimensions,
    place_endpoints,
    punch_rooms,
)

__all__ = [
    "DungeonGenerator",
    "BacktrackingGenerator",
    "MIN_SIZE",
    "PLACEMENTS",
    "carve_maze",
    "generate_dungeon",
    "normalize_dimensions",
    "place_endpoints",
    "punch_rooms",
]
