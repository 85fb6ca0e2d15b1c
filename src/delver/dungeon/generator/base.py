from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List

from ...rng import Seed


class DungeonGenerator(ABC):
    """Abstract base for dungeon generators producing list-of-str grids."""

    @abstractmethod
    def generate(self, rows: int, cols: int, seed: Seed = None) -> List[str]:
        """Generate a dungeon grid."""
        raise NotImplementedError
