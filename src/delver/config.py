from __future__ import annotations

import argparse
import logging
import os
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .dungeon.generator import PLACEMENTS, BacktrackingGenerator
from .exceptions import ConfigError
from .rng import Seed, coerce_seed
from .utils.json_loader import load_json_file

logger = logging.getLogger(__name__)

ENV_PREFIX = "DELVER_"

SETTINGS_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "rows": {"type": "integer", "minimum": 1, "default": 21},
        "cols": {"type": "integer", "minimum": 1, "default": 21},
        "room_rate": {"type": "integer", "minimum": 0, "default": 20},
        "seed": {"type": ["integer", "string", "null"], "minimum": 0, "default": None},
        "placement": {"enum": list(PLACEMENTS), "default": "farthest"},
    },
    "additionalProperties": False,
}

GRID_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["grid"],
    "properties": {
        "grid": {"type": "array", "minItems": 1, "items": {"type": "string"}},
        "keys": {"type": "boolean", "default": False},
        "title": {"type": "string"},
    },
    "additionalProperties": False,
}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e


@dataclass
class GenerationSettings:
    """Parameters for one dungeon generation run.

    rows/cols are normalized by the generator (odd, at least 5). room_rate is the
    percentage of maze cells punched open as extra rooms. seed=None draws a random seed.
    """

    rows: int = 21
    cols: int = 21
    room_rate: int = 20
    seed: Seed = None
    placement: str = "farthest"

    def validate(self) -> "GenerationSettings":
        if self.placement not in PLACEMENTS:
            raise ConfigError(
                f"Unknown placement '{self.placement}'; expected one of {', '.join(PLACEMENTS)}"
            )
        if self.room_rate < 0:
            raise ConfigError(f"room_rate must be >= 0, got {self.room_rate}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_env(cls) -> "GenerationSettings":
        """Read DELVER_ROWS, DELVER_COLS, DELVER_ROOM_RATE, DELVER_SEED and DELVER_PLACEMENT."""
        defaults = cls()
        settings = cls(
            rows=_env_int("ROWS", defaults.rows),
            cols=_env_int("COLS", defaults.cols),
            room_rate=_env_int("ROOM_RATE", defaults.room_rate),
            seed=coerce_seed(os.getenv(ENV_PREFIX + "SEED")),
            placement=(os.getenv(ENV_PREFIX + "PLACEMENT") or defaults.placement).strip().lower(),
        )
        return settings.validate()

    @classmethod
    def from_json(cls, path: Path) -> "GenerationSettings":
        """Load settings from a JSON file; missing fields take the schema defaults."""
        raw = load_json_file(path, schema=SETTINGS_SCHEMA, log=logger)
        seed = raw["seed"]
        if isinstance(seed, str):
            seed = coerce_seed(seed)
        return cls(
            rows=raw["rows"],
            cols=raw["cols"],
            room_rate=raw["room_rate"],
            seed=seed,
            placement=raw["placement"],
        ).validate()


def generate_from_settings(settings: GenerationSettings) -> List[str]:
    gen = BacktrackingGenerator(room_rate=settings.room_rate, placement=settings.placement)
    return gen.generate(settings.rows, settings.cols, settings.seed)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="delver",
        description="Generate maze dungeons and find shortest paths through them.",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate a dungeon and print it")
    gen.add_argument("--rows", type=int, default=None, help="Grid rows (odd, >= 5)")
    gen.add_argument("--cols", type=int, default=None, help="Grid columns (odd, >= 5)")
    gen.add_argument("--room-rate", dest="room_rate", type=int, default=None, help="Extra room percentage")
    gen.add_argument("--seed", type=str, default=None, help="Seed (int or string) for reproducible output")
    gen.add_argument("--placement", choices=PLACEMENTS, default=None, help="Start/exit placement strategy")
    gen.add_argument("--config", type=Path, default=None, help="JSON settings file")
    gen.add_argument("--solve", action="store_true", help="Also solve the dungeon and draw the path")
    gen.add_argument("--json", action="store_true", help="Print a JSON document instead of the grid")

    solve = sub.add_parser("solve", help="Find the shortest path through a dungeon file")
    solve.add_argument("path", type=Path, help="Text file (one row per line) or JSON file with a 'grid' list")
    solve.add_argument("--keys", action="store_true", help="Use keys a-f to open doors A-F")
    solve.add_argument("--json", action="store_true", help="Print a JSON document instead of the overlay")

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> GenerationSettings:
    """Settings from --config (or the environment when no file is given), then CLI flags on top."""
    config_path = getattr(args, "config", None)
    settings = GenerationSettings.from_json(config_path) if config_path else GenerationSettings.from_env()

    overrides: Dict[str, Any] = {}
    for name in ("rows", "cols", "room_rate", "placement"):
        value = getattr(args, name, None)
        if value is not None:
            overrides[name] = value
    if getattr(args, "seed", None) is not None:
        overrides["seed"] = coerce_seed(args.seed)
    if overrides:
        settings = replace(settings, **overrides)
    logger.debug("Effective generation settings: %s", settings.to_dict())
    return settings.validate()


__all__ = [
    "GenerationSettings",
    "SETTINGS_SCHEMA",
    "GRID_SCHEMA",
    "generate_from_settings",
    "parse_args",
    "build_settings",
]
