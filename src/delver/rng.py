from __future__ import annotations

import hashlib
import json
import logging
import random
import secrets
from dataclasses import dataclass
from typing import Any, Optional, Union

logger = logging.getLogger(__name__)

Seed = Union[int, str, None]

RANDOM_SEED_BITS = 64


def _to_stable_json(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


@dataclass(frozen=True)
class RNGManager:
    """Hands out an independent random.Random per generation context.

        rngm = RNGManager(seed)
        rng = rngm.context_rng("dungeon_layout", rows, cols, room_rate, placement)

    The master seed is a non-negative int or a str. With no seed a random 64-bit int is
    drawn and stored as master_seed, so the run can be repeated by passing it back.
    """

    master_seed: Seed = None

    def __post_init__(self) -> None:
        seed = self.master_seed
        if seed is None:
            seed = secrets.randbits(RANDOM_SEED_BITS)
            object.__setattr__(self, "master_seed", seed)
            logger.debug("No seed given; drew random seed %d", seed)
        object.__setattr__(self, "_seed_text", self._canonicalize_seed(seed))

    @staticmethod
    def _canonicalize_seed(seed: Seed) -> str:
        # bool is an int subclass; True is not a meaningful seed
        if isinstance(seed, bool):
            raise TypeError(f"Unsupported seed type: {type(seed)!r}")
        if isinstance(seed, int):
            if seed < 0:
                raise ValueError(f"Seed must be non-negative, got {seed}")
            return f"int:{seed}"
        if isinstance(seed, str):
            return f"str:{seed.strip()}"
        raise TypeError(f"Unsupported seed type: {type(seed)!r}")

    def derive_seed(self, domain: str, *identifiers: Any) -> int:
        """64-bit seed for one context, stable across runs and Python versions."""
        payload = {"domain": domain, "ids": identifiers, "master": self._seed_text, "version": 1}
        digest = hashlib.blake2b(_to_stable_json(payload).encode("utf-8"), digest_size=8).digest()
        return int.from_bytes(digest, "big", signed=False)

    def context_rng(self, domain: str, *identifiers: Any) -> random.Random:
        return random.Random(self.derive_seed(domain, *identifiers))


def coerce_seed(value: Optional[str]) -> Seed:
    """Interpret a seed given as text (env var, CLI flag): decimal digits become an int."""
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    if s.isdigit():
        return int(s)
    return s


def resolve_seed(seed: Seed) -> Seed:
    """Return `seed`, or a freshly drawn one when it is None."""
    return RNGManager(seed).master_seed


__all__ = ["RNGManager", "Seed", "coerce_seed", "resolve_seed"]
