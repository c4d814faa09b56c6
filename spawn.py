# spawn.py
"""
Short-lived electrons released by the battery chemistry.

Each entry is born at a random point inside the battery's spawn region and
drifts toward the negative terminal while fading out. An entry lives for a
fixed lifetime measured from its own birth, no matter what happens to the
circuit afterwards.
"""
import itertools
import logging
from dataclasses import dataclass
from typing import List, Tuple, Union

import numpy as np

from constants import SPAWN_REGION, SPAWN_TARGET, DEFAULT_SPAWN_LIFETIME_MS


@dataclass(frozen=True)
class SpawnEntry:
    id: int
    spawn_position: Tuple[float, float]
    birth_time: float
    expires_at: float


class SpawnPool:
    """
    A variable-size, self-expiring collection of battery-internal electrons.
    """
    def __init__(
        self,
        lifetime_ms: float = DEFAULT_SPAWN_LIFETIME_MS,
        region: Tuple[float, float, float, float] = SPAWN_REGION,
        target: Tuple[float, float] = SPAWN_TARGET,
        rng: Union[int, None, np.random.Generator] = None,
    ):
        if lifetime_ms <= 0:
            msg = f"Configuration error: spawn lifetime must be positive, got {lifetime_ms!r}."
            logging.critical(msg)
            raise ValueError(msg)
        self.lifetime_ms = float(lifetime_ms)
        self.region = region
        self.target = target
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
        self._ids = itertools.count()
        self._entries: List[SpawnEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def spawn(self, now_ms: float) -> SpawnEntry:
        x0, y0, x1, y1 = self.region
        position = (float(self.rng.uniform(x0, x1)), float(self.rng.uniform(y0, y1)))
        entry = SpawnEntry(
            id=next(self._ids),
            spawn_position=position,
            birth_time=float(now_ms),
            expires_at=float(now_ms) + self.lifetime_ms,
        )
        self._entries.append(entry)
        return entry

    def expire(self, now_ms: float) -> int:
        """Removes every entry whose lifetime has elapsed. Returns how many."""
        before = len(self._entries)
        self._entries = [e for e in self._entries if now_ms < e.expires_at]
        return before - len(self._entries)

    def entries(self, now_ms: float) -> List[SpawnEntry]:
        """Entries alive at now_ms, oldest first."""
        return [e for e in self._entries if e.birth_time <= now_ms < e.expires_at]

    def clear(self) -> None:
        self._entries.clear()

    def progress(self, entry: SpawnEntry, now_ms: float) -> float:
        fraction = (now_ms - entry.birth_time) / self.lifetime_ms
        return min(1.0, max(0.0, fraction))

    def position(self, entry: SpawnEntry, now_ms: float) -> Tuple[float, float]:
        t = self.progress(entry, now_ms)
        sx, sy = entry.spawn_position
        tx, ty = self.target
        return sx + (tx - sx) * t, sy + (ty - sy) * t

    def opacity(self, entry: SpawnEntry, now_ms: float) -> float:
        return 1.0 - self.progress(entry, now_ms)
