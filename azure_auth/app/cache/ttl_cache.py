"""
In-process cache with per-entry expiry.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

from shared.config import HALF_A_DAY_MS


DEFAULT_TTL_MS = HALF_A_DAY_MS


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the wall-clock second at which it goes stale."""

    value: Any
    expires_at: float


class TTLCache:
    """Key/value store whose entries expire after a per-entry TTL.

    Expired entries are never swept; they simply read as absent until a later
    ``put`` overwrites them. Reads do not mutate the store, so overlapping
    coroutines can share one instance without locking.
    """

    def __init__(self, default_ttl_ms: int = DEFAULT_TTL_MS, clock: Callable[[], float] = time.time):
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}

    def get(self, key: Hashable, default: Optional[Any] = None) -> Optional[Any]:
        """Return the live value for ``key`` or ``default``."""
        entry = self._entries.get(key)
        if entry is None:
            return default
        if self._clock() >= entry.expires_at:
            return default
        return entry.value

    def put(self, key: Hashable, value: Any, ttl: Optional[Any] = None) -> None:
        """Store ``value`` for ``ttl`` milliseconds.

        A missing or non-numeric ``ttl`` falls back to the default lifetime.
        """
        if not _is_number(ttl):
            ttl = self.default_ttl_ms
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl / 1000.0)

    def __len__(self) -> int:
        return len(self._entries)


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a duration
    return isinstance(value, (int, float)) and not isinstance(value, bool)
