"""Time-to-live cache of status maps keyed by repository root."""

from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TIMEOUT_MS = 2000


def monotonic_ms() -> float:
    """Milliseconds from an arbitrary but monotonic origin."""
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class CacheEntry:
    root: Path
    status: Dict[str, str]
    timestamp: float


class StatusCache:
    """Remember the last status map computed for each repository root.

    Entries are considered fresh while ``now - timestamp < ttl_ms``.  Stale
    entries are left in place and simply reported as a miss; the next
    :meth:`put` for that root replaces them.
    """

    def __init__(
        self,
        ttl_ms: float = DEFAULT_CACHE_TIMEOUT_MS,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self.ttl_ms = ttl_ms
        self._clock = clock
        self._entries: Dict[Path, CacheEntry] = {}
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def get(self, root: Path, now: Optional[float] = None) -> Optional[CacheEntry]:
        if now is None:
            now = self._clock()
        with self._lock:
            entry = self._entries.get(root)
        if entry is None:
            return None
        if now - entry.timestamp < self.ttl_ms:
            return entry
        logger.debug("Cached status for %s is stale", root)
        return None

    def put(self, root: Path, status: Dict[str, str], now: Optional[float] = None) -> CacheEntry:
        if now is None:
            now = self._clock()
        with self._lock:
            previous = self._entries.get(root)
            if previous is not None and now <= previous.timestamp:
                now = math.nextafter(previous.timestamp, math.inf)
            entry = CacheEntry(root=root, status=status, timestamp=now)
            self._entries[root] = entry
        return entry

    def invalidate_all(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        if count:
            logger.debug("Dropped %d cached status map(s)", count)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, root: object) -> bool:
        with self._lock:
            return root in self._entries


__all__ = ["DEFAULT_CACHE_TIMEOUT_MS", "CacheEntry", "StatusCache", "monotonic_ms"]
