"""In-process TTL cache for store query results.

One instance is created per process (see ``src.main``) and handed to the
services that need cache-aside reads. Entries expire lazily: ``get`` checks
the age of an entry on every read and evicts it when stale. ``cleanup`` and
the optional background sweep only exist to bound memory between reads.

There is no size bound and no LRU/LFU policy; keys that are written and never
read stay resident until they expire and a sweep (or a read) removes them.
"""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 2 * 60
DEFAULT_CLEANUP_INTERVAL_SECONDS = 5 * 60


@dataclass
class CacheEntry:
    value: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl


@dataclass
class CacheStats:
    total: int
    valid: int
    expired: int
    hit_rate_estimate: float


class TTLCache:
    """String-keyed cache with a per-entry TTL (seconds).

    ``clock`` must be monotonic; tests inject a fake one.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._cleanup_task: asyncio.Task[None] | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key)  # type: ignore[arg-type]
        return entry is not None and not entry.is_expired(self._clock())

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for *key*, or *default* (evicting a stale entry)."""
        entry = self._entries.get(key)
        if entry is None:
            return default
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return default
        logger.debug("Cache hit: %s", key)
        return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        self._entries[key] = CacheEntry(
            value=value,
            stored_at=self._clock(),
            ttl=self.default_ttl if ttl is None else ttl,
        )
        logger.debug("Cache stored: %s", key)

    def delete(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            logger.debug("Cache removed: %s", key)

    def clear(self, pattern: str | None = None) -> int:
        """Remove keys containing *pattern* (plain substring), or everything.

        Returns the number of entries removed.
        """
        if not pattern:
            removed = len(self._entries)
            self._entries.clear()
            logger.debug("Cache cleared (%d items)", removed)
            return removed

        doomed = [key for key in self._entries if pattern in key]
        for key in doomed:
            del self._entries[key]
        logger.debug("Cache cleared pattern %r (%d items)", pattern, len(doomed))
        return len(doomed)

    def stats(self) -> CacheStats:
        """Diagnostic snapshot. Scans every entry; does not evict."""
        now = self._clock()
        expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
        valid = len(self._entries) - expired
        scanned = valid + expired
        return CacheStats(
            total=len(self._entries),
            valid=valid,
            expired=expired,
            hit_rate_estimate=(valid / scanned * 100) if scanned else 0.0,
        )

    def cleanup(self) -> int:
        """Evict every expired entry. Returns the number removed."""
        now = self._clock()
        doomed = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in doomed:
            del self._entries[key]
        if doomed:
            logger.info("Cache sweep removed %d expired items", len(doomed))
        return len(doomed)

    # ------------------------------------------------------------------
    # Periodic sweep
    # ------------------------------------------------------------------

    @property
    def auto_cleanup_running(self) -> bool:
        return self._cleanup_task is not None and not self._cleanup_task.done()

    def start_auto_cleanup(self, interval: float = DEFAULT_CLEANUP_INTERVAL_SECONDS) -> None:
        """Run ``cleanup`` every *interval* seconds on the running event loop.

        Calling this while a sweep is already scheduled is a no-op.
        """
        if self.auto_cleanup_running:
            return
        self._cleanup_task = asyncio.get_running_loop().create_task(
            self._sweep_forever(interval), name="ttl-cache-cleanup"
        )
        logger.info("Cache auto-cleanup started (every %ss)", interval)

    async def stop_auto_cleanup(self) -> None:
        task, self._cleanup_task = self._cleanup_task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _sweep_forever(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.cleanup()
