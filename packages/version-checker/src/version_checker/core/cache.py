"""
Fetch-through TTL cache shared by every reconcile.

Entries are populated on a miss by calling the injected handler, considered
fresh for ``timeout_seconds`` and removed by a periodic garbage-collection
sweep. Concurrent misses on the same key are not deduplicated: each caller
runs the handler and the last successful result wins.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, Optional, Protocol, TypeVar

from version_checker.core.models import Policy

if TYPE_CHECKING:
    from version_checker.context import CheckContext

logger = logging.getLogger(__name__)

T = TypeVar("T")

FNV32_OFFSET_BASIS = 0x811C9DC5
FNV32_PRIME = 0x01000193


class Fetcher(Protocol[T]):
    """Loads a value for the cache on a miss."""

    def fetch(self, ctx: "CheckContext", index: str, opts: Any) -> T:
        """Fetch the item for ``index``; raise on failure."""
        ...


@dataclass
class CacheItem(Generic[T]):
    """A committed value and the time it was committed."""

    timestamp: float
    value: T


class Cache(Generic[T]):
    """
    Thread-safe TTL key/value store with fetch-on-miss.

    The internal map is never handed out; callers only see values.
    """

    def __init__(
        self,
        timeout_seconds: float,
        handler: Fetcher[T],
        clock: Callable[[], float] = time.monotonic,
    ):
        self._timeout = timeout_seconds
        self._handler = handler
        self._clock = clock
        self._lock = threading.Lock()
        self._store: dict[str, CacheItem[T]] = {}
        self._stopped = threading.Event()

    def _is_fresh(self, item: CacheItem[T], now: float) -> bool:
        return now < item.timestamp + self._timeout

    def get(self, ctx: "CheckContext", index: str, fetch_index: str, opts: Any = None) -> T:
        """
        Return the value for ``index``, fetching it on a miss or stale entry.

        Cancelling ``ctx`` cannot interrupt a handler already blocked on I/O
        (e.g. an in-flight HTTP request); only a timeout inside the handler,
        such as the one derived from the deadline, bounds it. The late
        result is still discarded.

        Args:
            ctx: Context governing the fetch; a cancelled or expired context
                 aborts before anything is committed
            index: Cache key
            fetch_index: Key handed to the fetch handler (e.g. the image URL)
            opts: Extra arguments handed to the fetch handler

        Returns:
            Cached or freshly fetched value

        Raises:
            Whatever the handler raises; the previous entry is left untouched
        """
        with self._lock:
            item = self._store.get(index)
            if item is not None and self._is_fresh(item, self._clock()):
                logger.debug(f"found: {index!r}")
                return item.value

        ctx.raise_if_done()
        value = self._handler.fetch(ctx, fetch_index, opts)
        # A fetch that outlived its context must not be committed.
        ctx.raise_if_done()

        logger.debug(f"committing item: {index!r}")
        self.update(index, value)
        return value

    def update(self, index: str, value: T) -> None:
        """Overwrite the entry for ``index`` without fetching."""
        with self._lock:
            self._store[index] = CacheItem(timestamp=self._clock(), value=value)

    def delete(self, index: str) -> None:
        """Evict ``index`` if present."""
        with self._lock:
            self._store.pop(index, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, index: object) -> bool:
        with self._lock:
            return index in self._store

    def collect_garbage(self) -> int:
        """
        Remove every stale entry.

        The lock is taken once to snapshot the keys and again per removal,
        so a large sweep does not block readers for its whole duration.

        Returns:
            Number of entries removed
        """
        with self._lock:
            snapshot = list(self._store.items())

        removed = 0
        now = self._clock()
        for index, item in snapshot:
            if self._is_fresh(item, now):
                continue
            with self._lock:
                # Skip entries refreshed since the snapshot was taken.
                if self._store.get(index) is item:
                    logger.debug(f"removing stale cache item: {index!r}")
                    del self._store[index]
                    removed += 1
        return removed

    def start_garbage_collector(self, ctx: "CheckContext", interval_seconds: float) -> None:
        """
        Blocking loop sweeping stale entries every ``interval_seconds``.

        Returns when ``ctx`` ends or the cache is shut down.
        """
        logger.info("starting cache garbage collector")
        while not self._stopped.is_set():
            if ctx.wait(interval_seconds):
                break
            if self._stopped.is_set():
                break
            self.collect_garbage()
        logger.info("cache garbage collector stopped")

    def shutdown(self) -> None:
        """Flush every entry and stop the garbage collector."""
        self._stopped.set()
        with self._lock:
            self._store.clear()


def fnv32(data: bytes) -> int:
    """32-bit FNV-1 hash."""
    value = FNV32_OFFSET_BASIS
    for byte in data:
        value = (value * FNV32_PRIME) & 0xFFFFFFFF
        value ^= byte
    return value


def calculate_hash_index(image_url: str, policy: Optional[Policy]) -> str:
    """
    Cache key for a lookup: FNV-1 32 of the policy JSON followed by the URL.

    Different inputs can collide; the key is not a correctness guarantee.
    """
    policy_json = (policy or Policy()).to_json()
    return str(fnv32(policy_json.encode() + image_url.encode()))
