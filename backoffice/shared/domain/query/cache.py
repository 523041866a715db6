"""Query/Mutation cache - fetch by key, share in-flight calls, invalidate on write.

Every page goes through this layer rather than calling the API directly:

- ``QueryCache.query(key, fetcher)`` returns the cached entry while it is
  fresh, otherwise runs the fetcher once (concurrent observers of the same
  key share the outstanding call) and stores its result or its error.
- ``QueryCache.invalidate(*keys)`` only clears the fresh flag and bumps the
  entry version; the next observation re-fetches.
- ``Mutation`` wraps a write, exposes an in-progress flag, invalidates its
  keys on success and leaves the cache untouched on failure.

There is no polling, expiry or persistence. All bookkeeping runs on a single
event loop, and every read-modify-write of an entry happens between awaits,
so no locks are needed.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, Iterable, List, Optional, Tuple, TypeVar

from backoffice.shared.core import events
from backoffice.shared.core.event_bus import EventBus
from backoffice.shared.infrastructure.api.client import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")
QueryKey = Hashable
Fetcher = Callable[[], Awaitable[Any]]


def key_family(key: QueryKey) -> Any:
    """Resource family of a key: the key itself, or the first element of a tuple key."""
    if isinstance(key, tuple) and key:
        return key[0]
    return key


@dataclass(frozen=True)
class QueryResult:
    """Snapshot of a cache entry handed to renderers."""
    key: QueryKey
    data: Any = None
    error: Optional[BaseException] = None
    is_loading: bool = False
    is_fresh: bool = False
    version: int = 0
    updated_at: Optional[float] = None

    @property
    def status(self) -> str:
        if self.is_loading:
            return "loading"
        if self.error is not None:
            return "error"
        if self.updated_at is not None:
            return "success"
        return "idle"

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def is_success(self) -> bool:
        return self.status == "success"


@dataclass
class CacheEntry:
    """Mutable per-key record; only ``QueryCache`` touches it."""
    key: QueryKey
    data: Any = None
    error: Optional[BaseException] = None
    is_fresh: bool = False
    version: int = 0
    updated_at: Optional[float] = None
    fetch_count: int = 0
    in_flight: Optional[asyncio.Task] = field(default=None, repr=False)

    @property
    def is_loading(self) -> bool:
        return self.in_flight is not None

    def snapshot(self) -> QueryResult:
        return QueryResult(
            key=self.key,
            data=self.data,
            error=self.error,
            is_loading=self.is_loading,
            is_fresh=self.is_fresh,
            version=self.version,
            updated_at=self.updated_at,
        )


class QueryCache:
    """Keyed cache of fetched resources with explicit staleness."""

    def __init__(self, event_bus: Optional[EventBus] = None) -> None:
        self.bus = event_bus
        self._entries: Dict[QueryKey, CacheEntry] = {}

    async def query(self, key: QueryKey, fetcher: Fetcher) -> QueryResult:
        """Observe ``key``, fetching it if there is no fresh entry.

        A failed fetch is stored as the entry's error and counts as fresh
        until the key is invalidated. The fetcher's exception is never
        raised from here; renderers read ``result.error``.
        """
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CacheEntry(key)

        if entry.is_fresh:
            return entry.snapshot()

        task = entry.in_flight
        if task is None:
            entry.fetch_count += 1
            task = asyncio.ensure_future(self._run_fetch(entry, fetcher, entry.version))
            entry.in_flight = task
            logger.debug(f"Fetching query {key!r} (version {entry.version})")

        # Shield so one observer going away does not cancel the shared fetch
        await asyncio.shield(task)
        return entry.snapshot()

    async def _run_fetch(self, entry: CacheEntry, fetcher: Fetcher, version: int) -> None:
        data: Any = None
        error: Optional[BaseException] = None
        try:
            try:
                data = await fetcher()
            except Exception as exc:
                error = exc
                logger.warning(f"Query {entry.key!r} failed: {exc}")

            # Single synchronous step: no await between read and write of the entry
            current = entry.version == version
            if current or entry.updated_at is None:
                if error is None:
                    entry.data = data
                entry.error = error
                entry.updated_at = time.time()
            if current:
                entry.is_fresh = True
        finally:
            if entry.in_flight is asyncio.current_task():
                entry.in_flight = None

    def invalidate(self, *keys: QueryKey) -> List[QueryKey]:
        """Mark every entry matching ``keys`` stale.

        A string (or any non-tuple) key matches itself and every tuple key
        of that family; a tuple key matches only itself. An in-flight fetch
        on a matching entry is detached, so the next observation starts a
        new one.

        Returns:
            The concrete keys that were invalidated
        """
        targets = set(keys)
        invalidated: List[QueryKey] = []
        for entry_key, entry in self._entries.items():
            if entry_key in targets or (isinstance(entry_key, tuple) and key_family(entry_key) in targets):
                entry.version += 1
                entry.is_fresh = False
                entry.in_flight = None
                invalidated.append(entry_key)

        if invalidated:
            logger.debug(f"Invalidated queries: {invalidated!r}")
        return invalidated

    async def invalidate_and_notify(self, *keys: QueryKey) -> List[QueryKey]:
        """``invalidate`` plus a ``query.invalidated`` event."""
        invalidated = self.invalidate(*keys)
        if invalidated and self.bus is not None:
            await self.bus.publish(events.TOPIC_QUERY_INVALIDATED, events.create_query_invalidated_event(invalidated))
        return invalidated

    def peek(self, key: QueryKey) -> Optional[QueryResult]:
        """Current snapshot of ``key`` without fetching, or None if never observed."""
        entry = self._entries.get(key)
        return entry.snapshot() if entry else None

    def is_fresh(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return bool(entry and entry.is_fresh)

    def fetch_count(self, key: QueryKey) -> int:
        """How many times the fetcher for ``key`` has been started."""
        entry = self._entries.get(key)
        return entry.fetch_count if entry else 0

    def keys(self) -> List[QueryKey]:
        return list(self._entries)

    def clear(self) -> None:
        """Drop every entry (e.g. on logout)."""
        self._entries.clear()


class Mutation(Generic[T]):
    """A write operation tied to the cache keys it makes stale.

    Args:
        fn: Async callable performing the write
        cache: Cache to invalidate on success
        invalidates: Keys (or families) to mark stale on success
        on_success: Called with the result after invalidation (sync or async)
        on_error: Called with the exception on failure (sync or async)
        name: Label for logs and events, defaults to ``fn.__name__``
    """

    def __init__(
        self,
        fn: Callable[..., Awaitable[T]],
        cache: Optional[QueryCache] = None,
        invalidates: Iterable[QueryKey] = (),
        on_success: Optional[Callable[[T], Any]] = None,
        on_error: Optional[Callable[[BaseException], Any]] = None,
        name: Optional[str] = None,
    ) -> None:
        self.fn = fn
        self.cache = cache
        self.invalidates: Tuple[QueryKey, ...] = tuple(invalidates)
        self.on_success = on_success
        self.on_error = on_error
        self.name = name or getattr(fn, "__name__", "mutation")

        self.is_running = False
        self.data: Optional[T] = None
        self.error: Optional[BaseException] = None

    async def mutate(self, *args: Any, **kwargs: Any) -> T:
        """Run the write.

        Returns:
            Whatever the wrapped callable returned

        Raises:
            The wrapped callable's exception, after ``on_error`` has run
        """
        self.is_running = True
        self.error = None
        try:
            result = await self.fn(*args, **kwargs)
        except Exception as exc:
            self.error = exc
            logger.warning(f"Mutation '{self.name}' failed: {exc}")
            if self.on_error is not None:
                await _maybe_await(self.on_error(exc))
            await self._publish_failure(exc)
            raise
        finally:
            self.is_running = False

        self.data = result
        invalidated: List[QueryKey] = []
        if self.cache is not None and self.invalidates:
            invalidated = await self.cache.invalidate_and_notify(*self.invalidates)
        logger.info(f"Mutation '{self.name}' succeeded; invalidated {invalidated!r}")

        if self.on_success is not None:
            await _maybe_await(self.on_success(result))

        bus = self.cache.bus if self.cache is not None else None
        if bus is not None:
            await bus.publish(events.TOPIC_MUTATION_SUCCEEDED, events.create_mutation_event(self.name, invalidated))
        return result

    async def _publish_failure(self, exc: BaseException) -> None:
        bus = self.cache.bus if self.cache is not None else None
        if bus is None:
            return
        status_code = exc.status_code if isinstance(exc, ApiError) else None
        await bus.publish(
            events.TOPIC_MUTATION_FAILED,
            events.create_mutation_event(self.name, error=str(exc), status_code=status_code),
        )


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value
