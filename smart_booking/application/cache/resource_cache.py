from __future__ import annotations

import asyncio
import itertools
import logging
import time
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable

from smart_booking.application.cache.keys import CacheKey, resource_of
from smart_booking.application.cache.staleness import StalenessPolicy

Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[[CacheKey, "CacheEntry"], None]


@dataclass
class CacheEntry:
    value: Any = None
    has_value: bool = False
    fetched_at: float | None = None
    invalidated: bool = False
    in_flight: asyncio.Task | None = None
    generation: int = 0  # cache-wide counter, bumped on write/invalidate; older fetches may not store
    error: BaseException | None = None


class ResourceCache:
    """
    Read-through / write-through cache keyed by structured tuples.

    - read: fresh -> cached value; time-stale -> cached value + background refetch;
      missing or invalidated -> wait for fetch. One in-flight fetch per key.
    - write: replaces the value, supersedes any in-flight fetch for the key.
    - invalidate: next read refetches and waits for it.
    - clear: drops every entry; fetches started before it never store.
    Fetch errors propagate to callers and are never stored as values.
    """

    def __init__(
        self,
        policy: StalenessPolicy | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._policy = policy or StalenessPolicy()
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._listeners: dict[CacheKey, list[Listener]] = {}
        self._tasks: set[asyncio.Task] = set()
        self._generations = itertools.count(1)
        self._logger = logging.getLogger(__name__)

    async def read(self, key: CacheKey, fetcher: Fetcher) -> Any:
        entry = self._entries.get(key)
        if entry is not None and entry.has_value and not entry.invalidated:
            if not self._is_expired(entry, key):
                return entry.value
            self._logger.debug("Serving stale value, revalidating", extra={"key": key})
            self._start_fetch(key, fetcher)
            return entry.value

        task = self._start_fetch(key, fetcher)
        return await asyncio.shield(task)

    def write(self, key: CacheKey, value: Any) -> None:
        entry = self._entry_for(key)
        entry.value = value
        entry.has_value = True
        entry.fetched_at = self._clock()
        entry.invalidated = False
        entry.error = None
        entry.in_flight = None
        entry.generation = next(self._generations)
        self._notify(key, entry)

    def invalidate(self, key: CacheKey) -> None:
        entry = self._entries.get(key)
        if entry is None:
            return
        entry.invalidated = True
        entry.in_flight = None
        entry.generation = next(self._generations)
        self._logger.debug("Cache entry invalidated", extra={"key": key})
        self._notify(key, entry)
        if not entry.has_value and self._entries.get(key) is entry:
            # nothing left to serve; a later read starts from scratch
            del self._entries[key]

    def invalidate_prefix(self, resource: str) -> None:
        for key in [k for k in self._entries if resource_of(k) == resource]:
            self.invalidate(key)

    def peek(self, key: CacheKey) -> Any:
        entry = self._entries.get(key)
        if entry is None or not entry.has_value:
            return None
        return entry.value

    def entry(self, key: CacheKey) -> CacheEntry | None:
        return self._entries.get(key)

    def is_fresh(self, key: CacheKey) -> bool:
        entry = self._entries.get(key)
        if entry is None or not entry.has_value or entry.invalidated:
            return False
        return not self._is_expired(entry, key)

    def clear(self) -> None:
        keys = list(self._entries)
        self._entries.clear()
        for key in keys:
            self._notify(key, CacheEntry())

    def subscribe(self, key: CacheKey, listener: Listener) -> Callable[[], None]:
        self._listeners.setdefault(key, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key, [])
            if listener in listeners:
                listeners.remove(listener)
            if not listeners:
                self._listeners.pop(key, None)

        return unsubscribe

    def _is_expired(self, entry: CacheEntry, key: CacheKey) -> bool:
        if entry.fetched_at is None:
            return True
        return self._clock() - entry.fetched_at >= self._policy.window_for(key)

    def _entry_for(self, key: CacheKey) -> CacheEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CacheEntry(generation=next(self._generations))
        return entry

    def _start_fetch(self, key: CacheKey, fetcher: Fetcher) -> asyncio.Task:
        entry = self._entry_for(key)
        if entry.in_flight is not None:
            return entry.in_flight

        task = asyncio.ensure_future(self._run_fetch(key, fetcher, entry.generation))
        entry.in_flight = task
        self._tasks.add(task)
        task.add_done_callback(partial(self._on_task_done, key))
        return task

    async def _run_fetch(self, key: CacheKey, fetcher: Fetcher, generation: int) -> Any:
        try:
            value = await fetcher()
        except Exception as e:
            entry = self._release(key)
            if entry is not None and entry.generation == generation:
                entry.error = e
                self._notify(key, entry)
            raise

        entry = self._release(key)
        if entry is None or entry.generation != generation:
            self._logger.debug("Discarding superseded fetch result", extra={"key": key})
            return value

        entry.value = value
        entry.has_value = True
        entry.fetched_at = self._clock()
        entry.invalidated = False
        entry.error = None
        self._notify(key, entry)
        return value

    def _release(self, key: CacheKey) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is not None and entry.in_flight is asyncio.current_task():
            entry.in_flight = None
        return entry

    def _on_task_done(self, key: CacheKey, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self._logger.warning("Cache fetch failed", extra={"key": key, "error": str(error)})

    def _notify(self, key: CacheKey, entry: CacheEntry) -> None:
        for listener in list(self._listeners.get(key, [])):
            try:
                listener(key, entry)
            except Exception:
                self._logger.exception("Cache listener failed", extra={"key": key})
