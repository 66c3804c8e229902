"""Reference-counted resource cache.

One ``CacheEntry`` exists per live resource key. The first ``acquire`` of a
key creates the entry, starts its fetch and (optionally) registers it with
the refresh scheduler; later acquires share it. The entry is evicted when
its last subscription is closed, and a later acquire starts over with a
fresh entry and a fresh fetch.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable

from .executor import RequestExecutor
from .keys import ResourceRequest
from .models.cache import CacheEntry, EntryListener
from .models.settings import RefreshSetting
from .scheduler import RefreshScheduler

logger = logging.getLogger(__name__)


class Subscription:
    """One observer's handle on a shared entry. ``close()`` releases it."""

    def __init__(self, cache: "ResourceCache", entry: CacheEntry) -> None:
        self._cache = cache
        self.entry = entry
        self._closed = False
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def key(self) -> str:
        return self.entry.key

    @property
    def data(self) -> Any:
        return self.entry.data

    @property
    def is_loading(self) -> bool:
        return self.entry.is_loading

    @property
    def error(self) -> str | None:
        return self.entry.error

    @property
    def closed(self) -> bool:
        return self._closed

    def refresh(self) -> asyncio.Task | None:
        if self._closed or self.entry.refresh is None:
            return None
        return self.entry.refresh()

    def subscribe(self, listener: EntryListener) -> Callable[[], None]:
        unsubscribe = self.entry.subscribe(listener)
        self._unsubscribers.append(unsubscribe)
        return unsubscribe

    async def wait(self) -> None:
        """Wait for the fetch currently in flight, if any."""
        task = self.entry.pending
        if task is not None and not task.done():
            await asyncio.wait({task})

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._cache.release(self.entry)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class ResourceCache:
    def __init__(
        self,
        executor: RequestExecutor,
        scheduler: RefreshScheduler,
        refresh: RefreshSetting | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.executor = executor
        self.scheduler = scheduler
        self.refresh = refresh if refresh is not None else scheduler.setting
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._registered: dict[str, CacheEntry] = {}
        self._private: set[CacheEntry] = set()
        self._inflight: set[asyncio.Task] = set()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def entries(self) -> dict[str, CacheEntry]:
        return dict(self._entries)

    def acquire(
        self,
        request: ResourceRequest,
        refresh_enabled: bool = True,
        cached: bool = True,
    ) -> Subscription:
        """Return a subscription on the shared entry for ``request``.

        Must be called from a running event loop: the first acquire of a key
        schedules its fetch. ``cached=False`` gives a private entry that is
        neither shared nor scheduled.
        """
        key = request.key
        if not cached:
            entry = self._new_entry(request)
            self._private.add(entry)
            logger.debug("Created private entry for %s", key)
            self._start_fetch(entry, request)
            return Subscription(self, entry)

        entry = self._entries.get(key)
        if entry is not None:
            entry.ref_count += 1
            logger.debug("Reusing %s (refs=%d)", key, entry.ref_count)
            return Subscription(self, entry)

        entry = self._new_entry(request)
        self._entries[key] = entry
        logger.debug("Created entry for %s", key)
        self._start_fetch(entry, request)
        if refresh_enabled and self.refresh.enabled:
            self.scheduler.register(key, entry.refresh)
            self._registered[key] = entry
        return Subscription(self, entry)

    def release(self, entry: CacheEntry) -> None:
        if not entry.live:
            return
        entry.ref_count = max(0, entry.ref_count - 1)
        if entry.ref_count > 0:
            logger.debug("Released %s (refs=%d)", entry.key, entry.ref_count)
            return
        self._evict(entry)

    def dispose_all(self) -> None:
        """Evict every entry and cancel fetches still in flight."""
        for entry in list(self._entries.values()) + list(self._private):
            self._evict(entry)
        for task in list(self._inflight):
            task.cancel()
        logger.debug("Disposed all cache entries")

    async def drain(self) -> None:
        """Wait until no fetch is in flight (including ones started meanwhile)."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    def _new_entry(self, request: ResourceRequest) -> CacheEntry:
        entry = CacheEntry(key=request.key, ref_count=1)
        entry.refresh = lambda: self._start_fetch(entry, request)
        return entry

    def _evict(self, entry: CacheEntry) -> None:
        key = entry.key
        if self._entries.get(key) is entry:
            del self._entries[key]
        if self._registered.get(key) is entry:
            del self._registered[key]
            self.scheduler.deregister(key)
        self._private.discard(entry)
        if key not in self._entries:
            self.executor.forget(key)
        entry.ref_count = 0
        entry.detach()
        logger.debug("Evicted %s", key)

    def _start_fetch(
        self, entry: CacheEntry, request: ResourceRequest
    ) -> asyncio.Task | None:
        if not entry.live:
            return None
        if not entry.is_loading:
            entry.is_loading = True
            entry.publish()
            # A listener may have released the last reference.
            if not entry.live:
                return None
        task = asyncio.create_task(self._run_fetch(entry, request))
        entry.pending = task
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _run_fetch(self, entry: CacheEntry, request: ResourceRequest) -> None:
        try:
            result = await self.executor.execute(request)
            data, error = result.data, result.error
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.exception("Unexpected failure fetching %s", request.key)
            data, error = None, str(exc) or type(exc).__name__

        # Writes go to the captured entry; once evicted they are dropped.
        if not entry.live:
            logger.debug("Discarding result for evicted entry %s", request.key)
            if request.key not in self._entries:
                self.executor.forget(request.key)
            return
        entry.store_result(data, error, self._clock())
