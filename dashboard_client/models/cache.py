"""Cache entry dataclass shared by every observer of a resource."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)

EntryListener = Callable[["CacheEntry"], None]


@dataclass(eq=False)
class CacheEntry:
    """Shared state of one resource key.

    ``data`` and ``error`` are never both set after a fetch has completed.
    Entries compare by identity: two entries for the same key are different
    subscription windows.
    """

    key: str
    data: Any = None
    is_loading: bool = True
    error: str | None = None
    ref_count: int = 0
    live: bool = True
    updated_at: float | None = None
    version: int = 0
    pending: asyncio.Task | None = field(default=None, repr=False)
    refresh: Callable[[], asyncio.Task | None] | None = field(
        default=None, repr=False
    )
    _listeners: list[EntryListener] = field(default_factory=list, repr=False)

    def subscribe(self, listener: EntryListener) -> Callable[[], None]:
        """Register ``listener`` for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def publish(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Cache listener failed for %s", self.key)

    def store_result(self, data: Any, error: str | None, now: float) -> None:
        if error is not None:
            self.data = None
            self.error = error
        else:
            self.data = data
            self.error = None
        self.is_loading = False
        self.updated_at = now
        self.version += 1
        self.publish()

    def detach(self) -> None:
        self.live = False
        self.refresh = None
        self._listeners.clear()
