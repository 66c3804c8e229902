"""Read-only handles returned by data sources.

Presentation code only sees ``data``, ``is_loading``, ``error``,
``subscribe`` and ``close``, whichever source produced the handle.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from .cache import Subscription
from .models.cache import CacheEntry

ViewListener = Callable[["View"], None]


class View:
    data: Any
    is_loading: bool
    error: str | None

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        raise NotImplementedError

    def refresh(self) -> asyncio.Task | None:
        return None

    def close(self) -> None:
        return None

    async def wait(self) -> None:
        return None

    def __enter__(self) -> "View":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class StaticView(View):
    """Fixed value, never changes."""

    def __init__(
        self, data: Any, is_loading: bool = False, error: str | None = None
    ) -> None:
        self.data = data
        self.is_loading = is_loading
        self.error = error

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        return lambda: None

    def __repr__(self) -> str:
        return f"StaticView(data={self.data!r}, error={self.error!r})"


class LiveView(View):
    """Projection of a shared cache entry.

    ``transform`` turns the raw payload into the view's shape and is
    re-applied only when the entry has been updated. Until data arrives (or
    when the fetch failed) ``data`` is ``empty``.
    """

    def __init__(
        self,
        subscription: Subscription,
        transform: Callable[[Any], Any] | None = None,
        empty: Callable[[], Any] | None = None,
    ) -> None:
        self.subscription = subscription
        self._transform = transform
        self._empty = empty
        self._memo_version = -1
        self._memo: Any = None

    @property
    def key(self) -> str:
        return self.subscription.key

    @property
    def data(self) -> Any:
        raw = self.subscription.data
        if raw is None:
            return self._empty() if self._empty else None
        if self._transform is None:
            return raw
        version = self.subscription.entry.version
        if version != self._memo_version:
            self._memo = self._transform(raw)
            self._memo_version = version
        return self._memo

    @property
    def is_loading(self) -> bool:
        return self.subscription.is_loading

    @property
    def error(self) -> str | None:
        return self.subscription.error

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        def _forward(_entry: CacheEntry) -> None:
            listener(self)

        return self.subscription.subscribe(_forward)

    def refresh(self) -> asyncio.Task | None:
        return self.subscription.refresh()

    def close(self) -> None:
        self.subscription.close()

    async def wait(self) -> None:
        await self.subscription.wait()

    def __repr__(self) -> str:
        return f"LiveView(key={self.key!r}, loading={self.is_loading})"
