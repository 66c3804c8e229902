"""Shared test fixtures and dummy classes."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx

from dashboard_client.cache import ResourceCache
from dashboard_client.executor import RequestExecutor
from dashboard_client.models.settings import RefreshSetting
from dashboard_client.scheduler import RefreshScheduler

BASE_URL = "http://testserver"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


Route = Any  # JSON payload, httpx.Response or callable(request) -> either


class FakeApi:
    """Route table served through httpx.MockTransport.

    Routes are keyed by path including the query string. Setting ``gate`` to
    an ``asyncio.Event`` holds every response until it is set.
    """

    def __init__(self, routes: dict[str, Route] | None = None) -> None:
        self.routes: dict[str, Route] = dict(routes or {})
        self.requests: list[httpx.Request] = []
        self.gate: asyncio.Event | None = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        route = self.routes.get(request.url.raw_path.decode())
        if route is None:
            return httpx.Response(404, text="not found")
        if callable(route):
            route = route(request)
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(200, json=route)

    def calls(self, target: str) -> int:
        return sum(1 for r in self.requests if r.url.raw_path.decode() == target)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


def build_cache(
    api: FakeApi,
    interval_s: float = 0.0,
    clock: Callable[[], float] | None = None,
) -> ResourceCache:
    clock = clock or FakeClock()
    executor = RequestExecutor(api.client(), base_url=BASE_URL)
    scheduler = RefreshScheduler(RefreshSetting(interval_s=interval_s), clock=clock)
    return ResourceCache(executor, scheduler, clock=clock)


class Recorder:
    """Collects listener notifications."""

    def __init__(self) -> None:
        self.events: list[Any] = []

    def __call__(self, item: Any) -> None:
        self.events.append(item)
