"""Composition root: builds the client, cache, scheduler and data source."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import httpx

from . import config
from .cache import ResourceCache
from .executor import RequestExecutor
from .models.settings import RefreshSetting, Settings
from .scheduler import RefreshScheduler
from .sources.base import DashboardMode, DataSource
from .sources.demo import DemoSource
from .sources.live import LiveSource

logger = logging.getLogger(__name__)


def select_source(
    mode: DashboardMode | str,
    cache: ResourceCache,
    settings: Settings,
) -> DataSource:
    """Build the data source for ``mode``. Does not touch any other source."""
    if not isinstance(mode, DashboardMode):
        mode = DashboardMode.parse(mode)
    if mode is DashboardMode.DEMO:
        return DemoSource(cache, base_url=settings.API_URL, snapshot_path=settings.DEMO_PATH)
    return LiveSource(cache, base_url=settings.API_URL)


@dataclass
class Dashboard:
    settings: Settings
    client: httpx.AsyncClient
    executor: RequestExecutor
    scheduler: RefreshScheduler
    cache: ResourceCache
    source: DataSource
    owns_client: bool = field(default=True, repr=False)

    @property
    def refresh(self) -> RefreshSetting:
        return self.scheduler.setting

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        mode: DashboardMode | str | None = None,
    ) -> "Dashboard":
        settings = settings or config.settings
        owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=settings.TIMEOUT_S)
        executor = RequestExecutor(client, base_url=settings.API_URL)
        scheduler = RefreshScheduler(
            RefreshSetting(interval_s=settings.REFRESH_S), tick_s=settings.TICK_S
        )
        cache = ResourceCache(executor, scheduler)
        source = select_source(mode or settings.MODE, cache, settings)
        logger.info(
            "Dashboard created (mode=%s, api=%s, refresh=%ss)",
            source.mode.value,
            settings.API_URL,
            settings.REFRESH_S,
        )
        return cls(
            settings=settings,
            client=client,
            executor=executor,
            scheduler=scheduler,
            cache=cache,
            source=source,
            owns_client=owns_client,
        )

    def dispose_all(self) -> None:
        self.source.close()
        self.scheduler.stop()
        self.cache.dispose_all()

    async def aclose(self) -> None:
        self.dispose_all()
        if self.owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "Dashboard":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
