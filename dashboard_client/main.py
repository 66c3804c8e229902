"""Entrypoint for watching the dashboard service list from a terminal.

This module wires up a Dashboard from the environment, starts the refresh
clock and logs the service list whenever it changes.
"""

from __future__ import annotations

import asyncio
import logging

from . import config
from .app import Dashboard
from .logger import setup_logging
from .views import View

logger = logging.getLogger(__name__)


def describe_services(view: View) -> str:
    if view.error:
        return f"error: {view.error}"
    if view.is_loading and not view.data:
        return "loading..."
    names = [f"{s.get('name')} ({s.get('type')})" for s in view.data or []]
    return ", ".join(names) if names else "no services"


async def watch_services(dashboard: Dashboard, type: str | None = None) -> None:
    await dashboard.source.ready()
    view = dashboard.source.get_services(type)
    last: list[str | None] = [None]

    def _on_change(v: View) -> None:
        text = describe_services(v)
        if text != last[0]:
            last[0] = text
            logger.info("Services: %s", text)

    unsubscribe = view.subscribe(_on_change)
    dashboard.scheduler.start()
    try:
        await view.wait()
        _on_change(view)
        while True:
            await asyncio.sleep(3600)
    finally:
        unsubscribe()
        view.close()


async def _serve() -> None:
    config.validate_settings()
    async with Dashboard.create() as dashboard:
        await watch_services(dashboard)


def run() -> None:
    setup_logging()
    logger.info("Starting dashboard_client")
    try:
        asyncio.run(_serve())
    except KeyboardInterrupt:
        logger.info("Stopped")


if __name__ == "__main__":
    run()
