"""Demo data source backed by one static snapshot document.

The snapshot is fetched once, on first use, through the regular cache (never
scheduled for refresh). Every query afterwards is a synchronous lookup in
memory; no other request is issued.
"""

from __future__ import annotations

import logging
from typing import Any

from ..cache import ResourceCache, Subscription
from ..keys import ResourceRequest, segment, transform_path
from ..models.dashboard import ExampleRequest, Label
from ..views import StaticView, View
from .base import (
    DashboardMode,
    DataSource,
    addressed_to,
    attachment_filename,
    decode_examples,
    filter_events,
    filter_metrics,
    filter_services,
    message_info,
)

logger = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_PATH = "/demo/dashboard.json"


class DemoSource(DataSource):
    mode = DashboardMode.DEMO

    def __init__(
        self,
        cache: ResourceCache,
        base_url: str = "",
        snapshot_path: str = DEFAULT_SNAPSHOT_PATH,
    ) -> None:
        self.cache = cache
        self.base_url = base_url
        self.snapshot_path = snapshot_path
        self._snapshot: Subscription | None = None

    def load(self) -> Subscription:
        """Acquire the snapshot (first call only)."""
        if self._snapshot is None or self._snapshot.closed:
            logger.info("Loading demo snapshot from %s", self.snapshot_path)
            self._snapshot = self.cache.acquire(
                ResourceRequest.get(self.snapshot_path), refresh_enabled=False
            )
        return self._snapshot

    async def ready(self) -> None:
        await self.load().wait()

    def close(self) -> None:
        if self._snapshot is not None:
            self._snapshot.close()
            self._snapshot = None

    def _data(self) -> dict[str, Any]:
        data = self.load().data
        return data if isinstance(data, dict) else {}

    def _view(self, data: Any) -> StaticView:
        snapshot = self.load()
        return StaticView(data, is_loading=snapshot.is_loading, error=snapshot.error)

    def _mails(self) -> list[dict[str, Any]]:
        return list(self._data().get("mails") or [])

    def _find_mail(self, message_id: str) -> dict[str, Any] | None:
        for mail in self._mails():
            if (mail.get("data") or {}).get("messageId") == message_id:
                return mail
        return None

    def get_app_info(self) -> View:
        return self._view(self._data().get("info"))

    def get_services(self, type: str | None = None) -> View:
        return self._view(filter_services(self._data().get("services") or [], type))

    def get_service(self, name: str, type: str) -> View:
        return self._view(self._data().get(f"service_{name}"))

    def get_events(self, namespace: str, *labels: Label) -> View:
        events = self._data().get("events") or []
        return self._view(filter_events(events, namespace, labels))

    def get_event(self, id: str) -> View:
        # Later events win when ids repeat.
        found = None
        for event in self._data().get("events") or []:
            if event.get("id") == id:
                found = event
        return self._view(found)

    def get_metrics(self, query: str) -> View:
        return self._view(filter_metrics(self._data().get("metrics") or [], query))

    def get_mailbox(self, service: str, mailbox: str) -> View:
        return self._view(self._data().get(f"mailbox_{mailbox}"))

    def get_mailbox_messages(self, service: str, mailbox: str) -> View:
        messages = [message_info(m) for m in self._mails() if addressed_to(m, mailbox)]
        return self._view(messages)

    def get_mail(self, message_id: str) -> View:
        return self._view(self._find_mail(message_id))

    def get_attachment_url(self, message_id: str, name: str) -> str:
        mail = self._find_mail(message_id)
        if mail is None:
            return ""
        attachments = (mail.get("data") or {}).get("attachments") or []
        attachment = next((a for a in attachments if a.get("name") == name), None)
        if attachment is None:
            return ""
        filename = attachment_filename(attachment.get("contentType"))
        if not filename:
            return ""
        return transform_path(self.base_url, f"/demo/{segment(filename)}")

    def get_example(self, request: ExampleRequest) -> View:
        examples = (self._data().get("examples") or {}).get(request.name) or []
        wanted = set(request.content_types)
        if wanted:
            examples = [e for e in examples if e.get("contentType") in wanted]
        return self._view(decode_examples(examples))

    def get_configs(self) -> View:
        configs = self._data().get("configs") or []
        return self._view([_config_info(c) for c in configs])

    def _find_config(self, id: str) -> dict[str, Any] | None:
        for config in self._data().get("configs") or []:
            if config.get("id") == id:
                return config
        return None

    def get_config(self, id: str) -> View:
        config = self._find_config(id)
        return self._view(_config_info(config) if config else None)

    def get_config_data(self, id: str) -> View:
        config = self._find_config(id)
        return self._view(config.get("data") if config else None)


def _config_info(config: dict[str, Any]) -> dict[str, Any]:
    # Raw content is only served by get_config_data.
    return {k: v for k, v in config.items() if k != "data"}
