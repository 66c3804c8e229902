"""Live data source: every query is a cached request against the API."""

from __future__ import annotations

import logging
from typing import Any

from ..cache import ResourceCache
from ..keys import ResourceRequest, segment, transform_path
from ..models.dashboard import ExampleRequest, Label
from ..views import LiveView, View
from .base import DashboardMode, DataSource, decode_examples, filter_events, filter_services

logger = logging.getLogger(__name__)

_ACCEPT_JSON = {"Accept": "application/json"}


def _as_list(data: Any) -> list[Any]:
    return list(data) if isinstance(data, list) else []


class LiveSource(DataSource):
    mode = DashboardMode.LIVE

    def __init__(self, cache: ResourceCache, base_url: str = "") -> None:
        self.cache = cache
        self.base_url = base_url

    def _view(
        self,
        request: ResourceRequest,
        transform=None,
        empty=None,
        refresh: bool = True,
        cached: bool = True,
    ) -> LiveView:
        logger.debug("Live query %s", request.key)
        sub = self.cache.acquire(request, refresh_enabled=refresh, cached=cached)
        return LiveView(sub, transform=transform, empty=empty)

    def get_app_info(self) -> View:
        return self._view(ResourceRequest.get("/api/info"), refresh=False)

    def get_services(self, type: str | None = None) -> View:
        return self._view(
            ResourceRequest.get("/api/services"),
            transform=lambda data: filter_services(_as_list(data), type),
            empty=list,
        )

    def get_service(self, name: str, type: str) -> View:
        path = f"/api/services/{segment(type)}/{segment(name)}"
        return self._view(ResourceRequest.get(path))

    def get_events(self, namespace: str, *labels: Label) -> View:
        params = [("namespace", namespace)]
        params.extend((label.name, label.value) for label in labels)
        return self._view(
            ResourceRequest.get("/api/events", params),
            transform=lambda data: filter_events(_as_list(data), namespace, labels),
            empty=list,
        )

    def get_event(self, id: str) -> View:
        return self._view(ResourceRequest.get(f"/api/events/{segment(id)}"))

    def get_metrics(self, query: str) -> View:
        return self._view(
            ResourceRequest.get("/api/metrics", {"q": query}),
            transform=_as_list,
            empty=list,
        )

    def get_mailbox(self, service: str, mailbox: str) -> View:
        path = f"/api/services/mail/{segment(service)}/mailboxes/{segment(mailbox)}"
        return self._view(
            ResourceRequest.get(path, headers=_ACCEPT_JSON), refresh=False, cached=False
        )

    def get_mailbox_messages(self, service: str, mailbox: str) -> View:
        path = (
            f"/api/services/mail/{segment(service)}"
            f"/mailboxes/{segment(mailbox)}/messages"
        )
        return self._view(
            ResourceRequest.get(path, headers=_ACCEPT_JSON),
            transform=_as_list,
            empty=list,
        )

    def get_mail(self, message_id: str) -> View:
        path = f"/api/services/mail/messages/{segment(message_id)}"
        return self._view(ResourceRequest.get(path), refresh=False)

    def get_attachment_url(self, message_id: str, name: str) -> str:
        path = (
            f"/api/services/mail/messages/{segment(message_id)}"
            f"/attachments/{segment(name)}"
        )
        return transform_path(self.base_url, path)

    def get_example(self, request: ExampleRequest) -> View:
        # Every call generates new examples, so the result is never shared.
        return self._view(
            ResourceRequest.post(
                "/api/schema/example",
                request.to_payload(),
                headers={"Content-Type": "application/json", **_ACCEPT_JSON},
            ),
            transform=decode_examples,
            empty=list,
            refresh=False,
            cached=False,
        )

    def get_configs(self) -> View:
        return self._view(
            ResourceRequest.get("/api/configs"), transform=_as_list, empty=list
        )

    def get_config(self, id: str) -> View:
        return self._view(ResourceRequest.get(f"/api/configs/{segment(id)}"))

    def get_config_data(self, id: str) -> View:
        return self._view(
            ResourceRequest.get(f"/api/configs/{segment(id)}/data"), refresh=False
        )
