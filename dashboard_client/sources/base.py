"""Data source interface and the query helpers both sources share."""

from __future__ import annotations

import base64
import binascii
import enum
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Iterable

from ..executor import is_json_content
from ..models.dashboard import ExampleRequest, Label, MessageInfo, Service, ServiceEvent
from ..views import View

logger = logging.getLogger(__name__)

_ATTACHMENT_NAME_RE = re.compile(r"name=([^;]+)")


class DashboardMode(str, enum.Enum):
    LIVE = "live"
    DEMO = "demo"

    @classmethod
    def parse(cls, value: str | None) -> "DashboardMode":
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            logger.warning("Unknown dashboard mode %r, using live", value)
            return cls.LIVE


class DataSource(ABC):
    """Queries the dashboard needs, independent of where the data lives."""

    mode: DashboardMode

    @abstractmethod
    def get_app_info(self) -> View: ...

    @abstractmethod
    def get_services(self, type: str | None = None) -> View: ...

    @abstractmethod
    def get_service(self, name: str, type: str) -> View: ...

    @abstractmethod
    def get_events(self, namespace: str, *labels: Label) -> View: ...

    @abstractmethod
    def get_event(self, id: str) -> View: ...

    @abstractmethod
    def get_metrics(self, query: str) -> View: ...

    @abstractmethod
    def get_mailbox(self, service: str, mailbox: str) -> View: ...

    @abstractmethod
    def get_mailbox_messages(self, service: str, mailbox: str) -> View: ...

    @abstractmethod
    def get_mail(self, message_id: str) -> View: ...

    @abstractmethod
    def get_attachment_url(self, message_id: str, name: str) -> str: ...

    @abstractmethod
    def get_example(self, request: ExampleRequest) -> View: ...

    @abstractmethod
    def get_configs(self) -> View: ...

    @abstractmethod
    def get_config(self, id: str) -> View: ...

    @abstractmethod
    def get_config_data(self, id: str) -> View: ...

    async def ready(self) -> None:
        """Wait until the source can answer queries."""
        return None

    def close(self) -> None:
        return None


def service_sort_key(service: Service) -> str:
    return str(service.get("name", "")).casefold()


def filter_services(services: Iterable[Service], type: str | None = None) -> list[Service]:
    """Services of ``type`` (all when empty), sorted case-insensitively by name."""
    items = [s for s in services if not type or s.get("type") == type]
    return sorted(items, key=service_sort_key)


def event_matches(event: ServiceEvent, namespace: str, labels: Iterable[Label]) -> bool:
    traits = event.get("traits") or {}
    if traits.get("namespace") != namespace:
        return False
    return all(traits.get(label.name) == label.value for label in labels)


def filter_events(
    events: Iterable[ServiceEvent], namespace: str, labels: Iterable[Label]
) -> list[ServiceEvent]:
    """Matching events, in source order."""
    labels = tuple(labels)
    return [e for e in events if event_matches(e, namespace, labels)]


def metric_name(query: str) -> str:
    return (query or "").split("{", 1)[0].strip()


def filter_metrics(metrics: Iterable[dict[str, Any]], query: str) -> list[dict[str, Any]]:
    prefix = metric_name(query)
    return [m for m in metrics if str(m.get("name", "")).startswith(prefix)]


def message_info(mail: dict[str, Any]) -> MessageInfo:
    data = mail.get("data") or {}
    return {
        "messageId": data.get("messageId"),
        "subject": data.get("subject"),
        "from": data.get("from"),
        "to": data.get("to"),
        "date": data.get("date"),
    }


def addressed_to(mail: dict[str, Any], mailbox: str) -> bool:
    recipients = (mail.get("data") or {}).get("to") or []
    return any(r.get("address") == mailbox for r in recipients)


def attachment_filename(content_type: str | None) -> str | None:
    """File name from a ``...; name=foo.png`` content type."""
    match = _ATTACHMENT_NAME_RE.search(content_type or "")
    if match and match.group(1):
        return match.group(1).strip().strip('"')
    return None


def format_example(value: str, content_type: str | None) -> str:
    if not is_json_content(content_type):
        return value
    try:
        return json.dumps(json.loads(value), indent=2, ensure_ascii=False)
    except ValueError:
        return value


def decode_examples(examples: Iterable[dict[str, Any]] | None) -> list[dict[str, Any]]:
    """Decode base64 example values and pretty-print JSON ones.

    Returns new dicts; the cached payload is left untouched.
    """
    out: list[dict[str, Any]] = []
    for example in examples or []:
        item = dict(example)
        raw = item.get("value")
        if isinstance(raw, str):
            try:
                text = base64.b64decode(raw, validate=True).decode("utf-8", "replace")
            except (binascii.Error, ValueError):
                logger.debug("Example value is not base64, keeping it as-is")
                text = raw
            item["value"] = format_example(text, item.get("contentType"))
        out.append(item)
    return out
