"""Dashboard payload shapes and query parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypedDict


class Service(TypedDict, total=False):
    """Service list item."""

    name: str
    description: str
    version: str
    type: str
    metrics: list[dict[str, Any]]


class ServiceEvent(TypedDict, total=False):
    """Recorded event; ``traits`` always carries a ``namespace``."""

    id: str
    traits: dict[str, str]
    data: dict[str, Any]
    time: str


class Metric(TypedDict, total=False):
    name: str
    value: float


# "from" is a keyword, hence the functional form.
MessageInfo = TypedDict(
    "MessageInfo",
    {
        "messageId": str,
        "subject": str,
        "from": list[dict[str, str]],
        "to": list[dict[str, str]],
        "date": str,
    },
    total=False,
)


class ConfigInfo(TypedDict, total=False):
    id: str
    url: str
    provider: str
    time: str
    refs: list[dict[str, Any]]


class Example(TypedDict, total=False):
    contentType: str
    value: str
    error: str


@dataclass(frozen=True)
class Label:
    """Trait filter: an event matches when ``traits[name] == value``."""

    name: str
    value: str


@dataclass(frozen=True)
class SchemaInfo:
    schema: Any
    format: str | None = None


@dataclass(frozen=True)
class ExampleRequest:
    name: str
    schema: SchemaInfo
    content_types: tuple[str, ...] = field(default_factory=tuple)

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "schema": self.schema.schema,
            "format": self.schema.format,
            "contentTypes": list(self.content_types),
        }
