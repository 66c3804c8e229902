"""Resource keys: one normalized string per logical request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping
from urllib.parse import quote, urlencode

Pairs = tuple[tuple[str, str], ...]


def _pairs(items: Mapping[str, object] | Iterable[tuple[str, object]] | None) -> Pairs:
    if not items:
        return ()
    if isinstance(items, Mapping):
        items = items.items()
    return tuple((str(k), "" if v is None else str(v)) for k, v in items)


@dataclass(frozen=True)
class ResourceRequest:
    """Everything needed to fetch one resource.

    Query parameters keep insertion order; the executor builds the URL from
    ``target``, the same string ``key`` is made of, so equal requests always
    hit the same cache slot.
    """

    path: str
    params: Pairs = ()
    method: str = "GET"
    body: Any = None
    headers: Pairs = ()

    @classmethod
    def get(
        cls,
        path: str,
        params: Mapping[str, object] | Iterable[tuple[str, object]] | None = None,
        headers: Mapping[str, object] | None = None,
    ) -> "ResourceRequest":
        return cls(path=path, params=_pairs(params), headers=_pairs(headers))

    @classmethod
    def post(
        cls,
        path: str,
        body: Any,
        headers: Mapping[str, object] | None = None,
    ) -> "ResourceRequest":
        return cls(path=path, method="POST", body=body, headers=_pairs(headers))

    @property
    def target(self) -> str:
        if not self.params:
            return self.path
        return f"{self.path}?{urlencode(self.params)}"

    @property
    def key(self) -> str:
        if self.method.upper() == "GET":
            return self.target
        return f"{self.method.upper()} {self.target}"


def segment(value: object) -> str:
    """Quote a single path segment (names may contain spaces or slashes)."""
    return quote(str(value), safe="@")


def transform_path(base_url: str, path: str) -> str:
    """Join the API base URL with a resource path."""
    if path.startswith(("http://", "https://")):
        return path
    base = (base_url or "").rstrip("/")
    if not path.startswith("/"):
        path = "/" + path
    return f"{base}{path}"
