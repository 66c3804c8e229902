"""Async request executor backed by httpx."""

from __future__ import annotations

import json
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Any

import httpx

from .errors import DashboardError, DecodeError, NetworkError, RequestError
from .keys import ResourceRequest, transform_path

logger = logging.getLogger(__name__)

_BODY_SNIPPET = 500


@dataclass(frozen=True)
class FetchResult:
    data: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def is_json_content(content_type: str | None) -> bool:
    media = (content_type or "").split(";", 1)[0].strip().lower()
    return media == "application/json" or media.endswith("+json")


class RequestExecutor:
    """Performs the network call behind a resource key.

    ``execute`` never raises for request failures: the outcome is always a
    ``FetchResult``. ``fetch`` is the raising variant.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "",
        timeout_s: float | None = None,
    ) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.calls: Counter[str] = Counter()

    def forget(self, key: str) -> None:
        """Drop the call count of a key nobody holds any more."""
        self.calls.pop(key, None)

    def url_for(self, request: ResourceRequest) -> str:
        return transform_path(self.base_url, request.target)

    async def fetch(self, request: ResourceRequest) -> Any:
        url = self.url_for(request)
        headers = dict(request.headers)
        kwargs: dict[str, Any] = {"headers": headers}
        if request.body is not None:
            kwargs["content"] = json.dumps(request.body)
            headers.setdefault("Content-Type", "application/json")
        if self.timeout_s is not None:
            kwargs["timeout"] = self.timeout_s

        self.calls[request.key] += 1
        try:
            resp = await self.client.request(request.method, url, **kwargs)
        except httpx.DecodingError as exc:
            raise DecodeError(f"undecodable body from {request.target}: {exc}") from exc
        except httpx.RequestError as exc:
            raise NetworkError(f"{request.method} {url} failed: {exc}") from exc

        if not resp.is_success:
            body = resp.text[:_BODY_SNIPPET]
            raise RequestError(resp.status_code, resp.reason_phrase, body)

        content_type = resp.headers.get("content-type")
        if is_json_content(content_type):
            if not resp.content:
                return None
            try:
                return resp.json()
            except ValueError as exc:
                raise DecodeError(
                    f"invalid JSON from {request.target}: {exc}", content_type
                ) from exc
        return resp.text

    async def execute(self, request: ResourceRequest) -> FetchResult:
        try:
            data = await self.fetch(request)
        except DashboardError as exc:
            logger.warning("Fetch failed for %s: %s", request.key, exc)
            return FetchResult(error=str(exc) or type(exc).__name__)
        return FetchResult(data=data)
