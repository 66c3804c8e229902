"""Request failure taxonomy."""

from __future__ import annotations


class DashboardError(Exception):
    """Base exception for dashboard resource failures."""

    pass


class NetworkError(DashboardError):
    """No response at all (connection refused, timeout, DNS...)."""

    pass


class RequestError(DashboardError):
    """Server answered with a non-success status."""

    def __init__(self, status: int, status_text: str, body: str) -> None:
        self.status = status
        self.status_text = status_text
        self.body = body
        super().__init__(f"{status_text}: {body}")


class DecodeError(DashboardError):
    """Response body does not match its declared content type."""

    def __init__(self, message: str, content_type: str | None = None) -> None:
        self.content_type = content_type
        super().__init__(message)
