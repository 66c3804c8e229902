"""Central configuration for dashboard_client."""

from __future__ import annotations

import logging
import os

from .models.settings import Settings

logger = logging.getLogger(__name__)

_MODES = {"live", "demo"}


def _read_float(name: str, default: float, minimum: float = 0.0) -> float:
    """Read a non-negative float from the environment.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset, empty or invalid.
        minimum: Values below this fall back to ``default``.

    Returns:
        The parsed value, or ``default``.
    """
    raw = (os.environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using %s", name, raw, default)
        return default
    if value != value or value < minimum:
        return default
    return value


def _read_settings() -> Settings:
    """Read all configuration from environment variables.

    Note:
        Invalid numeric values fall back to defaults. ``DASHBOARD_REFRESH_S``
        of 0 (the default) disables scheduled refresh.
    """
    api_url = (os.environ.get("DASHBOARD_API_URL") or "http://localhost:8080").rstrip(
        "/"
    )
    mode = (os.environ.get("DASHBOARD_MODE") or "live").strip().lower()
    if mode not in _MODES:
        logger.warning("Unknown DASHBOARD_MODE=%r, using live", mode)
        mode = "live"
    refresh_s = _read_float("DASHBOARD_REFRESH_S", 0.0)
    tick_s = _read_float("DASHBOARD_TICK_S", 0.1)
    if tick_s <= 0:
        tick_s = 0.1
    timeout_s = _read_float("DASHBOARD_TIMEOUT_S", 10.0)
    if timeout_s <= 0:
        timeout_s = 10.0
    demo_path = os.environ.get("DASHBOARD_DEMO_PATH") or "/demo/dashboard.json"

    return Settings(
        API_URL=api_url,
        MODE=mode,
        REFRESH_S=refresh_s,
        TICK_S=tick_s,
        TIMEOUT_S=timeout_s,
        DEMO_PATH=demo_path,
    )


settings = _read_settings()


def validate_settings(current: Settings | None = None) -> None:
    """Log warnings for settings that are valid but probably unintended."""
    current = current or settings
    if current.MODE == "live" and not current.API_URL.startswith(("http://", "https://")):
        logger.warning("DASHBOARD_API_URL %r has no http(s) scheme", current.API_URL)
    if current.REFRESH_S and current.REFRESH_S < current.TICK_S:
        logger.warning(
            "DASHBOARD_REFRESH_S=%s is shorter than the tick period %s",
            current.REFRESH_S,
            current.TICK_S,
        )

