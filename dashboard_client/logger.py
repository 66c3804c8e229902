"""Logging helpers for dashboard_client
"""
import logging
import os

# Per-request lines from these are noise at a sub-second refresh tick.
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level_name: str | None = None) -> int:
    """Configure the root logger once and return the effective level.

    ``level_name`` overrides ``LOG_LEVEL``; unknown names mean INFO.
    """
    name = (level_name or os.environ.get("LOG_LEVEL") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)
    root.setLevel(level)

    for noisy in _QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(max(level, logging.WARNING))
    return level


__all__ = ["setup_logging"]
