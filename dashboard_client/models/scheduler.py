"""Refresh scheduler dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class SchedulerTask:
    key: str
    callback: Callable[[], object]


@dataclass
class RefreshClock:
    start_time: float = 0.0
    progress: float = 0.0
    ticks: int = 0
    cycles: int = 0
