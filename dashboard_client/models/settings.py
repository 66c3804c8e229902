"""Configuration dataclasses."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class Settings:
    """Configuration settings for dashboard_client."""

    API_URL: str
    MODE: str
    REFRESH_S: float
    TICK_S: float
    TIMEOUT_S: float
    DEMO_PATH: str


@dataclass
class RefreshSetting:
    """UI-controlled refresh period in seconds; 0 disables scheduled refresh.

    The scheduler reads ``interval_s`` on every tick, so assigning a new value
    takes effect without restarting it.
    """

    interval_s: float = 0.0

    @property
    def enabled(self) -> bool:
        return self.interval_s > 0

    @classmethod
    def from_query(cls, value: object) -> "RefreshSetting":
        """Parse a ``?refresh=20`` style value. Invalid values disable refresh."""
        try:
            interval = float(str(value).strip()) if value is not None else 0.0
        except ValueError:
            interval = 0.0
        if not math.isfinite(interval) or interval < 0:
            interval = 0.0
        return cls(interval_s=interval)
