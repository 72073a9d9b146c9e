from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from .utils import format_duration, round_seconds


@dataclass(frozen=True)
class DailyCode:
    code: str
    digits: int
    timezone: str
    counter: int
    remaining: timedelta
    valid_until: datetime

    def to_dict(self) -> dict[str, Any]:
        remaining = round_seconds(self.remaining)
        return {
            "code": self.code,
            "digits": self.digits,
            "timezone": self.timezone,
            "counter": self.counter,
            "remaining_seconds": int(remaining.total_seconds()),
            "valid_for": format_duration(remaining),
            "valid_until": self.valid_until.isoformat(),
        }
