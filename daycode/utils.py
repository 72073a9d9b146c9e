from __future__ import annotations

from datetime import datetime, timedelta, timezone

_ONE_SECOND_US = 1_000_000


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def round_seconds(delta: timedelta) -> timedelta:
    """Round to whole seconds, halves away from zero."""
    total_us = delta // timedelta(microseconds=1)
    sign = -1 if total_us < 0 else 1
    seconds, rest = divmod(abs(total_us), _ONE_SECOND_US)
    if rest * 2 >= _ONE_SECOND_US:
        seconds += 1
    return timedelta(seconds=sign * seconds)


def format_duration(delta: timedelta) -> str:
    """Render as ``9h0m5s`` / ``1m0s`` / ``45s``; sub-second parts are dropped."""
    total = int(delta.total_seconds())
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    hours, rest = divmod(abs(total), 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def parse_instant(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; ``Z`` and naive values mean UTC."""
    value = text.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
