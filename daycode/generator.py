from __future__ import annotations

import base64
import calendar
import hashlib
import hmac
import logging
import os
import struct
from collections.abc import Mapping
from datetime import UTC, datetime, time, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .config import SECONDS_PER_DAY, DayCodeConfig, validate_digits
from .errors import InvalidSecretError, InvalidTimezoneError
from .models import DailyCode
from .utils import utc_now

logger = logging.getLogger(__name__)

_UINT64_MASK = 0xFFFFFFFFFFFFFFFF
LOCALTIME_PATH = Path("/etc/localtime")


def decode_secret(secret: str) -> bytes:
    # Spaces and line breaks are tolerated; padding is not.
    normalized = secret.replace(" ", "").replace("\r", "").replace("\n", "").upper()
    if not normalized:
        raise InvalidSecretError("invalid base32 secret: empty secret")
    if "=" in normalized:
        raise InvalidSecretError("invalid base32 secret: padding is not accepted")

    padding = (-len(normalized)) % 8
    try:
        return base64.b32decode(normalized + "=" * padding)
    except ValueError as exc:
        raise InvalidSecretError(f"invalid base32 secret: {exc}") from exc


def local_timezone(environ: Mapping[str, str] | None = None) -> ZoneInfo:
    """The host zone: ``$TZ`` when set, else ``/etc/localtime``, else UTC."""
    env = os.environ if environ is None else environ
    name = env.get("TZ")
    if name is None:
        try:
            with LOCALTIME_PATH.open("rb") as fh:
                return ZoneInfo.from_file(fh, key="Local")
        except (OSError, ValueError):
            return ZoneInfo("UTC")

    name = name.removeprefix(":")
    if not name:
        return ZoneInfo("UTC")
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return ZoneInfo("UTC")


def load_timezone(name: str) -> ZoneInfo:
    # "" is UTC and "Local" is the host zone.
    if not name or name == "UTC":
        return ZoneInfo("UTC")
    if name == "Local":
        return local_timezone()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidTimezoneError(f"invalid timezone: {name!r}") from exc


def localize(now: datetime | None, tz: ZoneInfo) -> datetime:
    """Express ``now`` (default: the clock) in ``tz``. Naive values are UTC."""
    if now is None:
        now = utc_now()
    elif now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return now.astimezone(tz)


def day_counter(local_now: datetime, step_seconds: int = SECONDS_PER_DAY) -> int:
    """Index of the local calendar day that ``local_now`` falls in.

    The UTC offset is read from ``local_now`` itself, so the counter and the
    offset always describe the same instant.
    """
    offset = local_now.utcoffset() or timedelta(0)
    unix_seconds = calendar.timegm(local_now.utctimetuple())
    return (unix_seconds + int(offset.total_seconds())) // step_seconds


def next_local_midnight(local_now: datetime) -> datetime:
    next_day = local_now.date() + timedelta(days=1)
    return datetime.combine(next_day, time.min, tzinfo=local_now.tzinfo)


def hotp(key: bytes, counter: int, digits: int) -> str:
    """HMAC-SHA512 dynamic truncation of a 64-bit counter (RFC 4226 style)."""
    msg = struct.pack(">Q", counter & _UINT64_MASK)
    digest = hmac.new(key, msg, hashlib.sha512).digest()

    offset = digest[-1] & 0x0F
    code_int = struct.unpack(">I", digest[offset : offset + 4])[0] & 0x7FFFFFFF
    return str(code_int % (10**digits)).zfill(digits)


def generate_daily_code(
    secret: str,
    digits: int | None = None,
    timezone: str | None = None,
    *,
    now: datetime | None = None,
    cfg: DayCodeConfig | None = None,
) -> DailyCode:
    """Generate the code for the local calendar day containing ``now``.

    The code stays the same until the next local midnight in ``timezone``;
    ``remaining`` is the time left until then.
    """
    cfg = cfg or DayCodeConfig()
    digits = cfg.default_digits if digits is None else digits
    timezone = cfg.default_timezone if timezone is None else timezone

    validate_digits(digits, cfg)
    key = decode_secret(secret)
    tz = load_timezone(timezone)

    local_now = localize(now, tz)
    counter = day_counter(local_now, cfg.step_seconds)
    valid_until = next_local_midnight(local_now)
    remaining = valid_until.astimezone(UTC) - local_now.astimezone(UTC)

    logger.debug("Generating %d-digit code for %s, counter=%d", digits, timezone, counter)
    return DailyCode(
        code=hotp(key, counter, digits),
        digits=digits,
        timezone=timezone,
        counter=counter,
        remaining=remaining,
        valid_until=valid_until,
    )
