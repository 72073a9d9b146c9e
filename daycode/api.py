from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from .config import DayCodeConfig, read_secret
from .generator import generate_daily_code


def generate(
    secret: str,
    *,
    digits: int | None = None,
    timezone: str | None = None,
    now: datetime | None = None,
    cfg: DayCodeConfig | None = None,
) -> dict[str, Any]:
    result = generate_daily_code(secret, digits, timezone, now=now, cfg=cfg)
    return result.to_dict()


def generate_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    now: datetime | None = None,
) -> dict[str, Any]:
    # Secret, digits and timezone all come from the environment.
    cfg = DayCodeConfig.from_env(environ)
    secret = read_secret(environ, cfg)
    return generate(secret, now=now, cfg=cfg)
