from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace

from .errors import InvalidDigitsError, MissingSecretError

SECONDS_PER_DAY = 86400


@dataclass(frozen=True)
class DayCodeConfig:
    default_digits: int = 6
    min_digits: int = 4
    max_digits: int = 9
    default_timezone: str = "Europe/Istanbul"
    step_seconds: int = SECONDS_PER_DAY

    secret_env: str = "SECRET"
    timezone_env: str = "DAYCODE_TIMEZONE"
    digits_env: str = "DAYCODE_DIGITS"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DayCodeConfig:
        env = os.environ if environ is None else environ
        cfg = cls()
        tz = env.get(cfg.timezone_env, "").strip()
        if tz:
            cfg = replace(cfg, default_timezone=tz)
        raw_digits = env.get(cfg.digits_env, "").strip()
        if raw_digits:
            try:
                digits = int(raw_digits)
            except ValueError:
                raise InvalidDigitsError(f"{cfg.digits_env} must be an integer, got {raw_digits!r}") from None
            cfg = replace(cfg, default_digits=digits)
        return cfg


def validate_digits(digits: int, cfg: DayCodeConfig | None = None) -> int:
    cfg = cfg or DayCodeConfig()
    if not cfg.min_digits <= digits <= cfg.max_digits:
        raise InvalidDigitsError(f"digit length must be between {cfg.min_digits} and {cfg.max_digits}")
    return digits


def read_secret(environ: Mapping[str, str] | None = None, cfg: DayCodeConfig | None = None) -> str:
    cfg = cfg or DayCodeConfig()
    env = os.environ if environ is None else environ
    secret = env.get(cfg.secret_env, "")
    if not secret:
        raise MissingSecretError(f"{cfg.secret_env} environment variable is not set")
    return secret
