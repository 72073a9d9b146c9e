#!/usr/bin/env python3
"""Print the daily one-time code for the secret in $SECRET."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from rich.console import Console

from daycode.api import generate
from daycode.config import DayCodeConfig, read_secret, validate_digits
from daycode.errors import DayCodeError
from daycode.generator import generate_daily_code
from daycode.models import DailyCode
from daycode.utils import format_duration, parse_instant, round_seconds

logger = logging.getLogger("daycode")


def parse_args(argv: list[str] | None = None, cfg: DayCodeConfig | None = None) -> argparse.Namespace:
    cfg = cfg or DayCodeConfig()
    parser = argparse.ArgumentParser(description="Generate a one-time code that stays valid until local midnight.")
    parser.add_argument(
        "-d",
        "--digits",
        type=int,
        default=cfg.default_digits,
        help=f"Number of digits in the code, {cfg.min_digits}-{cfg.max_digits} (default: {cfg.default_digits})",
    )
    parser.add_argument(
        "-tz",
        "--timezone",
        default=cfg.default_timezone,
        help=f"The timezone location you are in (default: {cfg.default_timezone})",
    )
    parser.add_argument("--at", default="", help="Generate for this ISO-8601 instant instead of now")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    return parser.parse_args(argv)


def render_code(result: DailyCode, console: Console | None = None) -> None:
    console = console or Console(highlight=False)
    console.print(f"Your code: [bold]{result.code}[/bold]")
    console.print(f"Valid for: {format_duration(round_seconds(result.remaining))}")


def main(argv: list[str] | None = None) -> None:
    try:
        cfg = DayCodeConfig.from_env()
    except DayCodeError as e:
        raise SystemExit(f"Error: {e}")

    args = parse_args(argv, cfg)
    logging.basicConfig(stream=sys.stderr, level=logging.DEBUG if args.verbose else logging.ERROR)

    try:
        validate_digits(args.digits, cfg)
        secret = read_secret(cfg=cfg)
    except DayCodeError as e:
        raise SystemExit(f"Error: {e}")

    now = None
    if args.at:
        try:
            now = parse_instant(args.at)
        except ValueError as e:
            raise SystemExit(f"Error: invalid --at timestamp: {e}")

    try:
        if args.json:
            out = generate(secret, digits=args.digits, timezone=args.timezone, now=now, cfg=cfg)
        else:
            result = generate_daily_code(secret, args.digits, args.timezone, now=now, cfg=cfg)
    except DayCodeError as e:
        logger.debug("Generation failed", exc_info=True)
        raise SystemExit(f"Error generating OTP: {e}")

    if args.json:
        print(json.dumps(out, ensure_ascii=False, indent=2))
    else:
        render_code(result)


if __name__ == "__main__":
    main()
