from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from secrets import token_hex
from typing import Any

from rooguys.config import AppConfig, ConfigError, load_config
from rooguys.http.errors import RooguysError
from rooguys.obs.logging import LogSettings, build_logger, log_event
from rooguys.sdk import Rooguys

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2
EXIT_API_ERROR = 3


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="rooguys", description="Rooguys API command line client")
    parser.add_argument("--config", help="Path to config YAML")
    parser.add_argument("--api-key", help="API key (defaults to $ROOGUYS_API_KEY)")
    parser.add_argument("--log-level", help="Logging level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("health", help="Check API health")

    user_parser = subparsers.add_parser("user", help="Fetch a user profile")
    user_parser.add_argument("user_id")

    track_parser = subparsers.add_parser("track", help="Track an event")
    track_parser.add_argument("event_name")
    track_parser.add_argument("user_id")
    track_parser.add_argument(
        "--property", dest="properties", action="append", default=[], metavar="KEY=VALUE"
    )
    track_parser.add_argument("--idempotency-key")

    leaderboard_parser = subparsers.add_parser("leaderboard", help="Show the global leaderboard")
    leaderboard_parser.add_argument("--timeframe", choices=["all-time", "weekly", "monthly"], default="all-time")
    leaderboard_parser.add_argument("--page", type=int, default=1)
    leaderboard_parser.add_argument("--limit", type=int, default=50)

    return parser.parse_args(argv)


def _parse_properties(pairs: list[str]) -> dict[str, str]:
    properties: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid property (expected KEY=VALUE): {pair}")
        properties[key] = value
    return properties


async def run_command(client: Rooguys, args: argparse.Namespace) -> Any:
    if args.command == "health":
        return await client.health.check()
    if args.command == "user":
        return await client.users.get(args.user_id)
    if args.command == "track":
        return await client.events.track(
            args.event_name,
            args.user_id,
            _parse_properties(args.properties),
            idempotency_key=args.idempotency_key,
        )
    if args.command == "leaderboard":
        return await client.leaderboards.get_global(args.timeframe, args.page, args.limit)
    raise ValueError(f"Unknown command: {args.command}")


async def _run(config: AppConfig, api_key: str, args: argparse.Namespace, logger: logging.Logger) -> Any:
    async with Rooguys(
        api_key,
        config.client,
        logger=logger,
        on_rate_limit_warning=lambda info: print(
            f"warning: rate limit {info.remaining}/{info.limit} remaining", file=sys.stderr
        ),
    ) as client:
        return await run_command(client, args)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])

    try:
        config = load_config(Path(args.config)).config if args.config else AppConfig()
    except ConfigError as exc:
        print(f"Config error: {exc}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    api_key = args.api_key or os.environ.get("ROOGUYS_API_KEY", "")
    if not api_key:
        print("An API key is required (--api-key or ROOGUYS_API_KEY)", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    logger = build_logger(
        LogSettings(
            level=args.log_level or config.obs.log_level,
            session_id=token_hex(4),
            jsonl=config.obs.log_jsonl,
        )
    )

    try:
        result = asyncio.run(_run(config, api_key, args, logger))
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except RooguysError as exc:
        log_event(logger, logging.ERROR, "command_failed", "Command failed", command=args.command, error=exc.to_dict())
        print(json.dumps(exc.to_dict(), ensure_ascii=False), file=sys.stderr)
        return EXIT_API_ERROR

    print(json.dumps(result, ensure_ascii=False, indent=2, default=str))
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
