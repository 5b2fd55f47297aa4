"""Command-line entry point: ``python -m dealerstock``."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import logging
import sys
from typing import Any

from dealerstock.client import StockClient
from dealerstock.config import StockConfig
from dealerstock.exceptions import DealerStockError


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="dealerstock", description="Aggregate a dealer's vehicle inventory")
    parser.add_argument("--config", help="Dealer config JSON file (default: DEALERSTOCK_* environment)")
    parser.add_argument("--source", help="Override the data-source type, e.g. willhaben or combined")
    parser.add_argument("--no-render", action="store_true", help="Skip the headless-browser tier")
    parser.add_argument("--verbose", "-v", action="store_true")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("vehicles", help="Print the aggregated inventory as JSON")
    detail = commands.add_parser("detail", help="Print one detail record as JSON")
    detail.add_argument("vid", help="Numeric vehicle id")
    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> StockConfig:
    overrides: dict[str, Any] = {}
    if args.no_render:
        overrides["render_enabled"] = False
    config = StockConfig.from_json(args.config, **overrides) if args.config else StockConfig.from_env(**overrides)
    if args.source:
        source = dataclasses.replace(config.data_source, type=args.source)
        config = dataclasses.replace(config, data_source=source)
    return config


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


async def _run(args: argparse.Namespace, config: StockConfig) -> int:
    async with StockClient(config) as client:
        if args.command == "vehicles":
            response = await client.get_vehicles()
            _print_json(response.to_wire())
            return 0 if response.success else 1
        detail = await client.get_vehicle_detail(args.vid)
        _print_json(detail.to_wire())
        return 0


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _load_config(args)
    except DealerStockError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if args.command == "serve":
        from aiohttp import web

        from dealerstock.web import create_server_app

        web.run_app(create_server_app(config), host=args.host, port=args.port)
        return 0

    try:
        return asyncio.run(_run(args, config))
    except DealerStockError as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nAborted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
