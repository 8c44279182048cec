#!/usr/bin/env python3
"""
Command line entry point.

    python -m kraken_client time
    python -m kraken_client assets ETH,XRP
    python -m kraken_client pairs --info fees ETHUSD
    python -m kraken_client ticker XETHZUSD
    python -m kraken_client balance

Credentials and connection settings are read from KRAKEN_* environment
variables or the .env file.
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from kraken_client.core.config import get_config
from kraken_client.core.exceptions import handle_exception
from kraken_client.core.logger import get_logger, init_logging_from_config
from kraken_client.services.exchange.client import KrakenClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kraken_client",
        description="Query the Kraken REST API.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("time", help="Server time")

    assets = sub.add_parser("assets", help="Asset info")
    assets.add_argument("assets", nargs="?", default="all", help="e.g. ETH,XRP")

    pairs = sub.add_parser("pairs", help="Tradable asset pairs")
    pairs.add_argument("pair", nargs="?", default="all", help="e.g. ETHUSD,XRPUSD")
    pairs.add_argument("--info", default=None, choices=["all", "leverage", "fees", "margin"])

    ticker = sub.add_parser("ticker", help="Ticker information")
    ticker.add_argument("pair", help="e.g. XETHZUSD")

    sub.add_parser("balance", help="Account balance (needs API key and secret)")

    return parser


async def run(args: argparse.Namespace) -> int:
    """Execute one command, print the result as JSON"""
    logger = get_logger(__name__)
    client = KrakenClient.from_settings(get_config())

    async with client:
        if args.command == "time":
            result = await client.get_time()
        elif args.command == "assets":
            result = await client.get_asset_info(args.assets)
        elif args.command == "pairs":
            result = await client.get_tradable_asset_pairs(info=args.info, pair=args.pair)
        elif args.command == "ticker":
            result = await client.get_ticker_information(args.pair)
        else:
            result = await client.get_balance()

    if result.ok:
        print(json.dumps(result.result, indent=2, sort_keys=True))
        return 0

    handle_exception(result.to_exception(), logger, {"command": args.command, "kind": result.kind.value})
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    init_logging_from_config()
    for warning in get_config().validate_config():
        get_logger(__name__).warning(warning)

    exit_code = asyncio.run(run(args))
    logging.shutdown()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
