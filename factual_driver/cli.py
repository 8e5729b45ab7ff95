#!/usr/bin/env python3
"""
Command line access to the driver.

Credentials are read from the FACTUAL_KEY and FACTUAL_SECRET environment variables.
"""

import argparse
import asyncio
import json
import logging
import os
import sys

from factual_driver import config
from factual_driver.client import Factual
from factual_driver.core.exceptions import FactualException
from factual_driver.core.query import FetchQuery


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="factual-driver", description=__doc__)
    parser.add_argument("--debug", action="store_true", help="log signed requests")
    sub = parser.add_subparsers(dest="command", required=True)

    fetch = sub.add_parser("fetch", help="read rows from a table")
    fetch.add_argument("table")
    fetch.add_argument("-q", "--search", help="full text search")
    fetch.add_argument("--filters", type=json.loads, help="row filters as JSON")
    fetch.add_argument("--select", help="comma separated columns")
    fetch.add_argument("--limit", type=int)
    fetch.add_argument("--offset", type=int)

    schema = sub.add_parser("schema", help="describe a table")
    schema.add_argument("table")

    resolve = sub.add_parser("resolve", help="resolve an entity from partial attributes")
    resolve.add_argument("table")
    resolve.add_argument("values", type=json.loads, help="attributes as a JSON object")

    raw = sub.add_parser("raw", help="sign and run a complete URL")
    raw.add_argument("url")
    return parser


async def main(args: argparse.Namespace) -> object:
    async with Factual(os.environ.get("FACTUAL_KEY"), os.environ.get("FACTUAL_SECRET")) as factual:
        if args.debug:
            factual.debug()
        if args.command == "fetch":
            query = FetchQuery(
                search=args.search,
                filters=args.filters,
                select=args.select.split(",") if args.select else None,
                limit=args.limit,
                offset=args.offset,
            )
            return (await factual.fetch(args.table, query)).get_json()
        elif args.command == "schema":
            return (await factual.schema(args.table)).get_json()
        elif args.command == "resolve":
            return await factual.resolve(args.table, args.values)
        return json.loads(await factual.raw_request(args.url))


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else config.LOG_LEVEL)
    try:
        output = asyncio.run(main(args))
    except FactualException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(run())
