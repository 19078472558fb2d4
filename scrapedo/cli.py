"""Command-line interface for the scrape.do client.

Provides a simple CLI for scraping URLs from the terminal::

    # Plain scrape
    scrapedo scrape https://httpbin.co/anything

    # Rendered, through the residential proxy, from Germany
    scrapedo scrape https://example.com --render --super --geo-code de

    # Headers and cookies
    scrapedo scrape https://example.com --extra-header "Accept-Language:de-DE"
    scrapedo scrape https://example.com --cookie "session=abc"

    # Subscription usage
    scrapedo stats

The token comes from ``--token`` or the ``SCRAPEDO_TOKEN`` environment
variable. Entry point is configured in pyproject.toml as
``scrapedo = "scrapedo.cli:main"``.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from scrapedo.api import ScrapeDo
from scrapedo.geocodes import GEO_CODES, REGIONAL_GEO_CODES
from scrapedo.models import ScrapeRequest

__all__ = ["main"]


def _parse_pairs(items: Optional[List[str]], separator: str) -> Optional[Dict[str, str]]:
    """Parse repeated ``key<sep>value`` arguments into a dict.

    Args:
        items: Raw argument strings, or None when the option was not given.
        separator: ``":"`` for headers, ``"="`` for cookies.

    Returns:
        A dict preserving argument order, or None if ``items`` is None.

    Raises:
        argparse.ArgumentTypeError: If an item has no separator or an empty key.
    """
    if items is None:
        return None

    pairs: Dict[str, str] = {}
    for item in items:
        key, sep, value = item.partition(separator)
        key = key.strip()
        if not sep or not key:
            raise argparse.ArgumentTypeError(
                f"Invalid value '{item}'. Expected 'name{separator}value'"
            )
        pairs[key] = value.strip()
    return pairs


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="scrapedo",
        description="Client for the scrape.do web scraping API",
    )
    parser.add_argument(
        "--token",
        default=None,
        help="API token (default: $SCRAPEDO_TOKEN)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # --- scrape ---
    scrape_parser = subparsers.add_parser("scrape", help="Scrape a single URL")
    scrape_parser.add_argument("url", help="URL to scrape")
    scrape_parser.add_argument("--method", "-X", default="GET", help="HTTP method (default: GET)")
    scrape_parser.add_argument("--data", "-d", default=None, help="Request body for non-GET methods")
    scrape_parser.add_argument("--render", action="store_true", default=None, help="Render with a headless browser")
    scrape_parser.add_argument("--super", dest="super_proxy", action="store_true", default=None, help="Use residential/mobile proxies")
    scrape_parser.add_argument("--geo-code", choices=sorted(GEO_CODES), default=None, help="Country to route the request through")
    scrape_parser.add_argument("--regional-geo-code", choices=sorted(REGIONAL_GEO_CODES), default=None, help="Region to route the request through")
    scrape_parser.add_argument("--session-id", default=None, help="Sticky proxy session id")
    scrape_parser.add_argument("--return-json", action="store_true", default=None, help="Ask for the JSON response format")
    scrape_parser.add_argument("--transparent-response", action="store_true", default=None, help="Return the target's raw status and body")
    scrape_parser.add_argument("--device", choices=["Desktop", "Mobile"], default=None)
    scrape_parser.add_argument("--output", choices=["raw", "markdown"], default=None)
    scrape_parser.add_argument("--timeout", type=int, default=None, help="Provider timeout in milliseconds")
    scrape_parser.add_argument("--custom-header", action="append", dest="custom_headers", help="'Name:value' (repeatable)")
    scrape_parser.add_argument("--extra-header", action="append", dest="extra_headers", help="'Name:value', sent with the sd- prefix (repeatable)")
    scrape_parser.add_argument("--forward-header", action="append", dest="forward_headers", help="'Name:value' (repeatable)")
    scrape_parser.add_argument("--cookie", action="append", dest="cookies", help="'name=value' (repeatable)")

    # --- stats ---
    subparsers.add_parser("stats", help="Show subscription usage")

    return parser


def _request_from_args(args: argparse.Namespace) -> ScrapeRequest:
    """Build a ScrapeRequest from parsed ``scrape`` arguments."""
    options: Dict[str, Any] = {
        "url": args.url,
        "render": args.render,
        "super_proxy": args.super_proxy,
        "geo_code": args.geo_code,
        "regional_geo_code": args.regional_geo_code,
        "session_id": args.session_id,
        "return_json": args.return_json,
        "transparent_response": args.transparent_response,
        "device": args.device,
        "output": args.output,
        "timeout": args.timeout,
        "custom_headers": _parse_pairs(args.custom_headers, ":"),
        "extra_headers": _parse_pairs(args.extra_headers, ":"),
        "forward_headers": _parse_pairs(args.forward_headers, ":"),
        "set_cookies": _parse_pairs(args.cookies, "="),
    }
    return ScrapeRequest(**{k: v for k, v in options.items() if v is not None})


async def _run_scrape(args: argparse.Namespace) -> None:
    """Execute the scrape command."""
    request = _request_from_args(args)
    async with ScrapeDo(args.token, verbose=args.verbose) as client:
        result = await client.send_request(args.method, request, args.data)
    if result.kind == "raw":
        output = result.model_dump(mode="json", exclude={"content"})
        output["content"] = result.text
    else:
        output = result.model_dump(mode="json")
    print(json.dumps(output, indent=2, default=str))


async def _run_stats(args: argparse.Namespace) -> None:
    """Execute the stats command."""
    async with ScrapeDo(args.token, verbose=args.verbose) as client:
        stats = await client.statistics()
    print(json.dumps(stats.model_dump(by_alias=True), indent=2))


def main() -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "scrape": _run_scrape,
        "stats": _run_stats,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(handler(args))
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
