#!/usr/bin/env python3
"""
Command-line interface for URL shortener service.

Usage:
    python shortlinks_cli.py shorten <url> [--validity MINUTES] [--custom-code CODE]
    python shortlinks_cli.py resolve <short_code>
    python shortlinks_cli.py analytics <short_code>
    python shortlinks_cli.py list
    python shortlinks_cli.py sweep
    python shortlinks_cli.py stats
    python shortlinks_cli.py clear
    python shortlinks_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from app import build_service
from config import load_config
from shortlinks.common.logging_config import setup_logging
from shortlinks.common.url_builder import build_short_url, format_time_remaining, sort_records_for_display
from shortlinks.errors import ShortenerError
from shortlinks.resolver import ClientContext


class ShortlinksCLI:
    """Command-line interface for URL shortener."""

    def __init__(self, store_backend: str, store_path: str, redis_url: Optional[str] = None, verbose: bool = False):
        """Initialize CLI."""
        self.config = load_config()
        self.config.store_backend = store_backend
        self.config.store_path = store_path
        self.config.redis_url = redis_url
        # stdout carries the JSON result only
        self.logger = setup_logging(level="DEBUG" if verbose else "ERROR", stream=sys.stderr)
        self.service = None

    def initialize(self):
        """Initialize store and service."""
        self.service = build_service(self.config, self.logger)

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    def _emit(self, payload: dict) -> int:
        print(json.dumps(payload, indent=2))
        return 0

    def _fail(self, message: str) -> int:
        print(json.dumps({"success": False, "error": message}, indent=2), file=sys.stderr)
        return 1

    def _describe(self, record, now: int) -> dict:
        data = record.to_dict()
        data["shortUrl"] = build_short_url(record.short_code, self.config.base_url, self.config.path_prefix)
        data["timeRemaining"] = format_time_remaining(record.expires_at, now)
        return data

    async def shorten(self, url: str, validity: Optional[int], custom_code: Optional[str]):
        """Shorten a URL."""
        try:
            record = await self.service.create_short_url(url, validity, custom_code)
        except ShortenerError as e:
            return self._fail(str(e))

        return self._emit({
            "success": True,
            **self._describe(record, self.service.clock()),
            "message": f"Successfully shortened URL to: {record.short_code}",
        })

    async def resolve(self, short_code: str):
        """Resolve a short code (records a click like a browser visit)."""
        outcome = await self.service.resolve(short_code, ClientContext(user_agent="shortlinks-cli"))
        try:
            original_url = outcome.raise_for_status()
        except ShortenerError as e:
            return self._fail(str(e))

        return self._emit({
            "success": True,
            "short_code": short_code,
            "original_url": original_url,
            "click_recorded": outcome.click_recorded,
        })

    async def analytics(self, short_code: str):
        """Show click events for a short code."""
        clicks = await self.service.get_analytics(short_code)
        return self._emit({
            "success": True,
            "short_code": short_code,
            "total_clicks": len(clicks),
            "clicks": [c.to_dict() for c in clicks],
        })

    async def list_urls(self):
        """List stored URLs, newest first."""
        now = self.service.clock()
        records = sort_records_for_display(await self.service.list_records())
        return self._emit({
            "success": True,
            "count": len(records),
            "urls": [self._describe(r, now) for r in records],
        })

    async def sweep(self):
        """Remove expired URLs."""
        removed = await self.service.sweep_expired()
        return self._emit({"success": True, "removed": removed})

    async def stats(self):
        """Show statistics."""
        return self._emit({"success": True, "statistics": await self.service.get_statistics()})

    async def clear(self):
        """Erase all URLs and analytics."""
        try:
            await self.service.clear_all()
        except ShortenerError as e:
            return self._fail(str(e))
        return self._emit({"success": True, "message": "All data cleared"})

    async def health(self):
        """Check store health."""
        health_status = await self.service.health_check()
        print(json.dumps({"success": health_status["overall"], "health": health_status}, indent=2))
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    config = load_config()

    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL for two hours
  %(prog)s shorten example.com/long/url --validity 120

  # Shorten with custom code
  %(prog)s shorten https://example.com/long/url --custom-code mylink

  # Follow a short code
  %(prog)s resolve mylink

  # Remove expired URLs
  %(prog)s sweep
        """
    )

    parser.add_argument(
        "--store-backend",
        default=config.store_backend,
        choices=["memory", "file", "redis"],
        help="Store backend (default: from STORE_BACKEND env or file)"
    )
    parser.add_argument(
        "--store-path",
        default=config.store_path,
        help="JSON file for the file backend (default: from STORE_PATH env)"
    )
    parser.add_argument(
        "--redis-url",
        default=config.redis_url,
        help="Redis connection URL (default: from REDIS_URL env)"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--validity", type=int, default=None, help="Validity in minutes (1-1440)")
    shorten_parser.add_argument("--custom-code", help="Custom short code")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a short code")
    resolve_parser.add_argument("short_code", help="Short code to resolve")

    analytics_parser = subparsers.add_parser("analytics", help="Show click events")
    analytics_parser.add_argument("short_code", help="Short code to get clicks for")

    subparsers.add_parser("list", help="List stored URLs")
    subparsers.add_parser("sweep", help="Remove expired URLs")
    subparsers.add_parser("stats", help="Show statistics")
    subparsers.add_parser("clear", help="Erase all data")
    subparsers.add_parser("health", help="Check store health")

    return parser


async def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    cli = ShortlinksCLI(
        store_backend=args.store_backend,
        store_path=args.store_path,
        redis_url=args.redis_url,
        verbose=args.verbose,
    )

    try:
        cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.validity, args.custom_code)
        elif args.command == "resolve":
            return await cli.resolve(args.short_code)
        elif args.command == "analytics":
            return await cli.analytics(args.short_code)
        elif args.command == "list":
            return await cli.list_urls()
        elif args.command == "sweep":
            return await cli.sweep()
        elif args.command == "stats":
            return await cli.stats()
        elif args.command == "clear":
            return await cli.clear()
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1
    except ValueError as e:
        return cli._fail(str(e))
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
