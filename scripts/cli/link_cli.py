#!/usr/bin/env python3
"""
Command-line interface for the link registry.

Talks to the backing store directly, without going through the HTTP API.

Usage:
    python link_cli.py create <url> [--code CODE]
    python link_cli.py get <code>
    python link_cli.py resolve <code>
    python link_cli.py list
    python link_cli.py delete <code>
    python link_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from linkreg.database import create_store
from linkreg.errors import LinkRegistryError
from linkreg.registry import LinkRegistry
from linkreg.shortcode import ShortCodeGenerator
from linkreg.common.logging_config import setup_logging


class LinkRegistryCLI:
    """Command-line interface for the link registry."""

    def __init__(self, db_url: str, verbose: bool = False):
        self.db_url = db_url
        self.verbose = verbose
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.registry: Optional[LinkRegistry] = None

    def initialize(self):
        """Initialize store and registry."""
        store = create_store(self.db_url, logger=self.logger)
        self.registry = LinkRegistry(
            store=store,
            code_generator=ShortCodeGenerator(default_length=6),
            logger=self.logger,
        )

    async def cleanup(self):
        """Cleanup resources."""
        if self.registry:
            await self.registry.close()

    @staticmethod
    def _ok(payload: dict) -> int:
        print(json.dumps({"success": True, **payload}, indent=2))
        return 0

    @staticmethod
    def _fail(error: Exception) -> int:
        print(json.dumps({
            "success": False,
            "error_type": type(error).__name__,
            "error": str(error),
        }, indent=2), file=sys.stderr)
        return 1

    async def create(self, url: str, code: Optional[str] = None):
        try:
            link = await self.registry.create(url, code=code)
        except LinkRegistryError as e:
            return self._fail(e)
        return self._ok({"link": link.to_dict()})

    async def get(self, code: str):
        try:
            link = await self.registry.get(code)
        except LinkRegistryError as e:
            return self._fail(e)
        return self._ok({"link": link.to_dict()})

    async def resolve(self, code: str):
        """Resolve a code, counting it as a click."""
        try:
            target_url = await self.registry.resolve(code)
        except LinkRegistryError as e:
            return self._fail(e)
        return self._ok({"code": code, "target_url": target_url})

    async def list_links(self):
        try:
            links = await self.registry.list_links()
        except LinkRegistryError as e:
            return self._fail(e)
        return self._ok({"count": len(links), "links": [link.to_dict() for link in links]})

    async def delete(self, code: str):
        try:
            await self.registry.delete(code)
        except LinkRegistryError as e:
            return self._fail(e)
        return self._ok({"deleted": code})

    async def health(self):
        healthy = await self.registry.health_check()
        print(json.dumps({"success": healthy, "store": "healthy" if healthy else "unhealthy"}, indent=2))
        return 0 if healthy else 1


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Link Registry CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create a link with a generated code
  %(prog)s create https://example.com/long/url

  # Create with a custom code
  %(prog)s create https://example.com/long/url --code mylink1

  # Show a link and its clicks
  %(prog)s get mylink1

  # List all links, newest first
  %(prog)s list
        """
    )

    parser.add_argument(
        "--db-url",
        default=os.getenv("DATABASE_URL", "postgresql://postgres@localhost:5432/postgres"),
        help="Backing store URL (default: from DATABASE_URL env)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_parser = subparsers.add_parser("create", help="Create a short link")
    create_parser.add_argument("url", help="Target URL")
    create_parser.add_argument("--code", help="Custom short code (6-8 alphanumeric characters)")

    get_parser = subparsers.add_parser("get", help="Show a link")
    get_parser.add_argument("code", help="Short code to lookup")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a code and record a click")
    resolve_parser.add_argument("code", help="Short code to resolve")

    subparsers.add_parser("list", help="List all links")

    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("code", help="Short code to delete")

    subparsers.add_parser("health", help="Check store health")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    cli = LinkRegistryCLI(db_url=args.db_url, verbose=args.verbose)

    try:
        cli.initialize()

        if args.command == "create":
            return await cli.create(args.url, args.code)
        elif args.command == "get":
            return await cli.get(args.code)
        elif args.command == "resolve":
            return await cli.resolve(args.code)
        elif args.command == "list":
            return await cli.list_links()
        elif args.command == "delete":
            return await cli.delete(args.code)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
