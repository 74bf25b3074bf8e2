#!/usr/bin/env python3
"""
Command-line interface for the link registry.

Talks to the Redis store directly; every command except health needs
REDIS_URL or --redis-url. The operator is trusted to act as the identity
given with --as.

Usage:
    python link_registry_cli.py --as alice create <url> [--key KEY]
    python link_registry_cli.py --as alice update <key> <url>
    python link_registry_cli.py --as alice delete <key>
    python link_registry_cli.py get <key>
    python link_registry_cli.py record <key>
    python link_registry_cli.py owner <key>
    python link_registry_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from config import Config
from link_registry.bootstrap import build_registry
from link_registry.common.logging_config import setup_logging
from link_registry.environment import StaticAuthenticator
from link_registry.errors import RegistryError


class LinkRegistryCLI:
    """Command-line interface for the link registry."""

    def __init__(self, config: Config, identity: Optional[str] = None, verbose: bool = False):
        self.config = config
        self.identity = identity
        self.logger = setup_logging(level="DEBUG" if verbose else "ERROR")
        self.registry = None

    async def initialize(self):
        """Build the registry."""
        authenticator = StaticAuthenticator([self.identity] if self.identity else [])
        self.registry = await build_registry(self.config, self.logger, authenticator)

    async def cleanup(self):
        """Cleanup resources."""
        if self.registry:
            await self.registry.close()

    def _emit(self, payload: dict, ok: bool = True) -> int:
        print(json.dumps({"success": ok, **payload}, indent=2), file=sys.stdout if ok else sys.stderr)
        return 0 if ok else 1

    async def run(self, command: str, args: argparse.Namespace) -> int:
        """Execute one command, mapping registry errors to exit code 1."""
        try:
            if command == "create":
                key = await self.registry.create(self.identity or "", args.url, args.key)
                return self._emit({"short_key": key, "destination_url": args.url})
            if command == "update":
                await self.registry.update(self.identity or "", args.key, args.url)
                return self._emit({"short_key": args.key, "destination_url": args.url})
            if command == "delete":
                await self.registry.delete(self.identity or "", args.key)
                return self._emit({"short_key": args.key, "deleted": True})
            if command == "get":
                url = await self.registry.get_destination(args.key)
                return self._emit({"short_key": args.key, "destination_url": url})
            if command == "record":
                record = await self.registry.get_record(args.key)
                return self._emit({"short_key": args.key, **record.to_dict()})
            if command == "owner":
                owner = await self.registry.get_owner(args.key)
                return self._emit({"short_key": args.key, "owner": owner})
            if command == "health":
                health = await self.registry.health_check()
                return self._emit({"health": health}, ok=health["overall"])
        except RegistryError as e:
            return self._emit({"error": e.code, "detail": e.message}, ok=False)

        return self._emit({"error": f"Unknown command: {command}"}, ok=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Link Registry CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create a link with a generated key
  %(prog)s --as alice create https://example.com/long/url

  # Create with a custom key
  %(prog)s --as alice create https://example.com/long/url --key mylink

  # Point it somewhere else
  %(prog)s --as alice update mylink https://example.com/other

  # Look it up
  %(prog)s get mylink
        """
    )

    parser.add_argument(
        "--redis-url",
        default=os.getenv("REDIS_URL"),
        help="Redis connection URL (default: from REDIS_URL env; required by every command but health)"
    )

    parser.add_argument(
        "--namespace",
        default=os.getenv("REDIS_NAMESPACE", "link_registry"),
        help="Prefix for registry keys in Redis (default: from REDIS_NAMESPACE env or link_registry)"
    )

    parser.add_argument(
        "--as",
        dest="identity",
        help="Identity to act as for create/update/delete"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    create_parser = subparsers.add_parser("create", help="Create a link")
    create_parser.add_argument("url", help="Destination URL")
    create_parser.add_argument("--key", help="Custom short key")

    update_parser = subparsers.add_parser("update", help="Change a link's destination")
    update_parser.add_argument("key", help="Short key")
    update_parser.add_argument("url", help="New destination URL")

    delete_parser = subparsers.add_parser("delete", help="Delete a link")
    delete_parser.add_argument("key", help="Short key")

    for name, help_text in (
        ("get", "Get a link's destination"),
        ("record", "Get a link's full record"),
        ("owner", "Get a link's owner"),
    ):
        lookup_parser = subparsers.add_parser(name, help=help_text)
        lookup_parser.add_argument("key", help="Short key")

    subparsers.add_parser("health", help="Check store health")

    return parser


async def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.command in ("create", "update", "delete") and not args.identity:
        parser.error(f"'{args.command}' requires --as IDENTITY")

    if args.command != "health" and not args.redis_url:
        print(json.dumps({
            "success": False,
            "error": "redis_required",
            "detail": f"'{args.command}' needs a Redis store; set REDIS_URL or pass --redis-url",
        }, indent=2), file=sys.stderr)
        return 1

    config = Config(redis_url=args.redis_url, redis_namespace=args.namespace)
    cli = LinkRegistryCLI(config, identity=args.identity, verbose=args.verbose)

    try:
        await cli.initialize()
        return await cli.run(args.command, args)
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
