#!/usr/bin/env python3
"""
Vinyl Shop command line.

Usage:
    # Search Discogs
    vinyl-shop search "Miles Davis Kind of Blue" --page 2

    # Import a release as a Shopify product
    vinyl-shop import 249504

    # Allow a release to be imported again after its product was removed
    vinyl-shop forget 249504

    # Run the admin API
    vinyl-shop serve --host 127.0.0.1 --port 8000

Configuration comes from config/settings.yaml and the environment
(DISCOGS_TOKEN, SHOPIFY_SHOP, SHOPIFY_ACCESS_TOKEN, VSD_ADMIN_KEYS, ...).
"""

import argparse
import logging
import sys
from typing import List, Optional

from .common.errors import VinylShopError
from .common.log_config import setup_logging
from .common.settings import load_settings
from .context import ServiceContext

logger = logging.getLogger(__name__)


def cmd_search(context: ServiceContext, args: argparse.Namespace) -> int:
    with context.catalog() as catalog:
        page = catalog.search(args.query, page=args.page, per_page=args.per_page)

    if not page.results:
        print("No results found. Try a different search query.")
        return 0

    for result in page.results:
        details = " | ".join(p for p in (result.year, result.country, result.format, result.label) if p)
        print(f"  {result.id:>10}  {result.title}")
        if details:
            print(f"              {details}")

    pagination = page.pagination
    print(f"\nPage {pagination.page} of {pagination.pages} ({pagination.items} results)")
    return 0


def cmd_import(context: ServiceContext, args: argparse.Namespace) -> int:
    with context.catalog() as catalog:
        result = context.importer(catalog).import_release(args.release_id)

    print(f"Product added: {result.product_id}")
    print(f"  Edit: {result.admin_url}")
    if not result.image_attached:
        print("  (no image attached)")
    return 0


def cmd_forget(context: ServiceContext, args: argparse.Namespace) -> int:
    if context.ledger.forget(args.release_id):
        print(f"Release {args.release_id} removed from the import ledger.")
    else:
        print(f"Release {args.release_id} is not in the import ledger.")
    return 0


def cmd_serve(context: ServiceContext, args: argparse.Namespace) -> int:
    import uvicorn

    from .admin.app import create_app

    if not context.settings.admin_keys:
        logger.warning("No admin keys configured: every admin request will be rejected")

    uvicorn.run(create_app(context), host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vinyl-shop",
        description="Import Discogs releases as Shopify products",
    )
    parser.add_argument("--config", help="Settings file (default: config/settings.yaml)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--quiet", action="store_true", help="Warnings and errors only")
    parser.add_argument("--log-file", help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search Discogs releases")
    search.add_argument("query", help="Search query")
    search.add_argument("--page", type=int, default=1)
    search.add_argument("--per-page", type=int, default=20)
    search.set_defaults(handler=cmd_search)

    import_cmd = subparsers.add_parser("import", help="Import a release as a product")
    import_cmd.add_argument("release_id", type=int, help="Discogs release id")
    import_cmd.set_defaults(handler=cmd_import)

    forget = subparsers.add_parser("forget", help="Clear a release from the import ledger")
    forget.add_argument("release_id", type=int, help="Discogs release id")
    forget.set_defaults(handler=cmd_forget)

    serve = subparsers.add_parser("serve", help="Run the admin API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(handler=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    try:
        context = ServiceContext(load_settings(args.config))
    except VinylShopError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 1

    try:
        return args.handler(context, args)
    except VinylShopError as e:
        print(f"ERROR: {e.message}", file=sys.stderr)
        return 1
    finally:
        context.close()


if __name__ == "__main__":
    sys.exit(main())
