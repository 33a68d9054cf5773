#!/usr/bin/env python3
"""CLI for legacy redirects management tasks.

Usage:
    python -m cli <command>

Commands:
    serve        Run the redirect server with uvicorn
    check-index  Build the legacy index and report its size
    resolve      Show where the configured rules send a URL
"""

import argparse
import logging
import sys

from pydantic import ValidationError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def cmd_serve(host: str, port: int) -> int:
    """Run the redirect server."""
    import uvicorn

    uvicorn.run("main:app", host=host, port=port, log_config=None)
    return 0


def cmd_check_index(
    content_dir: str | None, id_field: str | None, posts_dir: str | None
) -> int:
    """Build the legacy index and report the number of entries."""
    from core.config import get_settings
    from services.legacy_index_service import LegacyIndexError, build_legacy_index

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    content_dir = content_dir or settings.legacy_content_dir
    if not content_dir:
        logger.error("No content directory given and LEGACY_CONTENT_DIR is not set")
        return 1

    try:
        index = build_legacy_index(
            content_dir,
            id_field=id_field or settings.legacy_id_field,
            posts_dir=posts_dir or settings.legacy_posts_dir,
        )
    except LegacyIndexError as e:
        logger.error(f"Legacy index build failed: {e}")
        return 1

    logger.info(f"Legacy index OK: {len(index)} entries")
    return 0


def cmd_resolve(url: str) -> int:
    """Print the redirect the configured rules would issue for ``url``."""
    from urllib.parse import unquote, urlsplit

    from core.config import get_settings
    from services.legacy_index_service import LegacyIndexError
    from services.redirect_service import match_rule, resolve_rule, strip_prefix

    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    path = unquote(urlsplit(url).path) or "/"
    prefix = settings.normalized_legacy_prefix
    rule = match_rule(settings.redirect_rules, path)
    legacy_owns_path = settings.legacy_enabled and (
        path == f"/{prefix}" or path.startswith(f"/{prefix}/")
    )

    if legacy_owns_path and (rule is None or len(prefix) > len(rule.prefix)):
        from routes.legacy_redirects import LegacyRedirectHandler

        try:
            handler = LegacyRedirectHandler.from_directory(
                prefix,
                settings.legacy_content_path,
                id_field=settings.legacy_id_field,
                posts_dir=settings.legacy_posts_dir,
            )
        except LegacyIndexError as e:
            logger.error(f"Legacy index build failed: {e}")
            return 1
        permalink = handler.index.resolve(strip_prefix(prefix, path).strip("/"))
        print(f"301 {permalink}" if permalink else "404")
        return 0

    if rule is None:
        print("no match")
        return 1

    print(f"301 {resolve_rule(rule, url)}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Legacy redirects CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve = subparsers.add_parser("serve", help="Run the redirect server")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    check = subparsers.add_parser(
        "check-index",
        help="Build the legacy index and fail on duplicate ids",
    )
    check.add_argument("content_dir", nargs="?", help="Jekyll site root")
    check.add_argument("--id-field", help="Front matter key holding the legacy id")
    check.add_argument("--posts-dir", help="Posts directory name")

    resolve = subparsers.add_parser(
        "resolve",
        help="Show the redirect issued for a URL",
    )
    resolve.add_argument("url")

    args = parser.parse_args()

    if args.command == "serve":
        return cmd_serve(args.host, args.port)
    elif args.command == "check-index":
        return cmd_check_index(args.content_dir, args.id_field, args.posts_dir)
    elif args.command == "resolve":
        return cmd_resolve(args.url)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
