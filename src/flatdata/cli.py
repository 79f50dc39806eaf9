"""
Command-line interface for flatdata.

Usage:
    flatdata --path data list
    flatdata --path data query project --filter some_value '<' 10
    flatdata --path data query user --record mr_admin --property managed_projects
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Optional

import orjson
import yaml

from flatdata.core.config import Settings
from flatdata.core.exceptions import FlatDataError
from flatdata.core.logging import setup_logging
from flatdata.service import create_service

logger = logging.getLogger("flatdata")


def _build_settings(args: argparse.Namespace) -> Settings:
    """Settings from the environment, overridden by command-line flags."""
    overrides: dict[str, Any] = {}
    if args.path:
        overrides["repositories_path"] = args.path
    if args.loader:
        overrides["loader"] = args.loader
    if args.cache:
        overrides["cache_backend"] = args.cache
    return Settings(**overrides)


def _parse_value(raw: str) -> Any:
    """Read a filter value as a YAML scalar (``10`` -> int, ``'10'`` -> str)."""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _dump(result: Any) -> str:
    return orjson.dumps(
        result, option=orjson.OPT_INDENT_2 | orjson.OPT_NON_STR_KEYS
    ).decode()


def cmd_list(args: argparse.Namespace, settings: Settings) -> int:
    """Print available repository names."""
    service = create_service(settings)
    for name in service.repository_names():
        print(name)
    return 0


def cmd_query(args: argparse.Namespace, settings: Settings) -> int:
    """Run one query chain and print its result as JSON."""
    service = create_service(settings)

    cursor = service.get_repository(args.repository)
    if args.filter:
        field, operator, value = args.filter
        cursor = cursor.filter(field, operator, _parse_value(value))
    if args.record is not None:
        cursor = cursor.get_record(args.record)
    for prop in args.property or []:
        cursor = cursor.get_property(prop)

    print(_dump(cursor.execute()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="flatdata",
        description="Query relation-aware flat data repositories",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--log-file", type=str, help="Log file path")
    parser.add_argument("--path", help="Repositories directory (default: FLATDATA_REPOSITORIES_PATH)")
    parser.add_argument("--loader", choices=["yaml", "json"], help="Repository file format")
    parser.add_argument("--cache", choices=["none", "memory", "file"], help="Cache backend")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- list ---
    p_list = subparsers.add_parser("list", help="List repositories")
    p_list.set_defaults(func=cmd_list)

    # --- query ---
    p_query = subparsers.add_parser("query", help="Query a repository")
    p_query.add_argument("repository", help="Repository name")
    p_query.add_argument("--record", "-r", help="Record id")
    p_query.add_argument("--property", "-p", nargs="+", help="Property path, outermost first")
    p_query.add_argument(
        "--filter", "-f", nargs=3, metavar=("FIELD", "OP", "VALUE"),
        help="Filter records, e.g. --filter some_value '<' 10",
    )
    p_query.set_defaults(func=cmd_query)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    settings = _build_settings(args)
    setup_logging(debug=args.verbose or settings.debug, log_file=args.log_file)

    try:
        return args.func(args, settings)
    except FlatDataError as e:
        logger.error("%s", e.message)
        return 1


if __name__ == "__main__":
    sys.exit(main())
