"""CLI entry point for running ad-hoc searches against the configured engine."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point for solr-scout."""
    parser = argparse.ArgumentParser(
        prog="solrscout",
        description="solr-scout — Query builder and result shaping for Solr",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"solr-scout {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    search = subparsers.add_parser("search", help="Run a search and print one page of raw results as JSON")
    search.add_argument("query", nargs="?", default="", help="Free-text query (empty matches everything)")
    search.add_argument("--index", type=str, default=None, help="Collection to search (overrides config)")
    search.add_argument(
        "--where", action="append", default=[], metavar="FIELD=VALUE", help="Exact-match constraint"
    )
    search.add_argument(
        "--filter",
        action="append",
        default=[],
        metavar="FIELD=V1[,V2...]",
        help="Filter group; comma-separated values are OR-ed",
    )
    search.add_argument("--facet", action="append", default=[], metavar="FIELD", help="Facet field")
    search.add_argument(
        "--sort", type=str, default=None, metavar="'COLUMN DIR'", help="Native sort, e.g. 'price desc'"
    )
    search.add_argument("--per-page", type=int, default=None, help="Page size")
    search.add_argument("--page", type=int, default=1, help="Page number")
    search.add_argument("--facets-only", action="store_true", help="Print facet counts instead of documents")

    args = parser.parse_args(argv)

    from solrscout.config.settings import Settings
    from solrscout.observability.logging import setup_logging

    if args.config:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        settings = Settings.from_yaml(config_path)
    else:
        settings = Settings()

    if args.log_level:
        settings.observability.log_level = args.log_level
    setup_logging(settings.observability)

    sys.exit(_run_search(args, settings))


def _run_search(args: argparse.Namespace, settings: Any) -> int:
    from solrscout.core.builder import Builder
    from solrscout.engines.base.exceptions import EngineError
    from solrscout.engines.base.registry import EngineRegistry
    from solrscout.models.record import RawDocument

    registry: EngineRegistry | None = None
    try:
        registry = EngineRegistry.from_settings(settings)
        builder = Builder(RawDocument, args.query, engines=registry)
        if args.index:
            builder.within(args.index)
        for field, value in _pairs(args.where, "--where"):
            builder.where(field, value)
        for field, value in _pairs(args.filter, "--filter"):
            values = value.split(",")
            builder.filter(field, values if len(values) > 1 else value)
        for field in args.facet:
            builder.facet(field)
        if args.sort:
            column, _, direction = args.sort.partition(" ")
            builder.sort_by(column, direction or "asc")

        if args.facets_only:
            output: Any = builder.get_facets()
        else:
            output = builder.paginate_raw(per_page=args.per_page, page=args.page).to_dict()
    except EngineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    finally:
        if registry is not None:
            registry.close_all()

    print(json.dumps(output, indent=2, ensure_ascii=False, default=str))
    return 0


def _pairs(items: list[str], option: str) -> list[tuple[str, str]]:
    """Split ``FIELD=VALUE`` arguments."""
    pairs = []
    for item in items:
        field, sep, value = item.partition("=")
        if not sep or not field:
            raise ValueError(f"{option} expects FIELD=VALUE, got '{item}'")
        pairs.append((field, value))
    return pairs


def _get_version() -> str:
    """Get the package version."""
    try:
        from solrscout import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    main()
