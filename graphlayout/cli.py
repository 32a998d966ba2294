"""
Layout CLI
==========

Lays out a graph document and prints the result as JSON.

USAGE:
    python -m graphlayout.cli data/graphdata.json
    python -m graphlayout.cli https://example.com/graph.json --direction LR --strict

EXIT CODES:
    0 success, 1 fetch error, 2 usage error, 3 parse error,
    4 integrity error (strict mode), 5 invalid configuration
"""
import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .contracts.base import ConfigError, IntegrityError
from .contracts.layout import PARTITION_KEYS, LayoutConfig, RankDirection
from .engine import GraphLayoutPipeline
from .ingestion import FetchError, GraphDocumentLoader, ParseError
from .observability import LayoutDiagnostics
from .api.mapper import map_result_to_dto

EXIT_OK = 0
EXIT_FETCH_ERROR = 1
EXIT_PARSE_ERROR = 3
EXIT_INTEGRITY_ERROR = 4
EXIT_CONFIG_ERROR = 5


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphlayout",
        description="Compute a layered layout for a {nodes, edges} JSON document."
    )
    parser.add_argument("source", help="File path or http(s) URL of the document")
    parser.add_argument(
        "--direction", choices=[d.value for d in RankDirection],
        help="Rank direction (default: TB, or GRAPHLAYOUT_RANK_DIRECTION)"
    )
    parser.add_argument(
        "--partition-key", choices=sorted(PARTITION_KEYS),
        help="Edge endpoint used as cluster anchor (default: source)"
    )
    parser.add_argument("--strict", action="store_true", help="Fail on dangling or duplicate ids")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (0 for compact)")
    parser.add_argument("--timeout", type=float, default=30.0, help="Fetch timeout in seconds")
    parser.add_argument("--report", action="store_true", help="Print diagnostics summary to stderr")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def resolve_config(args: argparse.Namespace) -> LayoutConfig:
    config = LayoutConfig.from_env()
    overrides = {}
    if args.direction:
        overrides["rank_direction"] = RankDirection(args.direction)
    if args.partition_key:
        overrides["partition_key"] = PARTITION_KEYS[args.partition_key]
    if args.strict:
        overrides["strict_integrity"] = True
    return replace(config, **overrides) if overrides else config


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        config = resolve_config(args)
    except ConfigError as e:
        print(f"[!] Invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    loader = GraphDocumentLoader(timeout=args.timeout)
    try:
        document = loader.load_sync(args.source).unwrap()
    except FetchError as e:
        print(f"[!] Could not fetch {args.source}: {e}", file=sys.stderr)
        return EXIT_FETCH_ERROR
    except ParseError as e:
        print(f"[!] Corrupt document {args.source}: {e}", file=sys.stderr)
        return EXIT_PARSE_ERROR

    diagnostics = LayoutDiagnostics()
    try:
        result = GraphLayoutPipeline(config, diagnostics).run_document(document)
    except IntegrityError as e:
        print(f"[!] Integrity error: {e}", file=sys.stderr)
        return EXIT_INTEGRITY_ERROR

    print(json.dumps(map_result_to_dto(result), indent=args.indent or None))

    if args.report:
        print(json.dumps(diagnostics.report(), indent=2), file=sys.stderr)

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
