#!/usr/bin/env python3

# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from lineagecache.app import resolve_column_lineage
from lineagecache.config import ConfigurationError, configure_logging
from lineagecache.domain.column_lineage import encode_column_lineage
from lineagecache.domain.errors import LineageCacheError
from lineagecache.domain.model import EntityKey, InvalidEntityKeyError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from lineagecache.domain.model import LineageCache, ResolvedEntity


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve column-level lineage for assets")
    parser.add_argument(
        "asset_keys",
        nargs="+",
        metavar="ASSET_KEY",
        help="Asset key with path segments separated by '/', e.g. warehouse/orders",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format (default: %(default)s)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(list(argv))


def _render_text(keys: Sequence[EntityKey], cache: LineageCache) -> str:
    lines: list[str] = []
    for key in keys:
        entity = cache.get(key.to_graph_id())
        if entity is None:
            lines.append(f"{key}: unresolved")
            continue
        if not entity:
            lines.append(f"{key}: no column lineage")
            continue
        lines.append(f"{key}:")
        for column in entity.values():
            column_type = column.type or "?"
            upstream = ", ".join(
                f"{upstream.entity_key}.{upstream.column_name}" for upstream in column.upstream
            )
            lines.append(f"  {column.name} ({column_type}) <- {upstream or '-'}")
    return "\n".join(lines)


def _entity_to_json(entity: ResolvedEntity) -> dict[str, object]:
    return {
        "lineage": json.loads(encode_column_lineage(entity)),
        "columns": {
            column.name: {
                "type": column.type,
                "description": column.description,
                "as_of": column.as_of,
            }
            for column in entity.values()
        },
    }


def _render_json(keys: Sequence[EntityKey], cache: LineageCache) -> str:
    output: dict[str, object] = {}
    for key in keys:
        entity = cache.get(key.to_graph_id())
        output[key.to_user_string()] = None if entity is None else _entity_to_json(entity)
    return json.dumps(output, indent=2)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        parsed_args = _parse_args(argv if argv is not None else sys.argv[1:])
        keys = [EntityKey.from_user_string(value) for value in parsed_args.asset_keys]
    except InvalidEntityKeyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        cache = resolve_column_lineage(keys)
    except (ConfigurationError, LineageCacheError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    if parsed_args.format == "json":
        print(_render_json(keys, cache))
    else:
        print(_render_text(keys, cache))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
