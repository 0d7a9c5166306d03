from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable, Dict

import grpc

from .client import CottontailClient, close_client, set_client
from .config import Cottontail, Examples, load_raw_config
from .examples import (
    drop_schema,
    execute_nearest_neighbor_query,
    execute_select_with_where,
    execute_simple_select,
    import_data,
    import_data_streaming,
    initialize_entities,
    initialize_schema,
    run_examples,
)

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    ivalue = int(value)
    if ivalue <= 0:
        raise argparse.ArgumentTypeError("value must be a positive integer")
    return ivalue


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m cottontail_examples",
        description="Example programs for the Cottontail DB gRPC interface.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config TOML (defaults to config.toml when present).",
    )
    parser.add_argument("--host", type=str, default=None, help="Cottontail DB host (overrides config).")
    parser.add_argument("--port", type=_positive_int, default=None, help="Cottontail DB port (overrides config).")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding one feature file per entity (overrides config).",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>", required=True)

    run_cmd = subparsers.add_parser("run", help="Run every example in order.")
    run_cmd.add_argument(
        "--drop-first",
        action="store_true",
        help="Drop the example schema before re-creating it.",
    )
    run_cmd.add_argument(
        "--streaming",
        action="store_true",
        help="Import data over a streaming INSERT call instead of per-record transactions.",
    )

    subparsers.add_parser("init-schema", help="Create the example schema.")
    subparsers.add_parser("drop-schema", help="Drop the example schema and its entities.")
    subparsers.add_parser("init-entities", help="Create the example entities.")

    import_cmd = subparsers.add_parser("import", help="Import the example feature files.")
    import_cmd.add_argument(
        "--streaming",
        action="store_true",
        help="Use a streaming INSERT call instead of per-record transactions.",
    )

    select_cmd = subparsers.add_parser("select", help="SELECT * with a LIMIT on every entity.")
    select_cmd.add_argument("--limit", type=_positive_int, default=None, help="Rows per entity (overrides config).")

    subparsers.add_parser("where", help="SELECT * with an id IN (...) WHERE clause.")

    knn_cmd = subparsers.add_parser("knn", help="kNN query with a random vector on every entity.")
    knn_cmd.add_argument("--k", type=_positive_int, default=None, help="Number of neighbours (overrides config).")

    return parser


def _resolve_settings(
    args: argparse.Namespace, parser: argparse.ArgumentParser
) -> tuple[Cottontail, Examples]:
    if args.config is not None and not Path(args.config).is_file():
        parser.error(f"Config file {args.config} does not exist.")

    raw = load_raw_config(args.config)
    try:
        connection = Cottontail(raw)
        settings = Examples(raw)
    except (TypeError, ValueError, KeyError) as exc:
        parser.error(f"Invalid configuration: {exc}")

    if args.host:
        connection.HOST = args.host
    if args.port:
        connection.PORT = args.port
    if args.data_dir:
        settings.DATA_DIR = args.data_dir
    if not settings.ENTITIES:
        parser.error("No entities configured. Set examples.entities in config.toml.")
    return connection, settings


def _commands(args: argparse.Namespace) -> Dict[str, Callable[[CottontailClient, Examples], object]]:
    return {
        "run": lambda c, s: run_examples(c, s, drop_first=args.drop_first, streaming=args.streaming),
        "init-schema": initialize_schema,
        "drop-schema": drop_schema,
        "init-entities": initialize_entities,
        "import": lambda c, s: (import_data_streaming if args.streaming else import_data)(c, s),
        "select": lambda c, s: execute_simple_select(c, s, limit=args.limit),
        "where": execute_select_with_where,
        "knn": lambda c, s: execute_nearest_neighbor_query(c, s, k=args.k),
    }


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    connection, settings = _resolve_settings(args, parser)

    client = CottontailClient.connect(connection.HOST, connection.PORT, timeout=connection.TIMEOUT)
    set_client(client)
    try:
        _commands(args)[args.command](client, settings)
    except grpc.RpcError as e:
        logger.error("Command '%s' failed (code=%s): %s", args.command, e.code(), e.details())
        return 1
    finally:
        close_client()
    return 0


__all__ = ["main", "build_parser", "_resolve_settings"]
