"""Runs the example procedures in order."""

from __future__ import annotations

import logging
from pathlib import Path

import grpc

from cottontail_examples.client import CottontailClient, get_client
from cottontail_examples.config import Examples, examples

from .ddl import drop_schema, initialize_entities, initialize_schema
from .dml import import_data, import_data_streaming
from .dql import (
    execute_nearest_neighbor_query,
    execute_select_with_where,
    execute_simple_select,
)

logger = logging.getLogger(__name__)

TOTAL_STEPS = 6


def _log_stage(stage_idx: int, message: str) -> None:
    logger.info("[%d/%d] %s", stage_idx, TOTAL_STEPS, message)


def run_examples(
    client: CottontailClient | None = None,
    settings: Examples | None = None,
    data_dir: str | Path | None = None,
    drop_first: bool = False,
    streaming: bool = False,
) -> None:
    """
    Full example sequence.

    Steps:
        1. Create the schema.
        2. Create the entities.
        3. Import the feature files.
        4. Simple SELECT with LIMIT.
        5. SELECT with WHERE clause.
        6. kNN query.

    ``drop_first`` drops an existing schema before step 1 so the sequence can
    be re-run against the same server.
    """
    client = client or get_client()
    settings = settings or examples

    if drop_first:
        try:
            drop_schema(client, settings)
        except grpc.RpcError as e:
            if e.code() != grpc.StatusCode.NOT_FOUND:
                raise
            logger.info("Schema %s does not exist; nothing to drop.", settings.SCHEMA_NAME)

    _log_stage(1, "Initializing schema")
    initialize_schema(client, settings)

    _log_stage(2, "Initializing entities")
    initialize_entities(client, settings)

    _log_stage(3, "Importing data")
    if streaming:
        import_data_streaming(client, settings, data_dir)
    else:
        import_data(client, settings, data_dir)

    _log_stage(4, "Executing simple select")
    execute_simple_select(client, settings)

    _log_stage(5, "Executing select with WHERE clause")
    execute_select_with_where(client, settings)

    _log_stage(6, "Executing nearest neighbour query")
    execute_nearest_neighbor_query(client, settings)
