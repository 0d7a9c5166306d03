"""
Example procedures against a Cottontail DB server.

Each procedure is a short linear sequence: build a request, call the server,
log the response. ``runner.run_examples`` chains them in the canonical order
(schema, entities, import, simple select, select with WHERE, kNN).
"""

from .ddl import drop_schema, initialize_entities, initialize_schema
from .dml import import_data, import_data_streaming
from .dql import (
    execute_nearest_neighbor_query,
    execute_select_with_where,
    execute_simple_select,
)
from .runner import run_examples

__all__ = [
    "drop_schema",
    "execute_nearest_neighbor_query",
    "execute_select_with_where",
    "execute_simple_select",
    "import_data",
    "import_data_streaming",
    "initialize_entities",
    "initialize_schema",
    "run_examples",
]
