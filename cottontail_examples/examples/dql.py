"""
Query examples
==============

Three flavours of SELECT against every example entity:

- star projection with a LIMIT
- star projection filtered by an ``id IN (...)`` predicate
- kNN on the ``feature`` column with a random query vector

Each function logs the tuples it receives and returns them per entity.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from cottontail_examples.client import Compare, CottontailClient, Query, get_client
from cottontail_examples.config import Examples, examples
from cottontail_examples.data import random_vector

logger = logging.getLogger(__name__)

Results = Dict[str, List[Dict[str, Any]]]


def _collect(client: CottontailClient, query: Query, header: str) -> List[Dict[str, Any]]:
    rows = list(client.query(query))
    logger.info(header)
    for row in rows:
        logger.info("%s", row)
    return rows


def execute_simple_select(
    client: CottontailClient | None = None,
    settings: Examples | None = None,
    limit: int | None = None,
) -> Results:
    """Select and log the top ``limit`` (default 3) entries of each entity."""
    client = client or get_client()
    settings = settings or examples
    limit = settings.SELECT_LIMIT if limit is None else limit

    results: Results = {}
    for name, _dimension in settings.ENTITIES:
        query = Query(settings.qualified(name)).select("*").limit(limit)
        results[name] = _collect(client, query, f"Results of query for entity '{name}':")
    return results


def execute_select_with_where(
    client: CottontailClient | None = None,
    settings: Examples | None = None,
) -> Results:
    """Select the entries whose ``id`` is one of the configured ids; one match per entity."""
    client = client or get_client()
    settings = settings or examples

    results: Results = {}
    for name, _dimension in settings.ENTITIES:
        query = (
            Query(settings.qualified(name))
            .select("*")
            .where(Compare("id", "IN", *settings.WHERE_IDS))
        )
        results[name] = _collect(client, query, f"Results of query for entity '{name}':")
    return results


def execute_nearest_neighbor_query(
    client: CottontailClient | None = None,
    settings: Examples | None = None,
    k: int | None = None,
) -> Results:
    """
    Run a kNN query on the ``feature`` column of each entity.

    The query vector is random with the entity's dimension; ``id`` and the
    computed ``distance`` are projected.
    """
    client = client or get_client()
    settings = settings or examples
    k = settings.KNN_K if k is None else k

    results: Results = {}
    for name, dimension in settings.ENTITIES:
        query = (
            Query(settings.qualified(name))
            .select("id", "distance")
            .knn("feature", random_vector(dimension), k=k, distance=settings.KNN_DISTANCE)
        )
        header = f"Results of kNN query for entity '{name}' (k = {k}, column = 'feature'):"
        results[name] = _collect(client, query, header)
    return results
