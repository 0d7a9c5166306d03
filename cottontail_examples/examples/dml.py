"""
Data import examples
====================

Two ways of bulk loading the bundled feature files:

- :func:`import_data` issues one unary INSERT per record inside an explicit
  transaction per entity and rolls back when anything fails.
- :func:`import_data_streaming` sends every record of an entity over one
  streaming INSERT call and counts the acknowledgements.
"""

from __future__ import annotations

import logging
from contextlib import closing
from pathlib import Path
from typing import Dict, Iterator

import grpc

from cottontail_examples.client import CottontailClient, Insert, get_client
from cottontail_examples.config import Examples, examples
from cottontail_examples.data import feature_path, read_features

logger = logging.getLogger(__name__)


def _inserts(fqn: str, path: Path, dimension: int) -> Iterator[Insert]:
    with closing(read_features(path, dimension)) as records:
        for rid, vec in records:
            yield Insert(fqn).value("id", rid).value("feature", vec)


def import_data(
    client: CottontailClient | None = None,
    settings: Examples | None = None,
    data_dir: str | Path | None = None,
) -> Dict[str, int]:
    """
    Import every entity's feature file, one transaction per entity.

    A failing entity is rolled back and skipped; the remaining entities are
    still imported.

    :returns: Mapping of entity name to number of committed records.
    """
    client = client or get_client()
    settings = settings or examples
    data_dir = Path(data_dir) if data_dir is not None else settings.DATA_DIR

    counts: Dict[str, int] = {}
    for name, dimension in settings.ENTITIES:
        fqn = settings.qualified(name)
        txid = client.begin()
        inserted = 0
        try:
            for statement in _inserts(fqn, feature_path(name, data_dir), dimension):
                client.insert(statement, txid=txid)
                inserted += 1
            client.commit(txid)
        except (grpc.RpcError, OSError, ValueError):
            logger.exception("Exception during data import of %s; rolling back transaction %d", fqn, txid)
            client.rollback(txid)
            counts[name] = 0
            continue

        logger.info("Import of %d features for %s completed! Everything committed...", inserted, name)
        counts[name] = inserted
    return counts


def import_data_streaming(
    client: CottontailClient | None = None,
    settings: Examples | None = None,
    data_dir: str | Path | None = None,
) -> Dict[str, int]:
    """
    Import every entity's feature file over one streaming call per entity.

    No call is opened for an entity whose file is missing. A read error
    part way through ends that entity's stream and is logged.

    :returns: Mapping of entity name to number of acknowledged inserts
        (0 when the stream failed).
    """
    client = client or get_client()
    settings = settings or examples
    data_dir = Path(data_dir) if data_dir is not None else settings.DATA_DIR

    counts: Dict[str, int] = {}
    for name, dimension in settings.ENTITIES:
        fqn = settings.qualified(name)
        path = feature_path(name, data_dir)
        if not path.is_file():
            logger.error("Feature file for %s not found: %s", name, path)
            counts[name] = 0
            continue

        try:
            acknowledged = client.insert_stream(_inserts(fqn, path, dimension))
        except grpc.RpcError as e:
            logger.error("Error occurred while importing features for %s: %s", name, e.details())
            counts[name] = 0
            continue
        except (OSError, ValueError) as e:
            logger.error("Error occurred while reading features for %s: %s", name, e)
            counts[name] = 0
            continue

        logger.info("Import of %d features for %s completed! Everything committed...", acknowledged, name)
        counts[name] = acknowledged
    return counts
