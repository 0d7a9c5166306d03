"""Schema and entity definition examples."""

from __future__ import annotations

import logging

from cottontail_examples.client import CottontailClient, CreateEntity, get_client
from cottontail_examples.config import Examples, examples

logger = logging.getLogger(__name__)


def initialize_schema(
    client: CottontailClient | None = None, settings: Examples | None = None
) -> None:
    """Create the example schema."""
    client = client or get_client()
    settings = settings or examples

    client.create_schema(settings.SCHEMA_NAME)
    logger.info("Schema %s created successfully.", settings.SCHEMA_NAME)


def drop_schema(
    client: CottontailClient | None = None, settings: Examples | None = None
) -> None:
    """Drop the example schema and every entity it contains."""
    client = client or get_client()
    settings = settings or examples

    client.drop_schema(settings.SCHEMA_NAME)
    logger.info("Schema %s dropped successfully.", settings.SCHEMA_NAME)


def initialize_entities(
    client: CottontailClient | None = None, settings: Examples | None = None
) -> None:
    """
    Create one entity per configured ``(name, dimension)`` pair.

    Every entity has two columns: ``id`` (STRING) and ``feature`` (FLOAT_VEC
    of the entity's dimension), neither nullable.
    """
    client = client or get_client()
    settings = settings or examples

    for name, dimension in settings.ENTITIES:
        statement = (
            CreateEntity(settings.qualified(name))
            .column("id", "STRING", nullable=False)
            .column("feature", "FLOAT_VEC", length=dimension, nullable=False)
        )
        client.create_entity(statement)
        logger.info("Entity %s created successfully.", settings.qualified(name))
