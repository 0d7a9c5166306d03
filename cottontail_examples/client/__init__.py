"""
Cottontail DB client layer.

``CottontailClient`` wraps the generated gRPC stubs; ``language`` builds the
request messages; ``connection`` holds the shared module-level client used
by the example procedures.
"""

from .client import CottontailClient
from .connection import close_client, get_client, set_client
from .language import And, Compare, CreateEntity, Insert, Or, Query

__all__ = [
    "And",
    "Compare",
    "CottontailClient",
    "CreateEntity",
    "Insert",
    "Or",
    "Query",
    "close_client",
    "get_client",
    "set_client",
]
