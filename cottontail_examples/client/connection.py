"""Module-level Cottontail DB client shared by the example procedures."""

from __future__ import annotations

import threading

from cottontail_examples.config import cottontail

from .client import CottontailClient

_client: CottontailClient | None = None
_client_lock = threading.Lock()


def get_client() -> CottontailClient:
    """Return the shared client, connecting with the configured settings if needed."""

    global _client

    if _client is not None:
        return _client

    with _client_lock:
        if _client is None:
            _client = CottontailClient.connect(
                cottontail.HOST, cottontail.PORT, timeout=cottontail.TIMEOUT
            )
        return _client


def set_client(client: CottontailClient | None) -> None:
    """Replace the shared client (e.g. one built from command-line overrides)."""

    global _client
    with _client_lock:
        _client = client


def close_client() -> None:
    """Close and forget the shared client; a later :func:`get_client` reconnects."""

    global _client
    with _client_lock:
        if _client is not None:
            _client.close()
            _client = None


__all__ = ["get_client", "set_client", "close_client"]
