"""Blocking gRPC client for Cottontail DB."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator

import grpc
from google.protobuf import empty_pb2

from cottontail_examples.protocol import pb, rpc

from .language import CreateEntity, Insert, Query, from_literal, schema_name, entity_name

logger = logging.getLogger(__name__)


class CottontailClient:
    """
    Thin wrapper around the DDL, DML, DQL and TXN stubs sharing one channel.

    Every call blocks until the server answers (or ``timeout`` seconds pass,
    when set). Server errors surface as :class:`grpc.RpcError`.
    """

    def __init__(self, channel: grpc.Channel, timeout: float | None = None) -> None:
        self._channel = channel
        self.timeout = timeout
        self._ddl = rpc.DDLStub(channel)
        self._dml = rpc.DMLStub(channel)
        self._dql = rpc.DQLStub(channel)
        self._txn = rpc.TXNStub(channel)

    @classmethod
    def connect(cls, host: str, port: int, timeout: float | None = None) -> "CottontailClient":
        """Open a plaintext channel to ``host:port``."""
        logger.info("Connecting to Cottontail DB at %s:%s", host, port)
        return cls(grpc.insecure_channel(f"{host}:{port}"), timeout=timeout)

    def close(self) -> None:
        self._channel.close()

    def __enter__(self) -> "CottontailClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # DDL

    def create_schema(self, name: str) -> None:
        self._ddl.CreateSchema(pb.CreateSchemaMessage(schema=schema_name(name)), timeout=self.timeout)

    def drop_schema(self, name: str) -> None:
        self._ddl.DropSchema(pb.DropSchemaMessage(schema=schema_name(name)), timeout=self.timeout)

    def create_entity(self, statement: CreateEntity) -> None:
        self._ddl.CreateEntity(statement.to_message(), timeout=self.timeout)

    def drop_entity(self, fqn: str) -> None:
        self._ddl.DropEntity(pb.DropEntityMessage(entity=entity_name(fqn)), timeout=self.timeout)

    # Transactions

    def begin(self) -> int:
        """Start a transaction and return its id."""
        return self._txn.Begin(empty_pb2.Empty(), timeout=self.timeout).value

    def commit(self, txid: int) -> None:
        self._txn.Commit(pb.TransactionId(value=txid), timeout=self.timeout)

    def rollback(self, txid: int) -> None:
        self._txn.Rollback(pb.TransactionId(value=txid), timeout=self.timeout)

    # DML

    def insert(self, statement: Insert, txid: int | None = None) -> None:
        self._dml.Insert(statement.to_message(txid), timeout=self.timeout)

    def insert_stream(self, statements: Iterable[Insert], txid: int | None = None) -> int:
        """
        Send ``statements`` over a single streaming call.

        An exception raised while producing ``statements`` (a bad input file,
        say) is re-raised here instead of the generic cancellation the
        channel reports for it. ``statements`` is closed before returning.

        :returns: Number of insert statuses acknowledged by the server.
        """
        source = iter(statements)
        failure: list[Exception] = []

        def requests() -> Iterator[Any]:
            try:
                for statement in source:
                    yield statement.to_message(txid)
            except Exception as exc:
                failure.append(exc)
                raise

        outgoing = requests()
        acknowledged = 0
        try:
            for _status in self._dml.InsertStream(outgoing, timeout=self.timeout):
                acknowledged += 1
        except grpc.RpcError as e:
            if failure:
                raise failure[0] from e
            raise
        finally:
            _close_requests(outgoing)
            _close_requests(source)

        if failure:
            raise failure[0]
        return acknowledged

    # DQL

    def query(self, statement: Query, txid: int | None = None) -> Iterator[Dict[str, Any]]:
        """Run ``statement`` and yield each result tuple as ``{column: value}``."""
        for page in self._dql.Query(statement.to_message(txid), timeout=self.timeout):
            names = [column.name.name for column in page.columns]
            for row in page.tuples:
                keys = names if len(names) == len(row.data) else [f"column{i}" for i in range(len(row.data))]
                yield {key: from_literal(value) for key, value in zip(keys, row.data)}

    def ping(self) -> bool:
        """Return ``True`` when the server answers a ping."""
        try:
            self._dql.Ping(empty_pb2.Empty(), timeout=self.timeout)
        except grpc.RpcError as e:
            logger.warning("Ping failed (code=%s): %s", e.code(), e.details())
            return False
        return True


def _close_requests(requests) -> None:
    """Close a request generator the channel may have left suspended."""

    close = getattr(requests, "close", None)
    if close is None:
        return
    try:
        close()
    except ValueError:
        # Still being advanced by the channel's request thread.
        logger.debug("Request iterator %r still running; leaving it to the channel", requests)


__all__ = ["CottontailClient"]
