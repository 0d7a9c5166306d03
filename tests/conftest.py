import sys
import threading
from concurrent import futures
from pathlib import Path

import grpc
import numpy as np
import pytest
from google.protobuf import empty_pb2

# Add project root to sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from cottontail_examples.client import CottontailClient
from cottontail_examples.client.language import from_literal, to_literal
from cottontail_examples.config import Examples
from cottontail_examples.protocol import pb, rpc

PAGE_SIZE = 10


def _fqn(entity) -> str:
    return f"{entity.schema.name}.{entity.name}"


class FakeCottontail:
    """In-memory stand-in for a Cottontail DB server, enough to run the examples."""

    def __init__(self):
        self.lock = threading.Lock()
        self.schemas: set[str] = set()
        self.entities: dict[str, list] = {}
        self.rows: dict[str, list[dict]] = {}
        self.transactions: dict[int, list] = {}
        self.committed: list[int] = []
        self.rolled_back: list[int] = []
        self.insert_metadata: list[int] = []
        self.queries: list = []
        self.fail_inserts_for: set[str] = set()
        self._next_txid = 1

    # DDL

    def create_schema(self, request, context):
        with self.lock:
            if request.schema.name in self.schemas:
                context.abort(grpc.StatusCode.ALREADY_EXISTS, f"Schema {request.schema.name} already exists.")
            self.schemas.add(request.schema.name)
        return pb.QueryResponseMessage()

    def drop_schema(self, request, context):
        name = request.schema.name
        with self.lock:
            if name not in self.schemas:
                context.abort(grpc.StatusCode.NOT_FOUND, f"Schema {name} does not exist.")
            self.schemas.discard(name)
            for fqn in [f for f in self.entities if f.split(".")[0] == name]:
                del self.entities[fqn]
                del self.rows[fqn]
        return pb.QueryResponseMessage()

    def create_entity(self, request, context):
        definition = request.definition
        fqn = _fqn(definition.entity)
        with self.lock:
            if definition.entity.schema.name not in self.schemas:
                context.abort(grpc.StatusCode.NOT_FOUND, f"Schema {definition.entity.schema.name} does not exist.")
            if fqn in self.entities:
                context.abort(grpc.StatusCode.ALREADY_EXISTS, f"Entity {fqn} already exists.")
            self.entities[fqn] = list(definition.columns)
            self.rows[fqn] = []
        return pb.QueryResponseMessage()

    def drop_entity(self, request, context):
        fqn = _fqn(request.entity)
        with self.lock:
            if fqn not in self.entities:
                context.abort(grpc.StatusCode.NOT_FOUND, f"Entity {fqn} does not exist.")
            del self.entities[fqn]
            del self.rows[fqn]
        return pb.QueryResponseMessage()

    # DML

    def _row(self, request, context):
        fqn = _fqn(request.source.scan.entity)
        if fqn not in self.entities:
            context.abort(grpc.StatusCode.NOT_FOUND, f"Entity {fqn} does not exist.")
        if fqn in self.fail_inserts_for:
            context.abort(grpc.StatusCode.INTERNAL, f"Insert into {fqn} failed.")
        row = {element.column.name: element.value for element in request.elements}
        for column in self.entities[fqn]:
            value = row.get(column.name.name)
            if value is None and not column.nullable:
                context.abort(grpc.StatusCode.INVALID_ARGUMENT, f"Column {column.name.name} is not nullable.")
            if column.length and len(from_literal(value)) != column.length:
                context.abort(grpc.StatusCode.INVALID_ARGUMENT, f"Column {column.name.name} has wrong length.")
        return fqn, row

    def insert(self, request, context):
        with self.lock:
            fqn, row = self._row(request, context)
            txid = request.metadata.transactionId
            self.insert_metadata.append(txid)
            if txid:
                if txid not in self.transactions:
                    context.abort(grpc.StatusCode.FAILED_PRECONDITION, f"Transaction {txid} is not active.")
                self.transactions[txid].append((fqn, row))
            else:
                self.rows[fqn].append(row)
        return pb.QueryResponseMessage()

    def insert_stream(self, request_iterator, context):
        for request in request_iterator:
            with self.lock:
                fqn, row = self._row(request, context)
                self.rows[fqn].append(row)
            yield pb.InsertStatus(success=True, timestamp=len(self.rows[fqn]))

    # TXN

    def begin(self, request, context):
        with self.lock:
            txid = self._next_txid
            self._next_txid += 1
            self.transactions[txid] = []
        return pb.TransactionId(value=txid)

    def commit(self, request, context):
        with self.lock:
            pending = self.transactions.pop(request.value, None)
            if pending is None:
                context.abort(grpc.StatusCode.FAILED_PRECONDITION, f"Transaction {request.value} is not active.")
            for fqn, row in pending:
                self.rows[fqn].append(row)
            self.committed.append(request.value)
        return empty_pb2.Empty()

    def rollback(self, request, context):
        with self.lock:
            self.transactions.pop(request.value, None)
            self.rolled_back.append(request.value)
        return empty_pb2.Empty()

    # DQL

    def query(self, request, context):
        query = request.query
        fqn = _fqn(query.source.scan.entity)
        with self.lock:
            if fqn not in self.entities:
                context.abort(grpc.StatusCode.NOT_FOUND, f"Entity {fqn} does not exist.")
            self.queries.append(request)
            rows = [dict(row) for row in self.rows[fqn]]
            columns = [column.name.name for column in self.entities[fqn]]

        if query.HasField("where"):
            rows = [row for row in rows if self._matches(query.where, row)]

        if query.HasField("knn"):
            vec = from_literal(pb.Literal(vectorData=query.knn.query))
            column = query.knn.attribute.name
            for row in rows:
                feature = from_literal(row[column])
                row["distance"] = to_literal(float(np.linalg.norm(feature - vec)))
            rows.sort(key=lambda r: r["distance"].doubleData)
            rows = rows[: query.knn.k]
            columns = columns + ["distance"]

        rows = rows[query.skip:]
        if query.limit:
            rows = rows[: query.limit]

        projected = [e.column.name for e in query.projection.elements]
        if projected and projected != ["*"]:
            columns = projected

        header = [pb.ColumnDefinition(name=pb.ColumnName(name=name)) for name in columns]
        if not rows:
            yield pb.QueryResponseMessage(columns=header)
            return
        for start in range(0, len(rows), PAGE_SIZE):
            page = pb.QueryResponseMessage(columns=header)
            for row in rows[start:start + PAGE_SIZE]:
                page.tuples.append(pb.QueryResponseMessage.Tuple(data=[row[name] for name in columns]))
            yield page

    def _matches(self, where, row) -> bool:
        if where.HasField("compound"):
            left = self._matches(where.compound.left, row)
            right = self._matches(where.compound.right, row)
            matched = left and right if where.compound.op == pb.ConnectionOperator.Value("AND") else left or right
            return matched
        atomic = where.atomic
        value = from_literal(row[atomic.left.name])
        literals = [from_literal(lit) for lit in atomic.right.literals.literal]
        if atomic.op == pb.ComparisonOperator.Value("IN"):
            matched = value in literals
        elif atomic.op == pb.ComparisonOperator.Value("EQUAL"):
            matched = value == literals[0]
        else:
            raise NotImplementedError(atomic.op)
        return matched != atomic.negated

    def ping(self, request, context):
        return empty_pb2.Empty()


class _DDL(rpc.DDLServicer):
    def __init__(self, state):
        self.CreateSchema = state.create_schema
        self.DropSchema = state.drop_schema
        self.CreateEntity = state.create_entity
        self.DropEntity = state.drop_entity


class _DML(rpc.DMLServicer):
    def __init__(self, state):
        self.Insert = state.insert
        self.InsertStream = state.insert_stream


class _DQL(rpc.DQLServicer):
    def __init__(self, state):
        self.Query = state.query
        self.Ping = state.ping


class _TXN(rpc.TXNServicer):
    def __init__(self, state):
        self.Begin = state.begin
        self.Commit = state.commit
        self.Rollback = state.rollback


@pytest.fixture
def cottontail_server():
    state = FakeCottontail()
    server = grpc.server(futures.ThreadPoolExecutor(max_workers=4))
    rpc.add_DDLServicer_to_server(_DDL(state), server)
    rpc.add_DMLServicer_to_server(_DML(state), server)
    rpc.add_DQLServicer_to_server(_DQL(state), server)
    rpc.add_TXNServicer_to_server(_TXN(state), server)
    port = server.add_insecure_port("127.0.0.1:0")
    server.start()
    yield state, port
    server.stop(None)


@pytest.fixture
def server_state(cottontail_server):
    return cottontail_server[0]


@pytest.fixture
def client(cottontail_server):
    _, port = cottontail_server
    c = CottontailClient.connect("127.0.0.1", port, timeout=10)
    yield c
    c.close()


@pytest.fixture
def settings():
    """Default example settings: bundled data, three entities."""
    return Examples({})


@pytest.fixture
def tiny_settings(tmp_path):
    """Single 4-dimensional entity backed by a small data file in ``tmp_path``."""
    lines = [
        "a\tx\t0\t0 0 0 0",
        "b\tx\t0\t1 1 1 1",
        "",
        "c\tx\t0\t5 5 5 5",
    ]
    (tmp_path / "tiny").write_text("\n".join(lines) + "\n")
    return Examples(
        {
            "examples": {
                "schema": "test",
                "data_dir": str(tmp_path),
                "entities": [{"name": "tiny", "dimension": 4}],
                "where_ids": ["b", "zzz"],
                "select_limit": 2,
                "knn_k": 2,
            }
        }
    )
