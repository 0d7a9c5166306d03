"""
Query language
==============

Small fluent builders that turn Python values into Cottontail DB request
messages, so example code reads like the statement it issues::

    Query("cottontail_example.cedd").select("*").limit(3)
    Insert("cottontail_example.cedd").value("id", "abc").value("feature", vec)

Names are fully qualified as ``schema.entity``.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Tuple

import numpy as np

from cottontail_examples.protocol import pb

_OPERATORS = {
    "=": "EQUAL",
    "==": "EQUAL",
    ">": "GREATER",
    "<": "LESS",
    ">=": "GEQUAL",
    "<=": "LEQUAL",
    "IS NULL": "ISNULL",
}


def split_name(fqn: str) -> Tuple[str, str]:
    """Split ``schema.entity`` into its two parts."""
    parts = fqn.split(".")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise ValueError(f"Expected a name of the form 'schema.entity', got '{fqn}'")
    return parts[0].strip(), parts[1].strip()


def schema_name(name: str) -> Any:
    return pb.SchemaName(name=name)


def entity_name(fqn: str) -> Any:
    schema, entity = split_name(fqn)
    return pb.EntityName(schema=pb.SchemaName(name=schema), name=entity)


def column_name(name: str) -> Any:
    return pb.ColumnName(name=name)


def _enum_value(enum, value, label: str) -> int:
    if isinstance(value, str):
        try:
            return enum.Value(value.upper())
        except ValueError as exc:
            raise ValueError(f"Unknown {label} '{value}'") from exc
    return int(value)


def to_vector(values) -> Any:
    """Wrap a one-dimensional array-like in the matching typed vector message."""

    arr = np.asarray(values)
    if arr.ndim != 1:
        raise ValueError(f"Vectors must be one-dimensional, got shape {arr.shape}")

    if arr.dtype == np.bool_:
        return pb.Vector(boolVector=pb.BoolVector(vector=arr.tolist()))
    if np.issubdtype(arr.dtype, np.integer):
        if arr.dtype.itemsize <= 4:
            return pb.Vector(intVector=pb.IntVector(vector=arr.tolist()))
        return pb.Vector(longVector=pb.LongVector(vector=arr.tolist()))
    if arr.dtype == np.float32:
        return pb.Vector(floatVector=pb.FloatVector(vector=arr.tolist()))
    if np.issubdtype(arr.dtype, np.floating):
        return pb.Vector(doubleVector=pb.DoubleVector(vector=arr.astype(np.float64).tolist()))
    raise TypeError(f"Unsupported vector element type: {arr.dtype}")


def to_literal(value: Any) -> Any:
    """Convert a Python (or numpy) value into a ``Literal`` message."""

    if value is None:
        return pb.Literal(nullData=pb.Null())
    if isinstance(value, (bool, np.bool_)):
        return pb.Literal(booleanData=bool(value))
    if isinstance(value, np.int32):
        return pb.Literal(intData=int(value))
    if isinstance(value, (int, np.integer)):
        return pb.Literal(longData=int(value))
    if isinstance(value, np.float32):
        return pb.Literal(floatData=float(value))
    if isinstance(value, (float, np.floating)):
        return pb.Literal(doubleData=float(value))
    if isinstance(value, str):
        return pb.Literal(stringData=value)
    if isinstance(value, (list, tuple, np.ndarray)):
        return pb.Literal(vectorData=to_vector(value))
    raise TypeError(f"Cannot convert value of type {type(value).__name__} to a literal")


def from_literal(literal) -> Any:
    """Inverse of :func:`to_literal`; vectors come back as numpy arrays."""

    kind = literal.WhichOneof("data")
    if kind is None or kind == "nullData":
        return None
    if kind != "vectorData":
        return getattr(literal, kind)

    vector = literal.vectorData
    vkind = vector.WhichOneof("vectorData")
    if vkind is None:
        return None
    dtypes = {
        "floatVector": np.float32,
        "doubleVector": np.float64,
        "intVector": np.int32,
        "longVector": np.int64,
        "boolVector": np.bool_,
    }
    return np.array(getattr(vector, vkind).vector, dtype=dtypes[vkind])


def _with_metadata(message, txid: int | None):
    if txid is not None:
        message.metadata.transactionId = int(txid)
    return message


def _scan(fqn: str) -> Any:
    return pb.From(scan=pb.Scan(entity=entity_name(fqn)))


class Compare:
    """Atomic predicate ``column <operator> values``.

    ``operator`` is a comparison symbol (``=``, ``>=``, ``!=`` ...) or an
    operator name (``IN``, ``BETWEEN``, ``LIKE``, ``ISNULL``).
    """

    def __init__(self, column: str, operator: str, *values: Any, negated: bool = False) -> None:
        op = operator.strip().upper()
        if op in ("!=", "<>"):
            op, negated = "EQUAL", not negated
        op = _OPERATORS.get(op, op)
        self.column = column
        self.operator = _enum_value(pb.ComparisonOperator, op, "comparison operator")
        self.values = values
        self.negated = negated

    def to_where(self) -> Any:
        predicate = pb.AtomicBooleanPredicate(
            left=column_name(self.column),
            negated=self.negated,
            op=self.operator,
            right=pb.AtomicBooleanOperand(
                literals=pb.Literals(literal=[to_literal(v) for v in self.values])
            ),
        )
        return pb.Where(atomic=predicate)


class _Compound:
    _op = "AND"

    def __init__(self, left, right) -> None:
        self.left = left
        self.right = right

    def to_where(self) -> Any:
        return pb.Where(
            compound=pb.CompoundBooleanPredicate(
                op=pb.ConnectionOperator.Value(self._op),
                left=self.left.to_where(),
                right=self.right.to_where(),
            )
        )


class And(_Compound):
    _op = "AND"


class Or(_Compound):
    _op = "OR"


class CreateEntity:
    """``CREATE ENTITY`` statement with a column list."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._entity = entity_name(name)
        self._columns: List[Any] = []

    def column(
        self,
        name: str,
        type: str | int,
        length: int = 0,
        nullable: bool = False,
        engine: str | int = "MAPDB",
    ) -> "CreateEntity":
        self._columns.append(
            pb.ColumnDefinition(
                name=column_name(name),
                type=_enum_value(pb.Type, type, "column type"),
                length=int(length),
                nullable=nullable,
                engine=_enum_value(pb.Engine, engine, "storage engine"),
            )
        )
        return self

    def to_message(self, txid: int | None = None) -> Any:
        definition = pb.EntityDefinition(entity=self._entity, columns=self._columns)
        return _with_metadata(pb.CreateEntityMessage(definition=definition), txid)


class Insert:
    """``INSERT`` of a single tuple."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        self._source = _scan(entity)
        self._elements: List[Any] = []

    def value(self, column: str, value: Any) -> "Insert":
        self._elements.append(
            pb.InsertMessage.InsertElement(column=column_name(column), value=to_literal(value))
        )
        return self

    def values(self, **columns: Any) -> "Insert":
        for column, value in columns.items():
            self.value(column, value)
        return self

    def to_message(self, txid: int | None = None) -> Any:
        message = pb.InsertMessage(source=self._source, elements=self._elements)
        return _with_metadata(message, txid)


class Query:
    """``SELECT`` statement, optionally with a WHERE clause and a kNN predicate."""

    def __init__(self, entity: str) -> None:
        self.entity = entity
        self._query = pb.Query(source=_scan(entity))

    def select(self, *columns: str) -> "Query":
        for column in columns or ("*",):
            self._query.projection.elements.append(
                pb.Projection.ProjectionElement(column=column_name(column))
            )
        return self

    def where(self, predicate) -> "Query":
        self._query.where.CopyFrom(predicate.to_where())
        return self

    def knn(
        self,
        column: str,
        vector: Iterable[float],
        k: int,
        distance: str | int = "L2",
        weight: Iterable[float] | None = None,
    ) -> "Query":
        if k <= 0:
            raise ValueError("k must be greater than zero")
        knn = pb.Knn(
            attribute=column_name(column),
            k=int(k),
            distance=_enum_value(pb.Knn.Distance, distance, "distance"),
            query=to_vector(vector),
        )
        if weight is not None:
            knn.weight.CopyFrom(to_vector(weight))
        self._query.knn.CopyFrom(knn)
        return self

    def limit(self, n: int) -> "Query":
        if n < 0:
            raise ValueError("limit must not be negative")
        self._query.limit = int(n)
        return self

    def skip(self, n: int) -> "Query":
        if n < 0:
            raise ValueError("skip must not be negative")
        self._query.skip = int(n)
        return self

    def to_message(self, txid: int | None = None) -> Any:
        message = pb.QueryMessage()
        message.query.CopyFrom(self._query)
        return _with_metadata(message, txid)


__all__ = [
    "And",
    "Compare",
    "CreateEntity",
    "Insert",
    "Or",
    "Query",
    "column_name",
    "entity_name",
    "from_literal",
    "schema_name",
    "split_name",
    "to_literal",
    "to_vector",
]
