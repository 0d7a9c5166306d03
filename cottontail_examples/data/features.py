"""
Feature file reader
===================

Each entity's data lives in a file named after the entity. One record per
line, tab separated: column 0 is the record id, column 3 the feature vector
as space-separated floats. The columns in between are not used.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Tuple

import numpy as np

logger = logging.getLogger(__name__)

ID_COLUMN = 0
FEATURE_COLUMN = 3


def feature_path(entity: str, data_dir: str | Path) -> Path:
    """Return the path of the feature file for ``entity``."""
    return Path(data_dir) / entity


def parse_feature_line(line: str, dimension: int | None = None) -> Tuple[str, np.ndarray]:
    """
    Parse one record into ``(id, vector)``.

    :param line: Raw tab-separated line (trailing newline allowed).
    :param dimension: Expected vector length; ``None`` skips the check.
    :returns: The id and a ``float32`` vector.
    :raises ValueError: On missing columns, unparsable floats or a length mismatch.
    """
    split = line.rstrip("\r\n").split("\t")
    if len(split) <= FEATURE_COLUMN:
        raise ValueError(
            f"Expected at least {FEATURE_COLUMN + 1} tab-separated columns, got {len(split)}"
        )

    vec = np.array(split[FEATURE_COLUMN].split(), dtype=np.float32)
    if dimension is not None and vec.shape[0] != dimension:
        raise ValueError(
            f"Feature of '{split[ID_COLUMN]}' has dimension {vec.shape[0]}, expected {dimension}"
        )
    return split[ID_COLUMN], vec


def read_features(path: str | Path, dimension: int | None = None) -> Iterator[Tuple[str, np.ndarray]]:
    """Lazily yield ``(id, vector)`` for every non-blank line of ``path``."""

    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        for lineno, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                yield parse_feature_line(line, dimension)
            except ValueError as exc:
                raise ValueError(f"{path}:{lineno}: {exc}") from exc
