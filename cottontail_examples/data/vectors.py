"""Random vector generators."""

from __future__ import annotations

from typing import Iterator

import numpy as np

_rng = np.random.default_rng()

_SUPPORTED = {
    np.dtype(np.int32),
    np.dtype(np.int64),
    np.dtype(np.float32),
    np.dtype(np.float64),
}


def random_vector(
    size: int, dtype="float32", rng: np.random.Generator | None = None
) -> np.ndarray:
    """
    Return a random vector of ``size`` elements.

    Floating point vectors are uniform in ``[0, 1)``; integer vectors span the
    full range of their type.
    """
    if size <= 0:
        raise ValueError("size must be greater than zero")
    dt = np.dtype(dtype)
    if dt not in _SUPPORTED:
        raise TypeError(f"Unsupported vector type: {dt}")

    gen = rng or _rng
    if np.issubdtype(dt, np.integer):
        info = np.iinfo(dt)
        return gen.integers(info.min, info.max, size=size, dtype=dt, endpoint=True)
    return gen.random(size, dtype=dt)


def random_vector_sequence(
    size: int,
    items: int | None = None,
    dtype="float32",
    rng: np.random.Generator | None = None,
) -> Iterator[np.ndarray]:
    """Yield ``items`` random vectors (endlessly when ``items`` is ``None``)."""

    left = items
    while left is None or left > 0:
        if left is not None:
            left -= 1
        yield random_vector(size, dtype=dtype, rng=rng)
