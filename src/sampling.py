from __future__ import annotations

from typing import Optional, Union

import numpy as np

INTEGER_QUANTUM = 1
RATE_QUANTUM = 1e-8

# Absorbs float error when (hi - lo) / quantum sits just below a whole step.
_STEP_TOLERANCE = 1e-6

Number = Union[int, float]


def quantized_steps(lo: Number, hi: Number, quantum: Number) -> int:
    if quantum <= 0:
        raise ValueError("quantum must be positive.")
    if hi < lo:
        raise ValueError(f"Empty interval [{lo}, {hi}].")
    return int(np.floor((hi - lo) / quantum + _STEP_TOLERANCE))


def draw_many(
    lo: Number,
    hi: Number,
    quantum: Number,
    size: int,
    rng: Optional[np.random.Generator],
) -> np.ndarray:
    """
    Draw `size` values of the form lo + quantum * k, k uniform on
    {0, ..., floor((hi - lo) / quantum)}.

    Integer quanta on integer bounds give an integer array. A degenerate
    interval returns `lo` repeated without touching the generator.
    """
    steps = quantized_steps(lo, hi, quantum)
    as_int = all(isinstance(v, (int, np.integer)) for v in (lo, hi, quantum))

    if steps == 0:
        return np.full(size, lo, dtype=np.int64 if as_int else float)
    if rng is None:
        raise ValueError("A random generator is required to sample a non-degenerate interval.")

    k = rng.integers(0, steps + 1, size=size)
    if as_int:
        return (lo + quantum * k).astype(np.int64)
    return np.minimum(lo + quantum * k.astype(float), hi)


def draw(lo: Number, hi: Number, quantum: Number, rng: Optional[np.random.Generator]) -> Number:
    value = draw_many(lo, hi, quantum, 1, rng)[0]
    return int(value) if np.issubdtype(type(value), np.integer) else float(value)
