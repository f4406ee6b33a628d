"""Sampling and order-statistic helpers for the Monte Carlo engine.

Pure functions. Randomness always comes from an injected
``numpy.random.Generator`` so runs are reproducible from a seed.
"""

import math
from typing import Sequence

import numpy as np


def sample_standard_normal(
    rng: np.random.Generator,
    mean: float = 0.0,
    std_dev: float = 1.0,
    size: int | tuple[int, ...] | None = None,
) -> float | np.ndarray:
    """Draw from N(mean, std_dev²) with the Box-Muller transform.

    Args:
        rng: Uniform source.
        mean: Location of the distribution.
        std_dev: Scale of the distribution.
        size: Output shape; ``None`` returns a single float.

    Returns:
        A float when ``size`` is None, otherwise an array of ``size``.
    """
    u1 = _open_unit_uniform(rng, size)
    u2 = _open_unit_uniform(rng, size)
    z0 = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
    out = z0 * std_dev + mean
    if size is None:
        return float(out)
    return out


def _open_unit_uniform(
    rng: np.random.Generator, size: int | tuple[int, ...] | None
) -> float | np.ndarray:
    """Uniform draws on (0, 1): exact zeros are redrawn so log() stays finite."""
    if size is None:
        u = 0.0
        while u == 0.0:
            u = rng.random()
        return u

    u = rng.random(size)
    zero = u == 0.0
    while np.any(zero):
        u[zero] = rng.random(int(zero.sum()))
        zero = u == 0.0
    return u


def percentile(samples: Sequence[float] | np.ndarray, p: float) -> float:
    """Linear-interpolation percentile of a non-empty sample.

    The caller's sequence is left untouched; ranking happens on a sorted copy.
    Empty input is a precondition violation.
    """
    ordered = np.sort(np.asarray(samples, dtype=float))
    return float(_interpolate_sorted(ordered, p))


def percentile_by_column(matrix: np.ndarray, p: float) -> np.ndarray:
    """Apply :func:`percentile` independently down each column of ``matrix``."""
    ordered = np.sort(np.asarray(matrix, dtype=float), axis=0)
    return _interpolate_sorted(ordered, p)


def _interpolate_sorted(ordered: np.ndarray, p: float) -> np.ndarray:
    index = (p / 100.0) * (ordered.shape[0] - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return ordered[lower]
    weight = index - lower
    return ordered[lower] * (1.0 - weight) + ordered[upper] * weight
