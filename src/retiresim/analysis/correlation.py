"""Cross-asset correlation model.

A rule table keyed by unordered pairs of asset types, with equities refined by
regional sub-bucket. Coefficients are design assumptions, not estimates from
market data.
"""

import logging
from typing import Sequence

import numpy as np

from retiresim.analysis.catalog import AssetType

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

US = "us"
INTL = "intl"
EMERGING = "emerging"
SMALL_CAP = "small_cap"

EQUITY_BUCKETS: dict[str, str] = {
    "SPY": US,
    "QQQ": US,
    "DIA": US,
    "VOO": US,
    "VTI": US,
    "VEA": INTL,
    "AVDV": INTL,
    "VWO": EMERGING,
    "IDX": EMERGING,
    "AVUV": SMALL_CAP,
}

EQUITY_BUCKET_CORRELATIONS: dict[frozenset[str], float] = {
    frozenset({US}): 0.88,
    frozenset({US, INTL}): 0.65,
    frozenset({US, EMERGING}): 0.55,
    frozenset({INTL, EMERGING}): 0.68,
    frozenset({EMERGING}): 0.75,
}
EQUITY_FALLBACK_CORRELATION = 0.70

TYPE_CORRELATIONS: dict[frozenset[AssetType], float] = {
    frozenset({AssetType.CRYPTO}): 0.92,
    frozenset({AssetType.METAL}): 0.82,
    frozenset({AssetType.CRYPTO, AssetType.EQUITY}): 0.40,
    frozenset({AssetType.CRYPTO, AssetType.METAL}): -0.10,
    frozenset({AssetType.METAL, AssetType.EQUITY}): 0.05,
}
DEFAULT_CORRELATION = 0.30


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def get_correlation(
    symbol_a: str,
    symbol_b: str,
    type_a: AssetType | str,
    type_b: AssetType | str,
) -> float:
    """Correlation coefficient between two holdings.

    Identical symbols are perfectly correlated. The result does not depend on
    argument order.
    """
    if symbol_a == symbol_b:
        return 1.0

    type_a = AssetType(type_a)
    type_b = AssetType(type_b)

    if type_a == AssetType.EQUITY and type_b == AssetType.EQUITY:
        return _equity_correlation(symbol_a, symbol_b)

    return TYPE_CORRELATIONS.get(frozenset({type_a, type_b}), DEFAULT_CORRELATION)


def _equity_correlation(symbol_a: str, symbol_b: str) -> float:
    bucket_a = EQUITY_BUCKETS.get(symbol_a)
    bucket_b = EQUITY_BUCKETS.get(symbol_b)
    if bucket_a is None or bucket_b is None:
        return EQUITY_FALLBACK_CORRELATION
    return EQUITY_BUCKET_CORRELATIONS.get(
        frozenset({bucket_a, bucket_b}), EQUITY_FALLBACK_CORRELATION
    )


def build_correlation_matrix(
    symbols: Sequence[str],
    asset_types: Sequence[AssetType],
    enabled: bool,
) -> np.ndarray:
    """n×n correlation matrix for a portfolio.

    The diagonal is always 1. With correlation modelling disabled every
    off-diagonal entry is 0 (independent assets).
    """
    n = len(symbols)
    matrix = np.eye(n)
    if not enabled:
        return matrix

    for i in range(n):
        for j in range(i + 1, n):
            rho = get_correlation(symbols[i], symbols[j], asset_types[i], asset_types[j])
            matrix[i, j] = rho
            matrix[j, i] = rho

    logger.debug("Correlation matrix for %s:\n%s", list(symbols), matrix)
    return matrix
