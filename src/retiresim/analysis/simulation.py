"""Monte Carlo retirement simulation orchestrator.

Normalizes the portfolio, derives its aggregate return and volatility, runs
independent trial blocks (inline or on a process pool) and aggregates the
paths into percentile bands and risk metrics.
"""

import logging
import math
import numbers
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from retiresim.analysis.catalog import CATALOG_BY_SYMBOL, AssetType, CatalogEntry, resolve_asset_type
from retiresim.analysis.correlation import build_correlation_matrix
from retiresim.analysis.portfolio import Asset
from retiresim.analysis.sim_models import (
    CancellationToken,
    InvalidParameters,
    PortfolioStats,
    SimulationCancelled,
    SimulationParameters,
    SimulationResult,
)
from retiresim.analysis.sim_models.gbm import simulate_paths
from retiresim.analysis.stats import percentile, percentile_by_column

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CHUNK_SIZE = 2500
RUIN_THRESHOLD = 0.01           # currency units
MAX_SEED = 2**53                # drawn seeds stay exact as JSON numbers
MEDIAN_PCT = 50
TOP_PCT = 95
BOTTOM_PCT = 5


@dataclass(frozen=True)
class NormalizedAsset:
    symbol: str
    normalized_weight: float
    expected_return: float
    volatility: float
    asset_type: AssetType


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def run_monte_carlo(
    portfolio: Sequence[Asset],
    params: SimulationParameters,
    catalog: dict[str, CatalogEntry] = CATALOG_BY_SYMBOL,
    seed: int | None = None,
    max_workers: int = 1,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    cancel_token: CancellationToken | None = None,
) -> SimulationResult:
    """Run a Monte Carlo retirement simulation.

    Args:
        portfolio: Holdings with raw (unnormalized) weights. Not mutated.
        params: Run configuration.
        catalog: Predefined assets used to resolve each holding's type.
        seed: Root seed; ``None`` draws a fresh one (reported in the result).
        max_workers: Process pool size; 1 runs every block in-process.
        chunk_size: Trials per block. Results depend on seed and chunk size,
            never on ``max_workers``.
        cancel_token: Optional token checked between blocks.

    Returns:
        SimulationResult with per-year bands and summary metrics.

    Raises:
        InvalidParameters: Input cannot produce a meaningful run.
        SimulationCancelled: ``cancel_token`` was triggered.
    """
    validate_inputs(portfolio, params)
    if chunk_size <= 0:
        raise InvalidParameters(f"chunk_size must be positive, got {chunk_size}")
    if seed is not None and seed < 0:
        raise InvalidParameters(f"seed must be non-negative, got {seed}")

    assets = normalize_portfolio(portfolio, catalog)
    stats = compute_portfolio_stats(assets, params.enable_correlations)

    if seed is None:
        seed = int(np.random.default_rng().integers(MAX_SEED))
    root_seq = np.random.SeedSequence(seed)
    chunks = _chunk_sizes(params.iterations, chunk_size)
    chunk_seqs = root_seq.spawn(len(chunks))

    logger.info(
        "Running %d iterations over %d years in %d blocks "
        "(mu=%.4f, sigma=%.4f, fat_tails=%s, correlations=%s, mean_reversion=%s)",
        params.iterations, params.time_horizon, len(chunks),
        stats.expected_return, stats.volatility,
        params.enable_fat_tails, params.enable_correlations, params.enable_mean_reversion,
    )

    if max_workers <= 1 or len(chunks) == 1:
        blocks = _run_inline(stats, params, chunks, chunk_seqs, cancel_token)
    else:
        blocks = _run_parallel(stats, params, chunks, chunk_seqs, max_workers, cancel_token)

    paths = np.vstack(blocks)
    result = aggregate_paths(paths, stats, seed)

    logger.info(
        "Simulation complete: risk_of_ruin=%.2f%%, median_final=%.2f",
        result["risk_of_ruin"], result["median_final"],
    )
    return result


# ---------------------------------------------------------------------------
# Validation and normalization
# ---------------------------------------------------------------------------


def validate_inputs(portfolio: Sequence[Asset], params: SimulationParameters) -> None:
    """Reject inputs that would otherwise surface as NaN or empty output."""
    if not portfolio:
        raise InvalidParameters("Portfolio is empty")

    for asset in portfolio:
        values = (asset.weight, asset.expected_return, asset.volatility)
        if not all(math.isfinite(v) for v in values):
            raise InvalidParameters(f"Asset {asset.symbol} has non-finite inputs")
        if asset.weight < 0:
            raise InvalidParameters(f"Asset {asset.symbol} has negative weight")
        if asset.volatility < 0:
            raise InvalidParameters(f"Asset {asset.symbol} has negative volatility")

    if sum(a.weight for a in portfolio) <= 0:
        raise InvalidParameters("Total portfolio weight must be positive")

    for name in ("iterations", "time_horizon"):
        value = getattr(params, name)
        if not isinstance(value, numbers.Integral) or isinstance(value, bool) or value <= 0:
            raise InvalidParameters(f"{name} must be a positive integer, got {value}")

    for name in ("initial_equity", "annual_withdrawal"):
        value = getattr(params, name)
        if not math.isfinite(value) or value < 0:
            raise InvalidParameters(f"{name} must be finite and non-negative, got {value}")
    if not math.isfinite(params.inflation_rate) or params.inflation_rate < 0:
        raise InvalidParameters(
            f"inflation_rate must be finite and non-negative, got {params.inflation_rate}"
        )


def normalize_portfolio(
    portfolio: Sequence[Asset],
    catalog: dict[str, CatalogEntry] = CATALOG_BY_SYMBOL,
) -> list[NormalizedAsset]:
    """Copy holdings with weights scaled to sum to 1 and asset types resolved.

    Precondition: total weight is positive.
    """
    total_weight = sum(a.weight for a in portfolio)
    return [
        NormalizedAsset(
            symbol=a.symbol,
            normalized_weight=a.weight / total_weight,
            expected_return=a.expected_return,
            volatility=a.volatility,
            asset_type=resolve_asset_type(a.symbol, catalog),
        )
        for a in portfolio
    ]


def compute_portfolio_stats(
    assets: Sequence[NormalizedAsset], enable_correlations: bool
) -> PortfolioStats:
    """Weighted expected return and variance-covariance volatility.

    σ_p² = Σ_i Σ_j w_i·w_j·σ_i·σ_j·ρ_ij; a negative aggregate is clamped to 0.
    """
    w = np.array([a.normalized_weight for a in assets])
    r = np.array([a.expected_return for a in assets])
    sig = np.array([a.volatility for a in assets])

    corr = build_correlation_matrix(
        [a.symbol for a in assets], [a.asset_type for a in assets], enable_correlations
    )

    expected_return = float(np.sum(w * r))
    scaled = w * sig
    variance = float(scaled @ corr @ scaled)
    if variance < 0:
        logger.warning("Negative portfolio variance %.6g clamped to 0", variance)
        variance = 0.0

    return PortfolioStats(expected_return=expected_return, volatility=math.sqrt(variance))


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


def _chunk_sizes(iterations: int, chunk_size: int) -> list[int]:
    full, rest = divmod(iterations, chunk_size)
    return [chunk_size] * full + ([rest] if rest else [])


def _run_chunk(
    stats: PortfolioStats,
    params: SimulationParameters,
    num_trials: int,
    seed_seq: np.random.SeedSequence,
) -> np.ndarray:
    """Picklable worker for ProcessPoolExecutor: one block of trials."""
    base_seq, shock_seq = seed_seq.spawn(2)
    return simulate_paths(
        stats, params, num_trials,
        np.random.default_rng(base_seq),
        np.random.default_rng(shock_seq),
    )


def _check_cancelled(cancel_token: CancellationToken | None) -> None:
    if cancel_token is not None and cancel_token.cancelled:
        raise SimulationCancelled("Simulation cancelled")


def _run_inline(
    stats: PortfolioStats,
    params: SimulationParameters,
    chunks: list[int],
    chunk_seqs: list[np.random.SeedSequence],
    cancel_token: CancellationToken | None,
) -> list[np.ndarray]:
    blocks = []
    for i, (size, seq) in enumerate(zip(chunks, chunk_seqs)):
        _check_cancelled(cancel_token)
        blocks.append(_run_chunk(stats, params, size, seq))
        logger.debug("Block %d/%d done (%d trials)", i + 1, len(chunks), size)
    _check_cancelled(cancel_token)
    return blocks


def _run_parallel(
    stats: PortfolioStats,
    params: SimulationParameters,
    chunks: list[int],
    chunk_seqs: list[np.random.SeedSequence],
    max_workers: int,
    cancel_token: CancellationToken | None,
) -> list[np.ndarray]:
    _check_cancelled(cancel_token)
    max_workers = min(max_workers, len(chunks))
    logger.info("Running %d blocks with %d workers", len(chunks), max_workers)

    blocks: list[np.ndarray | None] = [None] * len(chunks)
    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = {}
        for i, (size, seq) in enumerate(zip(chunks, chunk_seqs)):
            futures[executor.submit(_run_chunk, stats, params, size, seq)] = i

        for future in as_completed(futures):
            if cancel_token is not None and cancel_token.cancelled:
                executor.shutdown(wait=False, cancel_futures=True)
                raise SimulationCancelled("Simulation cancelled")
            i = futures[future]
            try:
                blocks[i] = future.result()
            except Exception as e:
                logger.error("Simulation block %d failed: %s", i, e)
                executor.shutdown(wait=False, cancel_futures=True)
                raise
            logger.debug("Block %d/%d done", i + 1, len(chunks))

    return blocks


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


def aggregate_paths(
    paths: np.ndarray, stats: PortfolioStats, seed: int | None = None
) -> SimulationResult:
    """Per-year percentile bands plus terminal risk metrics.

    Args:
        paths: (trials, years + 1) path matrix.
        stats: Portfolio statistics reported alongside the bands.
        seed: Root seed entropy, echoed for reproducibility.
    """
    num_trials, num_years = paths.shape
    finals = paths[:, -1]

    return SimulationResult(
        years=list(range(num_years)),
        median_path=percentile_by_column(paths, MEDIAN_PCT).tolist(),
        top_path=percentile_by_column(paths, TOP_PCT).tolist(),
        bottom_path=percentile_by_column(paths, BOTTOM_PCT).tolist(),
        risk_of_ruin=float(np.count_nonzero(finals <= RUIN_THRESHOLD) / num_trials * 100),
        median_final=percentile(finals, MEDIAN_PCT),
        expected_cagr=stats.expected_return * 100,
        expected_vol=stats.volatility * 100,
        iterations=num_trials,
        seed=seed,
    )
