"""Monte Carlo retirement simulation models package.

Shared types for the path simulator and the run orchestrator:
- SimulationParameters: one run's configuration
- PortfolioStats: aggregate expected return / volatility of a portfolio
- SimulationResult: per-year percentile bands and risk metrics
"""

import threading
from dataclasses import dataclass
from typing import TypedDict


class InvalidParameters(ValueError):
    """Raised before any simulation work when the inputs cannot produce a run."""


class SimulationCancelled(RuntimeError):
    """Raised when a run is aborted through its CancellationToken."""


class CancellationToken:
    """Cooperative cancellation flag shared between a caller and a run."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class SimulationParameters:
    initial_equity: float
    annual_withdrawal: float
    inflation_rate: float      # fraction, e.g. 0.025
    time_horizon: int          # whole years
    iterations: int
    enable_fat_tails: bool = False
    enable_correlations: bool = False
    enable_mean_reversion: bool = False


@dataclass(frozen=True)
class PortfolioStats:
    expected_return: float     # fraction
    volatility: float          # fraction, never negative


class SimulationResult(TypedDict):
    """Standard return type of a Monte Carlo run."""
    years: list[int]
    median_path: list[float]
    top_path: list[float]       # 95th percentile
    bottom_path: list[float]    # 5th percentile
    risk_of_ruin: float         # percent of trials ending <= RUIN_THRESHOLD
    median_final: float
    expected_cagr: float        # percent
    expected_vol: float         # percent
    iterations: int
    seed: int | None


__all__ = [
    "CancellationToken",
    "InvalidParameters",
    "PortfolioStats",
    "SimulationCancelled",
    "SimulationParameters",
    "SimulationResult",
]
