"""Annual-step geometric Brownian motion with withdrawals.

Optional features layered on the base GBM step:
  - fat tails: rare forced crash that replaces the year's normal draw
  - mean reversion: drift pulled toward the long-run return by last year's miss
"""

import logging

import numpy as np

from retiresim.analysis.sim_models import PortfolioStats, SimulationParameters
from retiresim.analysis.stats import sample_standard_normal

logger = logging.getLogger(__name__)

CRASH_PROBABILITY = 0.02     # per path, per year
CRASH_MEAN = 3.0             # crash size in sigmas
CRASH_STD = 0.8
MEAN_REVERSION_KAPPA = 0.25


def inflation_factors(inflation_rate: float, time_horizon: int) -> np.ndarray:
    """Cumulative inflation factor per 0-based year: (1 + i)^year."""
    return (1.0 + inflation_rate) ** np.arange(time_horizon)


def simulate_paths(
    stats: PortfolioStats,
    params: SimulationParameters,
    num_trials: int,
    rng: np.random.Generator,
    shock_rng: np.random.Generator,
) -> np.ndarray:
    """Simulate ``num_trials`` independent portfolio paths.

    Args:
        stats: Portfolio expected return and volatility (fractions).
        params: Run configuration; ``iterations`` is ignored here.
        num_trials: Number of paths in this block.
        rng: Source of the base normal draws.
        shock_rng: Source of crash decisions and crash sizes, kept apart from
            ``rng`` so toggling fat tails leaves the base draws unchanged.

    Returns:
        Array of shape (num_trials, time_horizon + 1); column 0 is the
        initial equity. Ruined paths stay at 0.
    """
    horizon = params.time_horizon
    mu_long = stats.expected_return
    sigma = stats.volatility
    withdrawals = params.annual_withdrawal * inflation_factors(params.inflation_rate, horizon)

    paths = np.empty((num_trials, horizon + 1))
    paths[:, 0] = params.initial_equity
    equity = np.full(num_trials, float(params.initial_equity))
    previous_return = np.zeros(num_trials)

    for year in range(1, horizon + 1):
        alive = equity > 0

        z = sample_standard_normal(rng, size=num_trials)

        if params.enable_fat_tails:
            crash = shock_rng.random(num_trials) < CRASH_PROBABILITY
            n_crash = int(crash.sum())
            if n_crash:
                z[crash] = -np.abs(
                    sample_standard_normal(shock_rng, CRASH_MEAN, CRASH_STD, size=n_crash)
                )

        if params.enable_mean_reversion:
            drift_adjustment = MEAN_REVERSION_KAPPA * (mu_long - previous_return)
        else:
            drift_adjustment = 0.0

        mu = mu_long + drift_adjustment
        log_return = (mu - 0.5 * sigma**2) + sigma * z
        growth = np.exp(log_return)

        # Withdrawal for loop year y uses factor[y - 1]: first year is not inflated
        after = equity * growth - withdrawals[year - 1]

        previous_return = np.where(alive, growth - 1.0, previous_return)
        equity = np.where(alive, np.maximum(after, 0.0), 0.0)
        paths[:, year] = equity

    return paths
