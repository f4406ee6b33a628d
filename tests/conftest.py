"""Pytest configuration and shared fixtures."""

import numpy as np
import pytest

from retiresim.analysis.portfolio import Asset
from retiresim.analysis.sim_models import SimulationParameters


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def spy_portfolio():
    """Single US large-cap holding."""
    return [Asset(symbol="SPY", weight=100, expected_return=0.08, volatility=0.15)]


@pytest.fixture
def balanced_portfolio():
    """Equity / crypto / metal mix with unnormalized weights."""
    return [
        Asset(symbol="SPY", weight=50, expected_return=0.10, volatility=0.16),
        Asset(symbol="VEA", weight=20, expected_return=0.06, volatility=0.17),
        Asset(symbol="BTC", weight=10, expected_return=0.30, volatility=0.65),
        Asset(symbol="GLD", weight=20, expected_return=0.06, volatility=0.15),
    ]


@pytest.fixture
def base_params():
    return SimulationParameters(
        initial_equity=100000,
        annual_withdrawal=4000,
        inflation_rate=0.025,
        time_horizon=30,
        iterations=2000,
    )
