"""Tests for the click command-line interface."""

import click
import pytest
from click.testing import CliRunner

from retiresim import __main__ as cli_module
from retiresim.__main__ import _parse_holding, cli

METRIC_PREFIXES = ("Risk of ruin:", "Median final:", "Expected CAGR:", "Expected vol:", "Seed:")


@pytest.fixture
def runner(monkeypatch):
    # Handlers bound to the runner's captured streams would outlive the invocation
    monkeypatch.setattr(cli_module, "setup_logging", lambda log_dir: None)
    return CliRunner()


def _metrics(output):
    return [line for line in output.splitlines() if line.startswith(METRIC_PREFIXES)]


def _invoke(runner, args):
    with runner.isolated_filesystem():
        return runner.invoke(cli, args)


class TestParseHolding:
    def test_catalog_holding(self):
        assert _parse_holding("SPY:60") == ("SPY", 60.0, None, None)

    def test_custom_holding(self):
        assert _parse_holding("abc:10:7.5:20") == ("abc", 10.0, 7.5, 20.0)

    @pytest.mark.parametrize("spec", ["SPY", "SPY:x", "SPY:1:2", "A:1:2:3:4"])
    def test_malformed(self, spec):
        with pytest.raises(click.BadParameter):
            _parse_holding(spec)


class TestCommands:
    def test_assets(self, runner):
        result = _invoke(runner, ["assets"])
        assert result.exit_code == 0
        assert "BTC" in result.output
        assert "crypto" in result.output

    def test_simulate(self, runner):
        result = _invoke(runner, [
            "simulate", "-a", "SPY:60", "-a", "GLD:40",
            "-n", "200", "--years", "5", "--seed", "1", "--correlations", "--table",
        ])
        assert result.exit_code == 0, result.output
        assert "Risk of ruin:" in result.output
        assert "Expected CAGR:" in result.output
        assert "MEDIAN" in result.output

    def test_simulate_reproducible(self, runner):
        args = ["simulate", "-a", "QQQ:100", "-n", "100", "--years", "3", "--seed", "4"]
        first = _metrics(_invoke(runner, args).output)
        assert len(first) == len(METRIC_PREFIXES)
        assert first == _metrics(_invoke(runner, args).output)

    def test_simulate_custom_asset(self, runner):
        result = _invoke(runner, [
            "simulate", "-a", "MYFUND:100:6:12", "-n", "50", "--years", "3", "--seed", "2",
        ])
        assert result.exit_code == 0, result.output
        assert "Expected CAGR:   6.00%" in result.output

    def test_bad_holding(self, runner):
        result = _invoke(runner, ["simulate", "-a", "NOPE:100"])
        assert result.exit_code == 2

    def test_bad_parameters(self, runner):
        result = _invoke(runner, ["simulate", "-a", "SPY:100", "--years", "0"])
        assert result.exit_code == 2

    def test_negative_seed_is_usage_error(self, runner):
        result = _invoke(runner, ["simulate", "-a", "SPY:100", "-n", "10", "--seed", "-1"])
        assert result.exit_code == 2
        assert "Risk of ruin:" not in result.output

    def test_negative_inflation_is_usage_error(self, runner):
        result = _invoke(runner, ["simulate", "-a", "SPY:100", "-n", "10", "--inflation", "-1"])
        assert result.exit_code == 2

    def test_unexpected_failure(self, runner, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("worker crashed")

        monkeypatch.setattr("retiresim.analysis.simulation.run_monte_carlo", boom)
        result = _invoke(runner, ["simulate", "-a", "SPY:100", "-n", "10", "--years", "2"])
        assert result.exit_code == 1
        assert "Risk of ruin:" not in result.output
