import logging
import sys

import click

from retiresim.config import Settings
from retiresim.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _parse_holding(spec: str) -> tuple[str, float, float | None, float | None]:
    """Parse SYMBOL:WEIGHT or SYMBOL:WEIGHT:CAGR%:VOL%."""
    parts = spec.split(":")
    try:
        if len(parts) == 2:
            return parts[0], float(parts[1]), None, None
        if len(parts) == 4:
            return parts[0], float(parts[1]), float(parts[2]), float(parts[3])
    except ValueError:
        pass
    raise click.BadParameter(
        f"'{spec}' is not SYMBOL:WEIGHT or SYMBOL:WEIGHT:CAGR%:VOL%", param_hint="--asset"
    )


def _fmt_money(value: float) -> str:
    return f"${value / 1000:,.1f}k"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """retiresim - Portfolio Monte Carlo Retirement Simulator"""
    settings = Settings()
    setup_logging(settings.log_dir)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    ctx.obj = settings


@cli.command()
def assets():
    """List the predefined asset catalog."""
    from retiresim.analysis.catalog import PREDEFINED_ASSETS

    click.echo(f"{'SYMBOL':<6} {'TYPE':<7} {'CAGR':>7} {'VOL':>7}  NAME")
    for a in PREDEFINED_ASSETS:
        click.echo(
            f"{a.symbol:<6} {a.asset_type.value:<7} "
            f"{a.expected_return * 100:>6.2f}% {a.volatility * 100:>6.2f}%  {a.name}"
        )


@cli.command()
@click.option("--asset", "-a", "holdings", multiple=True, required=True,
              help="Holding as SYMBOL:WEIGHT (catalog) or SYMBOL:WEIGHT:CAGR%:VOL% (custom)")
@click.option("--initial", type=float, default=None, help="Initial principal")
@click.option("--withdrawal", type=float, default=None, help="Nominal annual withdrawal")
@click.option("--inflation", type=float, default=None, help="Annual inflation in percent")
@click.option("--years", type=int, default=None, help="Time horizon in years")
@click.option("--iterations", "-n", type=int, default=None, help="Number of simulated paths")
@click.option("--fat-tails/--no-fat-tails", default=None, help="Inject rare crash shocks")
@click.option("--correlations/--no-correlations", default=None,
              help="Model cross-asset correlation")
@click.option("--mean-reversion/--no-mean-reversion", default=None,
              help="Pull returns back toward the long-run mean")
@click.option("--seed", type=click.IntRange(min=0), default=None,
              help="Root seed for a reproducible run")
@click.option("--workers", type=int, default=None, help="Process pool size")
@click.option("--table/--no-table", default=False, help="Print the per-year percentile table")
@click.pass_obj
def simulate(settings: Settings, holdings: tuple[str, ...], initial: float | None,
             withdrawal: float | None, inflation: float | None, years: int | None,
             iterations: int | None, fat_tails: bool | None, correlations: bool | None,
             mean_reversion: bool | None, seed: int | None, workers: int | None,
             table: bool):
    """Run a Monte Carlo simulation for a portfolio."""
    from dataclasses import replace

    from retiresim.analysis.portfolio import Portfolio
    from retiresim.analysis.sim_models import InvalidParameters
    from retiresim.analysis.simulation import run_monte_carlo

    overrides = {
        "initial_equity": initial,
        "annual_withdrawal": withdrawal,
        "inflation_rate": inflation / 100 if inflation is not None else None,
        "time_horizon": years,
        "iterations": iterations,
        "enable_fat_tails": fat_tails,
        "enable_correlations": correlations,
        "enable_mean_reversion": mean_reversion,
    }
    params = replace(
        settings.default_parameters(),
        **{k: v for k, v in overrides.items() if v is not None},
    )

    portfolio = Portfolio()
    try:
        for spec in holdings:
            portfolio.add(*_parse_holding(spec))
    except InvalidParameters as e:
        raise click.BadParameter(str(e), param_hint="--asset")

    if not portfolio.is_fully_allocated:
        click.echo(
            f"Warning: weights sum to {portfolio.total_weight:.1f}%, normalizing to 100%",
            err=True,
        )

    try:
        result = run_monte_carlo(
            portfolio.assets,
            params,
            seed=seed if seed is not None else settings.simulation_seed,
            max_workers=workers if workers is not None else settings.simulation_max_workers,
            chunk_size=settings.simulation_chunk_size,
        )
    except InvalidParameters as e:
        raise click.UsageError(str(e))
    except Exception:
        logger.exception("Simulation failed")
        click.echo("Simulation failed.", err=True)
        sys.exit(1)

    click.echo(f"Risk of ruin:    {result['risk_of_ruin']:.2f}%")
    click.echo(f"Median final:    {_fmt_money(result['median_final'])}")
    click.echo(f"Expected CAGR:   {result['expected_cagr']:.2f}%")
    click.echo(f"Expected vol:    {result['expected_vol']:.2f}%")
    click.echo(f"Seed:            {result['seed']}")

    if table:
        click.echo(f"\n{'YEAR':>4} {'5TH':>14} {'MEDIAN':>14} {'95TH':>14}")
        for y, lo, mid, hi in zip(
            result["years"], result["bottom_path"], result["median_path"], result["top_path"]
        ):
            click.echo(f"{y:>4} {lo:>14,.0f} {mid:>14,.0f} {hi:>14,.0f}")


if __name__ == "__main__":
    cli()
