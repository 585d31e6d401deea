"""Command line interface for DebtPilot."""

from __future__ import annotations

import json
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click

from .config import STRATEGIES, BaseConfig
from .logging_config import get_logger, setup_logging, teardown_logging
from .services.debts import Debt, compare_strategies, simulate
from .services.errors import DebtStrategyError
from .services.export_csv import export_schedule_csv, export_summary_csv
from .services.schedules import StrategyResult

logger = get_logger(__name__)

_START_OPTION = click.option(
    "--start",
    type=click.DateTime(formats=["%Y-%m", "%Y-%m-%d"]),
    default=None,
    help="Simulation start month (YYYY-MM); first payment is the month after.",
)
_EXTRA_OPTION = click.option(
    "--extra",
    "extra_payment",
    type=float,
    default=0.0,
    show_default=True,
    help="Extra amount paid each month on top of the minimums.",
)
_STRATEGY_OPTION = click.option(
    "--strategy",
    type=click.Choice(STRATEGIES, case_sensitive=False),
    default=None,
    help="Payoff strategy (defaults to the stored liability strategy with --user-id, else DEBTPILOT_DEFAULT_STRATEGY).",
)
_SOURCE_ARGUMENT = click.argument(
    "debts_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path), required=False
)
_USER_OPTION = click.option(
    "--user-id",
    type=int,
    default=None,
    help="Load active liabilities for this user from the finance database.",
)


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _month(value: date) -> str:
    return value.strftime("%Y-%m")


def _start_date(value: Optional[datetime]) -> Optional[date]:
    return value.date() if value is not None else None


def _load_debts(
    config: BaseConfig,
    debts_csv: Optional[Path],
    user_id: Optional[int],
    strategy: Optional[str] = None,
) -> tuple[list[Debt], str]:
    """Return the debts to simulate and the strategy to simulate them with.

    Without an explicit ``strategy`` a database user gets the strategy stored
    on their liabilities; everything else uses DEBTPILOT_DEFAULT_STRATEGY.
    """

    if debts_csv is not None and user_id is not None:
        raise click.UsageError("Pass either DEBTS_CSV or --user-id, not both.")
    if debts_csv is not None:
        from .services.import_csv import load_debts_csv

        return load_debts_csv(debts_csv), strategy or config.DEFAULT_STRATEGY
    if user_id is not None:
        from .infra.database import bootstrap_database
        from .infra.repositories import SQLModelLiabilityRepository
        from .services.debt_registry import load_active_debts, preferred_strategy

        engine, session_factory = bootstrap_database(config)
        try:
            repository = SQLModelLiabilityRepository(session_factory)
            if strategy is None:
                strategy = preferred_strategy(
                    repository, user_id=user_id, default=config.DEFAULT_STRATEGY
                )
            return load_active_debts(repository, user_id=user_id), strategy
        finally:
            engine.dispose()
    raise click.UsageError("Provide a DEBTS_CSV file or --user-id.")


def _echo_result(result: StrategyResult, *, preview: int) -> None:
    click.echo(
        f"{result.strategy.capitalize()} strategy: {result.total_months} months, "
        f"debt-free {_month(result.payoff_date)}"
    )
    click.echo(
        f"Total paid: {_money(result.total_paid)}  Interest: {_money(result.total_interest_paid)}"
    )
    if not result.debt_plans:
        click.echo("No active debts.")
        return
    click.echo("Payoff order:")
    for index, plan in enumerate(result.debt_plans, start=1):
        click.echo(
            f"  {index}. {plan.name}  {_money(plan.remaining_amount)} @ {plan.interest_rate:.2f}%  "
            f"paid off {_month(plan.payoff_date)}  interest {_money(plan.total_interest)}"
        )
        for entry in plan.preview(preview):
            click.echo(
                f"       {_month(entry.date)}  payment {_money(entry.payment)}  "
                f"principal {_money(entry.principal)}  interest {_money(entry.interest)}"
            )


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Compare avalanche and snowball debt repayment plans."""

    try:
        config = BaseConfig()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    setup_logging(config)
    ctx.call_on_close(teardown_logging)
    ctx.obj = config


@cli.command("plan")
@_SOURCE_ARGUMENT
@_USER_OPTION
@_STRATEGY_OPTION
@_EXTRA_OPTION
@_START_OPTION
@click.option("--preview", type=int, default=3, show_default=True, help="Schedule rows per debt.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Emit the full result as JSON.")
@click.pass_obj
def plan_command(
    config: BaseConfig,
    debts_csv: Optional[Path],
    user_id: Optional[int],
    strategy: Optional[str],
    extra_payment: float,
    start: Optional[datetime],
    preview: int,
    as_json: bool,
) -> None:
    """Simulate one strategy and print the payoff plan."""

    try:
        debts, strategy = _load_debts(config, debts_csv, user_id, strategy)
        result = simulate(
            debts,
            strategy,
            extra_payment,
            start=_start_date(start),
            **config.simulation_options(),
        )
    except DebtStrategyError as exc:
        raise click.ClickException(str(exc)) from exc

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        return
    _echo_result(result, preview=preview)


@cli.command("compare")
@_SOURCE_ARGUMENT
@_USER_OPTION
@_EXTRA_OPTION
@_START_OPTION
@click.option(
    "--summary-csv",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write per-strategy totals to this CSV file.",
)
@click.pass_obj
def compare_command(
    config: BaseConfig,
    debts_csv: Optional[Path],
    user_id: Optional[int],
    extra_payment: float,
    start: Optional[datetime],
    summary_csv: Optional[Path],
) -> None:
    """Compare avalanche against snowball."""

    try:
        debts, _ = _load_debts(config, debts_csv, user_id)
        comparison = compare_strategies(
            debts, extra_payment, start=_start_date(start), **config.simulation_options()
        )
    except DebtStrategyError as exc:
        raise click.ClickException(str(exc)) from exc

    for result in (comparison.avalanche, comparison.snowball):
        click.echo(
            f"{result.strategy:<10} {result.total_months:>4} months  "
            f"interest {_money(result.total_interest_paid):>12}  "
            f"total {_money(result.total_paid):>12}  debt-free {_month(result.payoff_date)}"
        )

    savings = comparison.interest_savings
    if savings > 0:
        click.echo(f"Avalanche saves {_money(savings)} in interest.")
    elif savings < 0:
        click.echo(f"Snowball saves {_money(-savings)} in interest.")
    else:
        click.echo("Both strategies pay the same interest.")
    if comparison.months_saved:
        faster = "Avalanche" if comparison.months_saved > 0 else "Snowball"
        click.echo(f"{faster} is debt-free {abs(comparison.months_saved)} months sooner.")
    click.echo(f"Recommended: {comparison.recommended}")

    if summary_csv is not None:
        export_summary_csv(comparison=comparison, output_path=summary_csv)
        click.echo(f"Summary written: {summary_csv}")


@cli.command("export")
@click.argument("debts_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_csv", type=click.Path(dir_okay=False, path_type=Path))
@_STRATEGY_OPTION
@_EXTRA_OPTION
@_START_OPTION
@click.pass_obj
def export_command(
    config: BaseConfig,
    debts_csv: Path,
    output_csv: Path,
    strategy: Optional[str],
    extra_payment: float,
    start: Optional[datetime],
) -> None:
    """Write the full payment schedule of one strategy to CSV."""

    try:
        debts, strategy = _load_debts(config, debts_csv, None, strategy)
        result = simulate(
            debts,
            strategy,
            extra_payment,
            start=_start_date(start),
            **config.simulation_options(),
        )
    except DebtStrategyError as exc:
        raise click.ClickException(str(exc)) from exc

    path = export_schedule_csv(result=result, output_path=output_csv)
    logger.info("Schedule exported", extra={"path": str(path), "strategy": result.strategy})
    click.echo(f"Schedule written: {path}")


def main() -> None:  # pragma: no cover - console entry point
    cli()
