"""Debt payoff strategy engine (avalanche and snowball)."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Hashable, Iterable

from ..config import STRATEGIES, Strategy
from ..logging_config import get_logger
from .errors import InvalidInputError, NonConvergentDebtError, PayoffHorizonExceededError
from .schedules import (
    PaymentRecord,
    ScheduleRecorder,
    StrategyResult,
    add_months,
    aggregate_result,
    month_start,
)

logger = get_logger(__name__)

DEFAULT_HORIZON_MONTHS = 600  # 50 years

# Float slack when deciding whether a payment clears the balance.
_PAYOFF_EPSILON = 1e-9


@dataclass(slots=True, frozen=True)
class Debt:
    """Snapshot of an outstanding debt for one simulation run."""

    id: Hashable
    name: str
    remaining_amount: float
    interest_rate: float  # nominal APR in percent, 19.99 == 19.99%/year
    minimum_payment: float


@dataclass(slots=True)
class StrategyComparison:
    """Both strategies simulated over the same inputs."""

    avalanche: StrategyResult
    snowball: StrategyResult

    @property
    def interest_savings(self) -> float:
        """Interest avalanche saves over snowball (negative if it costs more)."""
        return self.snowball.total_interest_paid - self.avalanche.total_interest_paid

    @property
    def months_saved(self) -> int:
        """Months avalanche finishes ahead of snowball."""
        return self.snowball.total_months - self.avalanche.total_months

    @property
    def recommended(self) -> str:
        if self.interest_savings < 0:
            return "snowball"
        if self.interest_savings == 0 and self.months_saved < 0:
            return "snowball"
        return "avalanche"

    def result_for(self, strategy: str | Strategy) -> StrategyResult:
        return self.avalanche if _normalize_strategy(strategy) == "avalanche" else self.snowball


def _normalize_strategy(strategy: str | Strategy) -> str:
    value = str(getattr(strategy, "value", strategy)).strip().lower()
    if value not in STRATEGIES:
        raise InvalidInputError(f"Invalid debt payoff strategy: {strategy!r}.")
    return value


def _quantize(value: float, unit: float | None) -> float:
    """Round ``value`` half-up to a multiple of ``unit``; identity when ``unit`` is None."""

    if unit is None:
        return value
    step = Decimal(repr(unit))
    steps = (Decimal(repr(value)) / step).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return float(steps * step)


def _monthly_interest(balance: float, interest_rate: float, unit: float | None) -> float:
    return _quantize(balance * interest_rate / 12 / 100, unit)


def _require_amount(value: float, label: str) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise InvalidInputError(f"{label} must be a number, got {value!r}.")
    if not math.isfinite(value):
        raise InvalidInputError(f"{label} must be finite, got {value!r}.")
    if value < 0:
        raise InvalidInputError(f"{label} cannot be negative, got {value!r}.")


def _validate(
    debts: list[Debt],
    *,
    extra_payment: float,
    rounding_unit: float | None,
    horizon_months: int,
) -> None:
    _require_amount(extra_payment, "Extra payment")
    if rounding_unit is not None:
        _require_amount(rounding_unit, "Rounding unit")
        if rounding_unit == 0:
            raise InvalidInputError("Rounding unit must be positive.")
    if isinstance(horizon_months, bool) or not isinstance(horizon_months, int) or horizon_months <= 0:
        raise InvalidInputError(f"Horizon must be a positive number of months, got {horizon_months!r}.")

    seen: set[Hashable] = set()
    for debt in debts:
        if debt.id in seen:
            raise InvalidInputError(f"Duplicate debt id {debt.id!r}.")
        seen.add(debt.id)
        _require_amount(debt.remaining_amount, f"Debt {debt.id!r} remaining amount")
        _require_amount(debt.interest_rate, f"Debt {debt.id!r} interest rate")
        _require_amount(debt.minimum_payment, f"Debt {debt.id!r} minimum payment")


def _check_convergence(debts: Iterable[Debt], rounding_unit: float | None) -> None:
    for debt in debts:
        balance = _quantize(debt.remaining_amount, rounding_unit)
        interest = _monthly_interest(balance, debt.interest_rate, rounding_unit)
        if _quantize(debt.minimum_payment, rounding_unit) <= interest:
            logger.warning(
                "Debt minimum payment does not cover interest",
                extra={
                    "debt_id": debt.id,
                    "minimum_payment": debt.minimum_payment,
                    "monthly_interest": interest,
                },
            )
            raise NonConvergentDebtError(
                debt_id=debt.id,
                minimum_payment=debt.minimum_payment,
                monthly_interest=interest,
            )


def order_debts(debts: Iterable[Debt], strategy: str | Strategy) -> list[Debt]:
    """Return debts in payoff priority order for ``strategy``.

    avalanche: highest rate, then largest balance, then id.
    snowball: smallest balance, then highest rate, then id.
    """

    strategy = _normalize_strategy(strategy)
    if strategy == "avalanche":
        return sorted(debts, key=lambda d: (-d.interest_rate, -d.remaining_amount, str(d.id)))
    return sorted(debts, key=lambda d: (d.remaining_amount, -d.interest_rate, str(d.id)))


def simulate(
    debts: Iterable[Debt],
    strategy: str | Strategy,
    extra_payment: float = 0.0,
    *,
    start: date | None = None,
    rounding_unit: float | None = None,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> StrategyResult:
    """Simulate month-by-month repayment of ``debts`` under ``strategy``.

    Every active debt pays its minimum each month. The highest-priority
    active debt additionally receives ``extra_payment`` plus the minimums
    freed by debts cleared in earlier months. Payments are capped at the
    balance plus that month's interest. The first payment falls in the month
    after ``start`` (today when omitted).

    Raises:
        InvalidInputError: negative amounts, unknown strategy, bad options.
        NonConvergentDebtError: a minimum payment never outpaces interest.
        PayoffHorizonExceededError: debts remain after ``horizon_months``.
    """

    strategy = _normalize_strategy(strategy)
    snapshot = list(debts)
    _validate(
        snapshot,
        extra_payment=extra_payment,
        rounding_unit=rounding_unit,
        horizon_months=horizon_months,
    )
    start_month = month_start(start or date.today())

    active_debts = [
        debt for debt in snapshot if _quantize(debt.remaining_amount, rounding_unit) > 0
    ]
    _check_convergence(active_debts, rounding_unit)

    priority = order_debts(active_debts, strategy)
    recorder = ScheduleRecorder(priority)
    balances = {debt.id: _quantize(debt.remaining_amount, rounding_unit) for debt in priority}
    freed_pool = 0.0
    month = 0

    while True:
        active = [debt for debt in priority if balances[debt.id] > 0]
        if not active:
            break
        if month >= horizon_months:
            logger.warning(
                "Debt payoff exceeded horizon",
                extra={
                    "strategy": strategy,
                    "horizon_months": horizon_months,
                    "remaining_debts": [debt.id for debt in active],
                },
            )
            raise PayoffHorizonExceededError(
                horizon_months=horizon_months,
                remaining_debt_ids=[debt.id for debt in active],
            )

        month += 1
        when = add_months(start_month, month)
        target = active[0]
        cleared: list[Debt] = []

        for debt in active:
            balance = balances[debt.id]
            interest = _monthly_interest(balance, debt.interest_rate, rounding_unit)
            amount_due = _quantize(balance + interest, rounding_unit)

            planned = debt.minimum_payment
            if debt is target:
                planned += extra_payment + freed_pool
            planned = _quantize(planned, rounding_unit)

            if planned >= amount_due - _PAYOFF_EPSILON:
                payment = amount_due
                principal = balance
                new_balance = 0.0
                cleared.append(debt)
            else:
                payment = planned
                principal = _quantize(payment - interest, rounding_unit)
                new_balance = _quantize(balance - principal, rounding_unit)

            balances[debt.id] = new_balance
            recorder.record(
                debt.id,
                PaymentRecord(
                    date=when,
                    month=month,
                    payment=payment,
                    principal=principal,
                    interest=interest,
                    remaining_balance=new_balance,
                ),
            )

        # Freed minimums join the pool starting next month.
        for debt in cleared:
            freed_pool += debt.minimum_payment
            logger.debug(
                "Debt paid off",
                extra={"strategy": strategy, "debt_id": debt.id, "month": month},
            )

    result = aggregate_result(
        recorder.build_plans(),
        strategy=strategy,
        extra_payment=extra_payment,
        start=start_month,
    )
    logger.info(
        "Debt strategy simulated",
        extra={
            "strategy": strategy,
            "debt_count": len(priority),
            "extra_payment": extra_payment,
            "total_months": result.total_months,
            "total_interest": round(result.total_interest_paid, 2),
        },
    )
    return result


def compare_strategies(
    debts: Iterable[Debt],
    extra_payment: float = 0.0,
    *,
    start: date | None = None,
    rounding_unit: float | None = None,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> StrategyComparison:
    """Simulate avalanche and snowball over the same snapshot."""

    snapshot = list(debts)
    start = start or date.today()
    options = {
        "start": start,
        "rounding_unit": rounding_unit,
        "horizon_months": horizon_months,
    }
    return StrategyComparison(
        avalanche=simulate(snapshot, "avalanche", extra_payment, **options),
        snowball=simulate(snapshot, "snowball", extra_payment, **options),
    )
