"""Payment schedule recording and result aggregation."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Hashable, Iterable, Sequence

from .errors import ScheduleError

if TYPE_CHECKING:
    from .debts import Debt


def month_start(value: date) -> date:
    """Return the first day of *value*'s month."""

    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    """Return the first day of the month ``months`` after *value*'s month."""

    month = value.month + months
    year = value.year + (month - 1) // 12
    month = ((month - 1) % 12) + 1
    return date(year, month, 1)


@dataclass(slots=True, frozen=True)
class PaymentRecord:
    """One month's payment on a single debt."""

    date: date
    month: int
    payment: float
    principal: float
    interest: float
    remaining_balance: float


@dataclass(slots=True)
class DebtPaymentPlan:
    """Full repayment schedule for one debt under a strategy."""

    id: Hashable
    name: str
    remaining_amount: float
    interest_rate: float
    monthly_payment: float
    payoff_date: date
    payoff_month: int
    total_interest: float
    total_paid: float
    payments: list[PaymentRecord] = field(default_factory=list)

    def preview(self, months: int = 3) -> list[PaymentRecord]:
        """Return the first ``months`` payment records."""

        if months <= 0:
            return []
        return self.payments[:months]


@dataclass(slots=True)
class StrategyResult:
    """Aggregate outcome of one strategy simulation."""

    strategy: str
    extra_payment: float
    total_months: int
    total_interest_paid: float
    total_paid: float
    payoff_date: date
    debt_plans: list[DebtPaymentPlan] = field(default_factory=list)

    def plan_for(self, debt_id: Hashable) -> DebtPaymentPlan | None:
        """Return the plan for ``debt_id`` or ``None`` if it was not simulated."""

        for plan in self.debt_plans:
            if plan.id == debt_id:
                return plan
        return None

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation with ISO formatted dates."""

        return _isoformat_dates(asdict(self))


def _isoformat_dates(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _isoformat_dates(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_isoformat_dates(item) for item in value]
    return value


class ScheduleRecorder:
    """Accumulates per-debt payment records as the simulation advances.

    Each debt owns an ordered list of records. A record must be strictly later
    than the debt's previous one, and nothing may be appended once a debt's
    balance has reached zero.
    """

    def __init__(self, debts: Sequence["Debt"]):
        self._debts = list(debts)
        self._records: dict[Hashable, list[PaymentRecord]] = {debt.id: [] for debt in self._debts}

    def record(self, debt_id: Hashable, entry: PaymentRecord) -> None:
        if debt_id not in self._records:
            raise ScheduleError(f"Unknown debt {debt_id!r}.")
        history = self._records[debt_id]
        if history:
            last = history[-1]
            if last.remaining_balance <= 0:
                raise ScheduleError(f"Debt {debt_id!r} is already paid off.")
            if entry.month <= last.month or entry.date <= last.date:
                raise ScheduleError(
                    f"Payment for debt {debt_id!r} in month {entry.month} is not after month {last.month}."
                )
        history.append(entry)

    def payments(self, debt_id: Hashable) -> list[PaymentRecord]:
        return list(self._records[debt_id])

    def payoff_month(self, debt_id: Hashable) -> int | None:
        history = self._records[debt_id]
        if history and history[-1].remaining_balance <= 0:
            return history[-1].month
        return None

    def build_plans(self) -> list[DebtPaymentPlan]:
        """Return one plan per debt, in the order the debts were registered."""

        plans: list[DebtPaymentPlan] = []
        for debt in self._debts:
            history = self._records[debt.id]
            if not history or history[-1].remaining_balance > 0:
                raise ScheduleError(f"Debt {debt.id!r} has no completed schedule.")
            final = history[-1]
            plans.append(
                DebtPaymentPlan(
                    id=debt.id,
                    name=debt.name,
                    remaining_amount=debt.remaining_amount,
                    interest_rate=debt.interest_rate,
                    monthly_payment=debt.minimum_payment,
                    payoff_date=final.date,
                    payoff_month=final.month,
                    total_interest=sum(entry.interest for entry in history),
                    total_paid=sum(entry.payment for entry in history),
                    payments=list(history),
                )
            )
        return plans


def aggregate_result(
    plans: Iterable[DebtPaymentPlan],
    *,
    strategy: str,
    extra_payment: float,
    start: date,
) -> StrategyResult:
    """Roll per-debt plans into a single result.

    ``plans`` are expected in priority order; that order breaks ties between
    debts that pay off in the same month.
    """

    ordered = sorted(
        enumerate(plans), key=lambda pair: (pair[1].payoff_month, pair[0])
    )
    debt_plans = [plan for _, plan in ordered]
    total_months = max((plan.payoff_month for plan in debt_plans), default=0)

    return StrategyResult(
        strategy=strategy,
        extra_payment=extra_payment,
        total_months=total_months,
        total_interest_paid=sum(plan.total_interest for plan in debt_plans),
        total_paid=sum(plan.total_paid for plan in debt_plans),
        payoff_date=add_months(start, total_months),
        debt_plans=debt_plans,
    )
