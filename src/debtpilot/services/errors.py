"""Failure modes raised by the debt strategy services."""

from __future__ import annotations

from typing import Hashable, Sequence


class DebtStrategyError(ValueError):
    """Base class for debt strategy failures."""


class InvalidInputError(DebtStrategyError):
    """Raised before simulation when an input value is rejected."""


class NonConvergentDebtError(DebtStrategyError):
    """A debt's minimum payment never outpaces its monthly interest."""

    def __init__(
        self, *, debt_id: Hashable, minimum_payment: float, monthly_interest: float
    ) -> None:
        self.debt_id = debt_id
        self.minimum_payment = minimum_payment
        self.monthly_interest = monthly_interest
        super().__init__(
            f"Debt {debt_id!r} never pays off: minimum payment {minimum_payment:.2f} "
            f"does not exceed monthly interest {monthly_interest:.2f}."
        )


class PayoffHorizonExceededError(DebtStrategyError):
    """Debts are still outstanding when the simulation horizon runs out."""

    def __init__(self, *, horizon_months: int, remaining_debt_ids: Sequence[Hashable]) -> None:
        self.horizon_months = horizon_months
        self.remaining_debt_ids = tuple(remaining_debt_ids)
        ids = ", ".join(repr(debt_id) for debt_id in self.remaining_debt_ids)
        super().__init__(
            f"Debts still outstanding after {horizon_months} months: {ids}."
        )


class ScheduleError(DebtStrategyError):
    """Payment records were appended out of order or past payoff."""
