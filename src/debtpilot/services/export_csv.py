"""CSV export helpers for payoff schedules."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

from .debts import StrategyComparison
from .schedules import StrategyResult

SCHEDULE_HEADERS = [
    "strategy",
    "debt_id",
    "debt_name",
    "month",
    "date",
    "payment",
    "principal",
    "interest",
    "remaining_balance",
]
SUMMARY_HEADERS = [
    "strategy",
    "total_months",
    "payoff_date",
    "total_interest_paid",
    "total_paid",
    "payoff_order",
]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


def export_schedule_csv(*, result: StrategyResult, output_path: Path) -> Path:
    """Write every payment record of ``result`` to CSV at ``output_path``.

    Rows follow payoff order, then month. Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=SCHEDULE_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for plan in result.debt_plans:
            for entry in plan.payments:
                writer.writerow(
                    {
                        "strategy": result.strategy,
                        "debt_id": _serialize_value(plan.id),
                        "debt_name": plan.name,
                        "month": entry.month,
                        "date": _serialize_value(entry.date),
                        "payment": _serialize_value(entry.payment),
                        "principal": _serialize_value(entry.principal),
                        "interest": _serialize_value(entry.interest),
                        "remaining_balance": _serialize_value(entry.remaining_balance),
                    }
                )

    return output_path


def export_summary_csv(*, comparison: StrategyComparison, output_path: Path) -> Path:
    """Write one totals row per strategy."""

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=SUMMARY_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for result in (comparison.avalanche, comparison.snowball):
            writer.writerow(
                {
                    "strategy": result.strategy,
                    "total_months": result.total_months,
                    "payoff_date": _serialize_value(result.payoff_date),
                    "total_interest_paid": _serialize_value(result.total_interest_paid),
                    "total_paid": _serialize_value(result.total_paid),
                    "payoff_order": " > ".join(plan.name for plan in result.debt_plans),
                }
            )

    return output_path
