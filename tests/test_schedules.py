"""Schedule recorder and result aggregator tests."""

from __future__ import annotations

from datetime import date

import pytest

from debtpilot.services.debts import Debt
from debtpilot.services.errors import ScheduleError
from debtpilot.services.schedules import (
    PaymentRecord,
    ScheduleRecorder,
    add_months,
    aggregate_result,
)


def _record(month: int, balance: float, payment: float = 100.0, interest: float = 5.0) -> PaymentRecord:
    return PaymentRecord(
        date=add_months(date(2025, 1, 1), month),
        month=month,
        payment=payment,
        principal=payment - interest,
        interest=interest,
        remaining_balance=balance,
    )


@pytest.fixture
def debts():
    return [
        Debt(id="a", name="A", remaining_amount=200.0, interest_rate=12.0, minimum_payment=100.0),
        Debt(id="b", name="B", remaining_amount=95.0, interest_rate=6.0, minimum_payment=100.0),
    ]


def test_add_months_wraps_years():
    assert add_months(date(2025, 12, 31), 1) == date(2026, 1, 1)
    assert add_months(date(2025, 1, 20), 0) == date(2025, 1, 1)
    assert add_months(date(2025, 3, 1), 24) == date(2027, 3, 1)


def test_recorder_keeps_chronological_history(debts):
    recorder = ScheduleRecorder(debts)
    recorder.record("a", _record(1, 105.0))
    recorder.record("a", _record(2, 0.0, payment=106.05, interest=1.05))

    history = recorder.payments("a")
    assert [entry.month for entry in history] == [1, 2]
    assert recorder.payoff_month("a") == 2
    assert recorder.payoff_month("b") is None

    # Returned lists are copies.
    history.clear()
    assert len(recorder.payments("a")) == 2


def test_recorder_rejects_out_of_order_records(debts):
    recorder = ScheduleRecorder(debts)
    recorder.record("a", _record(2, 150.0))
    with pytest.raises(ScheduleError, match="not after"):
        recorder.record("a", _record(2, 100.0))
    with pytest.raises(ScheduleError):
        recorder.record("a", _record(1, 100.0))


def test_recorder_rejects_records_after_payoff(debts):
    recorder = ScheduleRecorder(debts)
    recorder.record("b", _record(1, 0.0, payment=95.48, interest=0.48))
    with pytest.raises(ScheduleError, match="already paid off"):
        recorder.record("b", _record(2, 0.0))


def test_recorder_rejects_unknown_debt(debts):
    recorder = ScheduleRecorder(debts)
    with pytest.raises(ScheduleError, match="Unknown debt"):
        recorder.record("zzz", _record(1, 10.0))


def test_build_plans_requires_completed_schedules(debts):
    recorder = ScheduleRecorder(debts)
    recorder.record("a", _record(1, 105.0))
    with pytest.raises(ScheduleError):
        recorder.build_plans()


def test_build_plans_totals(debts):
    recorder = ScheduleRecorder(debts)
    recorder.record("a", _record(1, 102.0, payment=100.0, interest=2.0))
    recorder.record("a", _record(2, 0.0, payment=103.02, interest=1.02))
    recorder.record("b", _record(1, 0.0, payment=95.48, interest=0.48))

    plan_a, plan_b = recorder.build_plans()
    assert plan_a.id == "a"
    assert plan_a.monthly_payment == 100.0
    assert plan_a.remaining_amount == 200.0
    assert plan_a.payoff_month == 2
    assert plan_a.payoff_date == date(2025, 3, 1)
    assert plan_a.total_interest == pytest.approx(3.02)
    assert plan_a.total_paid == pytest.approx(203.02)
    assert plan_a.preview(1) == plan_a.payments[:1]
    assert plan_a.preview(0) == []
    assert plan_b.payoff_month == 1


def test_aggregate_orders_by_payoff_then_priority(debts):
    recorder = ScheduleRecorder(debts)
    recorder.record("a", _record(1, 0.0, payment=202.0, interest=2.0))
    recorder.record("b", _record(1, 0.0, payment=95.48, interest=0.48))

    result = aggregate_result(
        recorder.build_plans(), strategy="avalanche", extra_payment=0.0, start=date(2025, 1, 1)
    )
    assert [plan.id for plan in result.debt_plans] == ["a", "b"]
    assert result.total_months == 1
    assert result.payoff_date == date(2025, 2, 1)
    assert result.total_paid == pytest.approx(297.48)
    assert result.total_interest_paid == pytest.approx(2.48)


def test_aggregate_moves_earlier_payoff_first(debts):
    recorder = ScheduleRecorder(debts)
    recorder.record("a", _record(1, 105.0))
    recorder.record("a", _record(2, 0.0, payment=106.05, interest=1.05))
    recorder.record("b", _record(1, 0.0, payment=95.48, interest=0.48))

    result = aggregate_result(
        recorder.build_plans(), strategy="avalanche", extra_payment=0.0, start=date(2025, 1, 1)
    )
    assert [plan.id for plan in result.debt_plans] == ["b", "a"]
    assert result.total_months == 2
    assert result.plan_for("b").payoff_month == 1
    assert result.plan_for("missing") is None


def test_aggregate_empty():
    result = aggregate_result([], strategy="snowball", extra_payment=25.0, start=date(2025, 6, 1))
    assert result.total_months == 0
    assert result.debt_plans == []
    assert result.payoff_date == date(2025, 6, 1)
    assert result.to_dict() == {
        "strategy": "snowball",
        "extra_payment": 25.0,
        "total_months": 0,
        "total_interest_paid": 0,
        "total_paid": 0,
        "payoff_date": "2025-06-01",
        "debt_plans": [],
    }
