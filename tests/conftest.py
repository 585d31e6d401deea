"""Pytest configuration and shared fixtures for DebtPilot tests.

Every test runs against an isolated data directory so configuration, log
files and SQLite databases never touch the developer's real instance folder.
"""

from __future__ import annotations

from datetime import date

import pytest

from debtpilot.config import TestConfig
from debtpilot.infra.database import bootstrap_database
from debtpilot.infra.repositories import SQLModelLiabilityRepository
from debtpilot.models import Liability
from debtpilot.services.debts import Debt

START = date(2025, 1, 15)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Point configuration at a temporary data directory."""

    monkeypatch.setenv("DEBTPILOT_DATA_DIR", str(tmp_path / "instance"))
    monkeypatch.setenv("DEBTPILOT_DEV_MODE", "false")
    for name in (
        "DEBTPILOT_DATABASE_URL",
        "DEBTPILOT_HORIZON_MONTHS",
        "DEBTPILOT_ROUNDING_UNIT",
        "DEBTPILOT_DEFAULT_STRATEGY",
    ):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite engine with all tables created."""

    engine, _ = bootstrap_database(TestConfig())
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory for repositories that expect Callable[[], Session]."""

    from debtpilot.infra.database import create_session_factory

    return create_session_factory(db_engine)


@pytest.fixture
def liability_repo(session_factory) -> SQLModelLiabilityRepository:
    return SQLModelLiabilityRepository(session_factory)


@pytest.fixture
def liability_factory(liability_repo):
    """Factory for creating stored liabilities.

    Usage:
        card = liability_factory(name="Visa", balance=1200.0, apr=19.99)
    """

    def _create_liability(
        name: str = "Test Card",
        balance: float = 1000.0,
        apr: float = 18.0,
        minimum_payment: float = 50.0,
        user_id: int = 1,
        **kwargs,
    ) -> Liability:
        liability = Liability(
            name=name,
            balance=balance,
            apr=apr,
            minimum_payment=minimum_payment,
            user_id=user_id,
            **kwargs,
        )
        return liability_repo.create(liability, user_id=user_id)

    return _create_liability


# =============================================================================
# Debt Fixtures
# =============================================================================


@pytest.fixture
def three_debts() -> list[Debt]:
    """Debts whose balance order and rate order disagree."""

    return [
        Debt(id="store", name="Store Card", remaining_amount=500.0, interest_rate=10.0, minimum_payment=25.0),
        Debt(id="visa", name="Visa", remaining_amount=5000.0, interest_rate=22.0, minimum_payment=120.0),
        Debt(id="car", name="Car Loan", remaining_amount=2500.0, interest_rate=15.0, minimum_payment=60.0),
    ]


# =============================================================================
# Helpers
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (difference: {abs(actual - expected)})"
