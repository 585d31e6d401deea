"""DebtPilot debt repayment strategy package."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, Strategy
from .services.debts import Debt, compare_strategies, simulate

__all__ = ["BaseConfig", "DevConfig", "Strategy", "Debt", "compare_strategies", "simulate"]
