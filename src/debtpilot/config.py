"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


class Strategy(str, Enum):
    """Debt payoff ordering strategies."""

    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"


STRATEGIES = tuple(strategy.value for strategy in Strategy)


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}.") from exc


def _env_float(name: str) -> float | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}.") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DebtPilot"
    DB_FILENAME = "debtpilot.db"
    DEFAULT_HORIZON_MONTHS = 600

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("DEBTPILOT_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("DEBTPILOT_DATABASE_URL", self._build_sqlite_url())
        self.HORIZON_MONTHS = _env_int("DEBTPILOT_HORIZON_MONTHS", self.DEFAULT_HORIZON_MONTHS)
        self.ROUNDING_UNIT = _env_float("DEBTPILOT_ROUNDING_UNIT")
        self.DEFAULT_STRATEGY = (
            os.getenv("DEBTPILOT_DEFAULT_STRATEGY", "avalanche").strip().lower()
        )

        if self.HORIZON_MONTHS <= 0:
            raise ValueError("DEBTPILOT_HORIZON_MONTHS must be positive.")
        if self.ROUNDING_UNIT is not None and self.ROUNDING_UNIT <= 0:
            raise ValueError("DEBTPILOT_ROUNDING_UNIT must be positive when set.")
        if self.DEFAULT_STRATEGY not in STRATEGIES:
            raise ValueError(
                f"DEBTPILOT_DEFAULT_STRATEGY must be one of {', '.join(STRATEGIES)}."
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("DEBTPILOT_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        return {"connect_args": {"check_same_thread": False}}

    def simulation_options(self) -> dict[str, Any]:
        """Keyword arguments forwarded to the strategy simulator."""

        return {
            "horizon_months": self.HORIZON_MONTHS,
            "rounding_unit": self.ROUNDING_UNIT,
        }


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for the test-suite: in-memory database."""

    __test__ = False  # keep pytest from collecting this class

    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        # One shared connection so every session sees the same in-memory schema.
        from sqlalchemy.pool import StaticPool

        options = super().sqlalchemy_engine_options()
        options["poolclass"] = StaticPool
        return options
