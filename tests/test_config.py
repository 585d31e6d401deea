"""Configuration loading tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from debtpilot.config import BaseConfig, DevConfig, TestConfig


def test_defaults(isolated_env):
    config = BaseConfig()
    assert config.DATA_DIR == (isolated_env / "instance").resolve()
    assert config.DATA_DIR.is_dir()
    assert config.DATABASE_URL == f"sqlite:///{config.DATA_DIR / 'debtpilot.db'}"
    assert config.HORIZON_MONTHS == 600
    assert config.ROUNDING_UNIT is None
    assert config.DEFAULT_STRATEGY == "avalanche"
    assert config.DEV_MODE is False
    assert config.simulation_options() == {"horizon_months": 600, "rounding_unit": None}


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DEBTPILOT_HORIZON_MONTHS", "360")
    monkeypatch.setenv("DEBTPILOT_ROUNDING_UNIT", "0.01")
    monkeypatch.setenv("DEBTPILOT_DEFAULT_STRATEGY", " Snowball ")
    monkeypatch.setenv("DEBTPILOT_DEV_MODE", "yes")

    config = DevConfig()
    assert config.HORIZON_MONTHS == 360
    assert config.ROUNDING_UNIT == 0.01
    assert config.DEFAULT_STRATEGY == "snowball"
    assert config.DEV_MODE is True
    assert config.DEBUG is True


@pytest.mark.parametrize(
    "name, value",
    [
        ("DEBTPILOT_HORIZON_MONTHS", "0"),
        ("DEBTPILOT_HORIZON_MONTHS", "forever"),
        ("DEBTPILOT_ROUNDING_UNIT", "-0.01"),
        ("DEBTPILOT_ROUNDING_UNIT", "cent"),
        ("DEBTPILOT_DEFAULT_STRATEGY", "tsunami"),
    ],
)
def test_invalid_values_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        BaseConfig()


def test_blank_rounding_unit_means_real_arithmetic(monkeypatch):
    monkeypatch.setenv("DEBTPILOT_ROUNDING_UNIT", "  ")
    assert BaseConfig().ROUNDING_UNIT is None


def test_test_config_uses_in_memory_database():
    config = TestConfig()
    assert config.DATABASE_URL == "sqlite://"
    assert config.TESTING is True
    assert "poolclass" in config.sqlalchemy_engine_options()
    assert isinstance(config.DATA_DIR, Path)
