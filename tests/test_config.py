"""Tests for settings loading."""

from decimal import Decimal

import pytest

from trip_ledger.config import Settings, load_settings
from trip_ledger.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run from an empty directory so no .env file is picked up."""
    monkeypatch.chdir(tmp_path)


def test_defaults():
    settings = load_settings()

    assert settings.default_currency_exponent == 2
    assert settings.percentage_tolerance == Decimal("0.000001")
    assert settings.dust_threshold_minor_units == 0


def test_exponent_lookup():
    settings = Settings()

    assert settings.exponent_for("USD") == 2
    assert settings.exponent_for("jpy") == 0
    assert settings.exponent_for("KWD") == 3
    assert settings.exponent_for("XYZ") == 2


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("TRIP_LEDGER_DUST_THRESHOLD_MINOR_UNITS", "5")
    monkeypatch.setenv("TRIP_LEDGER_CURRENCY_EXPONENTS", '{"XYZ": 4}')

    settings = load_settings()

    assert settings.dust_threshold_minor_units == 5
    assert settings.exponent_for("XYZ") == 4


def test_env_file(tmp_path):
    (tmp_path / ".env").write_text(
        "TRIP_LEDGER_DEFAULT_CURRENCY_EXPONENT=3\n", encoding="utf-8"
    )

    assert load_settings().exponent_for("USD") == 3


def test_invalid_value_raises_configuration_error(monkeypatch):
    monkeypatch.setenv("TRIP_LEDGER_DUST_THRESHOLD_MINOR_UNITS", "lots")

    with pytest.raises(ConfigurationError, match="Failed to load settings"):
        load_settings()
