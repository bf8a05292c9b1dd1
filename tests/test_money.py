import logging
from decimal import Decimal

import pytest
import structlog

from tabsplit.config import Settings, get_settings
from tabsplit.errors import InputContractViolation
from tabsplit.logging import configure_logging
from tabsplit.utils.money import round_money, sum_money, to_decimal


def test_to_decimal_accepts_common_inputs():
    assert to_decimal(Decimal("1.50")) == Decimal("1.50")
    assert to_decimal(3) == Decimal("3")
    assert to_decimal(" 2.75 ") == Decimal("2.75")
    assert to_decimal(0.1) == Decimal("0.1")


@pytest.mark.parametrize(
    "value",
    ["abc", "", "NaN", "Infinity", True, Decimal("NaN"), Decimal("Infinity"), Decimal("-Infinity")],
)
def test_to_decimal_rejects_garbage(value):
    with pytest.raises(InputContractViolation):
        to_decimal(value)


def test_round_money_half_up():
    assert round_money(Decimal("0.005")) == Decimal("0.01")
    assert round_money(Decimal("2.675")) == Decimal("2.68")
    assert round_money(Decimal("2.5"), places=0) == Decimal("3")
    assert str(round_money(Decimal("7"))) == "7.00"


def test_sum_money():
    assert sum_money([]) == Decimal("0")
    assert sum_money([Decimal("0.10"), Decimal("0.20")]) == Decimal("0.30")


def test_settings_defaults():
    settings = Settings()
    assert settings.currency_places == 2
    assert settings.quantum == Decimal("0.01")
    assert settings.conservation_tolerance == Decimal("0.01")


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("CURRENCY_PLACES", "0")
    monkeypatch.setenv("CONSERVATION_TOLERANCE", "0.5")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.quantum == Decimal("1")
        assert settings.conservation_tolerance == Decimal("0.5")
        assert round_money(Decimal("4.4")) == Decimal("4")
    finally:
        get_settings.cache_clear()


def test_configure_logging_falls_back_to_info():
    configure_logging("not-a-level")
    try:
        assert structlog.is_configured()
        assert structlog.get_config()["wrapper_class"] is structlog.make_filtering_bound_logger(logging.INFO)
    finally:
        structlog.reset_defaults()
