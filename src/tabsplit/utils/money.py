"""Decimal helpers for currency amounts."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

from tabsplit.config import get_settings
from tabsplit.errors import InputContractViolation

MoneyLike = Decimal | int | float | str

ZERO = Decimal("0")


def to_decimal(value: MoneyLike) -> Decimal:
    # str() first so a float like 0.1 becomes Decimal("0.1"), not its binary expansion
    if isinstance(value, bool):
        raise InputContractViolation(f"not a monetary amount: {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except (InvalidOperation, ValueError) as exc:
            raise InputContractViolation(f"not a monetary amount: {value!r}") from exc
    if not result.is_finite():
        raise InputContractViolation(f"not a monetary amount: {value!r}")
    return result


def round_money(value: Decimal, places: int | None = None) -> Decimal:
    """Round to currency precision, half away from zero."""
    if places is None:
        quantum = get_settings().quantum
    else:
        quantum = Decimal(10) ** -places
    return value.quantize(quantum, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)
