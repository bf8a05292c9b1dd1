"""Netting of debt records across several bills."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List

from tabsplit.models import DebtRecord, DebtTotals, ParticipantId
from tabsplit.services.settlement import reduce_balances
from tabsplit.utils.money import ZERO


def net_balances(debts: Iterable[DebtRecord]) -> dict[ParticipantId, Decimal]:
    balances: dict[ParticipantId, Decimal] = {}
    for debt in debts:
        balances[debt.debtor_id] = balances.get(debt.debtor_id, ZERO) - debt.amount
        balances[debt.creditor_id] = balances.get(debt.creditor_id, ZERO) + debt.amount
    return balances


def simplify_debts(debts: Iterable[DebtRecord]) -> List[DebtRecord]:
    """Replace a pile of outstanding debts with the fewest transfers that settle them."""
    return reduce_balances(net_balances(debts))


def user_totals(debts: Iterable[DebtRecord], user_id: ParticipantId) -> DebtTotals:
    """Sum what ``user_id`` owes and is owed across ``debts``.

    Debt records carry no paid flag; pass only the outstanding ones.
    """
    totals = DebtTotals()
    for debt in debts:
        if debt.debtor_id == user_id:
            totals.owed += debt.amount
        if debt.creditor_id == user_id:
            totals.owed_to += debt.amount
    return totals
