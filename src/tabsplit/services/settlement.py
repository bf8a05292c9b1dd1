from __future__ import annotations

from decimal import Decimal
from typing import Iterable, List, Mapping, Sequence

from tabsplit.config import get_settings
from tabsplit.errors import (
    ConservationViolation,
    EmptyParticipantSet,
    NegativeAmount,
    PayerNotInParticipants,
    UnknownParticipant,
)
from tabsplit.logging import get_logger
from tabsplit.models import Bill, DebtRecord, ParticipantId
from tabsplit.services.aggregate import compute_owed_amounts
from tabsplit.utils.money import MoneyLike, round_money, sum_money, to_decimal

log = get_logger(__name__)


def validate_bill(bill: Bill) -> None:
    if not bill.participants:
        raise EmptyParticipantSet()
    if bill.payer_id not in bill.participants:
        raise PayerNotInParticipants(bill.payer_id)
    if bill.tip < 0:
        raise NegativeAmount(bill.tip, "tip")
    for item in bill.items:
        if item.price < 0:
            raise NegativeAmount(item.price, "item price")


def settle_bill(
    owed_amounts: Mapping[ParticipantId, MoneyLike],
    payer_id: ParticipantId,
    *,
    places: int | None = None,
) -> List[DebtRecord]:
    """Star settlement: every participant except the payer owes the payer their total.

    Records come out in the mapping's order.
    """
    if payer_id not in owed_amounts:
        raise PayerNotInParticipants(payer_id)

    debts: list[DebtRecord] = []
    for participant, owed in owed_amounts.items():
        if participant == payer_id:
            continue
        owed_amount = to_decimal(owed)
        if owed_amount < 0:
            raise NegativeAmount(owed_amount, "owed amount")
        amount = round_money(owed_amount, places)
        if amount > 0:
            debts.append(DebtRecord(debtor_id=participant, creditor_id=payer_id, amount=amount))
    return debts


def calculate_debts(bill: Bill) -> List[DebtRecord]:
    validate_bill(bill)
    owed = compute_owed_amounts(bill.items, bill.participants, bill.tip)
    debts = settle_bill(owed, bill.payer_id)
    log.info(
        "bill.debts.calculated",
        title=bill.title,
        items=len(bill.items),
        participants=len(bill.participants),
        total=str(bill.total),
        debts=len(debts),
    )
    return debts


def bill_balances(bill: Bill) -> dict[ParticipantId, Decimal]:
    """Signed balance sheet of a bill: the payer is credited with the total, everyone is debited their share."""
    validate_bill(bill)
    owed = compute_owed_amounts(bill.items, bill.participants, bill.tip)
    balances = {participant: -amount for participant, amount in owed.items()}
    balances[bill.payer_id] += bill.total
    return balances


def _discovery_order(
    balances: Mapping[ParticipantId, Decimal],
    order: Iterable[ParticipantId] | None,
) -> Sequence[ParticipantId]:
    if order is None:
        return tuple(balances)

    sequence = tuple(dict.fromkeys(order))
    for participant in sequence:
        if participant not in balances:
            raise UnknownParticipant(participant, "balance sheet")
    listed = set(sequence)
    for participant in balances:
        if participant not in listed:
            raise UnknownParticipant(participant, "participant order")
    return sequence


def reduce_balances(
    balances: Mapping[ParticipantId, MoneyLike],
    order: Iterable[ParticipantId] | None = None,
    *,
    tolerance: MoneyLike | None = None,
    places: int | None = None,
) -> List[DebtRecord]:
    """Collapse a signed balance sheet into point-to-point transfers.

    Negative balances owe, positive balances are owed. Debtors and creditors
    are matched with a two-cursor sweep in discovery order (``order`` when
    given, mapping order otherwise), so at most
    ``len(debtors) + len(creditors) - 1`` records are emitted. Amounts are
    rounded only when a record is emitted, and a transfer that rounds to
    zero is skipped. The conservation check up front bounds whatever is left
    unmatched after the sweep.

    Raises ConservationViolation if the balances do not sum to zero within
    ``tolerance``.
    """
    limit = get_settings().conservation_tolerance if tolerance is None else to_decimal(tolerance)
    amounts = {participant: to_decimal(value) for participant, value in balances.items()}

    residual = sum_money(amounts.values())
    if abs(residual) > limit:
        raise ConservationViolation(residual, limit)

    debtors: list[tuple[ParticipantId, Decimal]] = []
    creditors: list[tuple[ParticipantId, Decimal]] = []
    for participant in _discovery_order(amounts, order):
        balance = amounts[participant]
        if balance < 0:
            debtors.append((participant, -balance))
        elif balance > 0:
            creditors.append((participant, balance))

    transfers: list[DebtRecord] = []
    i, j = 0, 0

    while i < len(debtors) and j < len(creditors):
        debt_id, debt_amount = debtors[i]
        cred_id, cred_amount = creditors[j]

        transfer_amount = min(debt_amount, cred_amount)
        rounded = round_money(transfer_amount, places)
        if rounded > 0:
            transfers.append(DebtRecord(debtor_id=debt_id, creditor_id=cred_id, amount=rounded))

        debt_amount -= transfer_amount
        cred_amount -= transfer_amount

        if debt_amount == 0:
            i += 1
        else:
            debtors[i] = (debt_id, debt_amount)

        if cred_amount == 0:
            j += 1
        else:
            creditors[j] = (cred_id, cred_amount)

    log.debug(
        "settlement.reduce",
        debtors=len(debtors),
        creditors=len(creditors),
        transfers=len(transfers),
    )
    return transfers
