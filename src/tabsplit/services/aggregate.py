from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping, Sequence

from tabsplit.errors import EmptyParticipantSet, NegativeAmount, UnknownParticipant, ZeroParticipantDivision
from tabsplit.models import Item, ParticipantId
from tabsplit.utils.money import ZERO, MoneyLike, to_decimal


def split_evenly(amount: Decimal, participants: Sequence[ParticipantId]) -> dict[ParticipantId, Decimal]:
    """Divide ``amount`` over ``participants`` without rounding."""
    if amount < 0:
        raise NegativeAmount(amount)
    if not participants:
        raise ZeroParticipantDivision("cannot split an amount over zero participants")

    share = amount / Decimal(len(participants))
    return {participant: share for participant in participants}


def merge_shares(shares: Iterable[Mapping[ParticipantId, Decimal]]) -> dict[ParticipantId, Decimal]:
    result: dict[ParticipantId, Decimal] = {}
    for share in shares:
        for participant, amount in share.items():
            result[participant] = result.get(participant, ZERO) + amount
    return result


def item_split_set(item: Item, roster: Sequence[ParticipantId]) -> Sequence[ParticipantId]:
    # an explicit but empty participant list splits like a shared item
    if item.is_shared or not item.participants:
        return roster

    split_set = tuple(dict.fromkeys(item.participants))
    members = set(roster)
    for participant in split_set:
        if participant not in members:
            raise UnknownParticipant(participant)
    return split_set


def compute_owed_amounts(
    items: Iterable[Item],
    participants: Iterable[ParticipantId],
    tip: MoneyLike = ZERO,
) -> dict[ParticipantId, Decimal]:
    """Sum what each participant consumed on a bill, tip included.

    Shares stay unrounded; rounding happens once per emitted debt.
    The result is keyed in roster order and includes the payer.
    """
    roster = tuple(dict.fromkeys(participants))
    if not roster:
        raise EmptyParticipantSet()

    tip_amount = to_decimal(tip)
    if tip_amount < 0:
        raise NegativeAmount(tip_amount, "tip")

    owed: dict[ParticipantId, Decimal] = {participant: ZERO for participant in roster}

    per_item = []
    for item in items:
        if item.price < 0:
            raise NegativeAmount(item.price, "item price")
        per_item.append(split_evenly(item.price, item_split_set(item, roster)))

    if tip_amount > 0:
        per_item.append(split_evenly(tip_amount, roster))

    for participant, amount in merge_shares(per_item).items():
        owed[participant] += amount

    return owed
