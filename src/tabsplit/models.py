from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Hashable, Sequence

from tabsplit.utils.money import ZERO, sum_money, to_decimal

ParticipantId = Hashable


@dataclass(slots=True)
class Item:
    price: Decimal
    is_shared: bool = False
    participants: Sequence[ParticipantId] = ()
    name: str | None = None

    def __post_init__(self) -> None:
        self.price = to_decimal(self.price)
        self.participants = tuple(self.participants)


@dataclass(slots=True)
class Bill:
    items: Sequence[Item]
    participants: Sequence[ParticipantId]
    payer_id: ParticipantId
    tip: Decimal = ZERO
    title: str | None = None

    def __post_init__(self) -> None:
        self.items = tuple(self.items)
        self.participants = tuple(dict.fromkeys(self.participants))
        self.tip = to_decimal(self.tip if self.tip is not None else ZERO)

    @property
    def total(self) -> Decimal:
        return sum_money(item.price for item in self.items) + self.tip


@dataclass(frozen=True, slots=True)
class DebtRecord:
    debtor_id: ParticipantId
    creditor_id: ParticipantId
    amount: Decimal


@dataclass(slots=True)
class SessionItem:
    price: Decimal
    is_shared: bool = True
    for_user_id: ParticipantId | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        self.price = to_decimal(self.price)


@dataclass(slots=True)
class Session:
    participants: Sequence[ParticipantId]
    items: Sequence[SessionItem] = field(default_factory=tuple)


@dataclass(slots=True)
class DebtTotals:
    owed: Decimal = ZERO
    owed_to: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.owed_to - self.owed
