from __future__ import annotations

from typing import Hashable, List, Protocol, Sequence, Tuple

from tabsplit.errors import BillNotFound, SessionNotFound
from tabsplit.logging import get_logger
from tabsplit.models import Bill, DebtRecord, Item, ParticipantId, Session
from tabsplit.services.settlement import calculate_debts
from tabsplit.utils.money import ZERO, MoneyLike

DEFAULT_SESSION_TITLE = "Session Bill"

log = get_logger(__name__)


class BillRepository(Protocol):
    async def load_bill(self, bill_id: Hashable) -> Bill | None: ...

    async def save_debts(self, bill_id: Hashable, debts: Sequence[DebtRecord]) -> None: ...


class SessionRepository(Protocol):
    async def load_session(self, session_id: Hashable) -> Session | None: ...

    async def create_bill(self, session_id: Hashable, bill: Bill) -> Hashable: ...

    async def save_debts(self, bill_id: Hashable, debts: Sequence[DebtRecord]) -> None: ...

    async def mark_session_finalized(self, session_id: Hashable, bill_id: Hashable) -> None: ...


async def finalize_bill(repo: BillRepository, bill_id: Hashable) -> List[DebtRecord]:
    bill = await repo.load_bill(bill_id)
    if bill is None:
        raise BillNotFound(bill_id)

    debts = calculate_debts(bill)
    await repo.save_debts(bill_id, debts)
    log.info("bill.finalized", bill_id=str(bill_id), debts=len(debts))
    return debts


def bill_from_session(
    session: Session,
    payer_id: ParticipantId,
    tip: MoneyLike = ZERO,
    title: str | None = None,
) -> Bill:
    """Turn a session tab into a bill.

    A session item bought for one participant is charged to them alone;
    any other item is shared by the whole table.
    """
    items = []
    for session_item in session.items:
        if session_item.for_user_id is not None and not session_item.is_shared:
            items.append(
                Item(price=session_item.price, participants=(session_item.for_user_id,), name=session_item.name)
            )
        else:
            items.append(Item(price=session_item.price, is_shared=True, name=session_item.name))

    return Bill(
        items=items,
        participants=session.participants,
        payer_id=payer_id,
        tip=tip,
        title=title or DEFAULT_SESSION_TITLE,
    )


async def finalize_session(
    repo: SessionRepository,
    session_id: Hashable,
    payer_id: ParticipantId,
    tip: MoneyLike = ZERO,
    title: str | None = None,
) -> Tuple[Hashable, List[DebtRecord]]:
    session = await repo.load_session(session_id)
    if session is None:
        raise SessionNotFound(session_id)

    bill = bill_from_session(session, payer_id, tip, title)
    # nothing is written until the debts are computed
    debts = calculate_debts(bill)

    bill_id = await repo.create_bill(session_id, bill)
    await repo.save_debts(bill_id, debts)
    await repo.mark_session_finalized(session_id, bill_id)

    log.info(
        "session.finalized",
        session_id=str(session_id),
        bill_id=str(bill_id),
        total=str(bill.total),
        debts=len(debts),
    )
    return bill_id, debts
