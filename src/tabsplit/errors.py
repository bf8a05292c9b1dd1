"""Errors raised by the settlement engine.

Every error here is local and deterministic: retrying with the same input
fails the same way.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Hashable


class SettlementError(ValueError):
    pass


class InputContractViolation(SettlementError):
    """Malformed item or participant data handed in by the caller."""


class ZeroParticipantDivision(SettlementError):
    """An amount resolved to an empty set of participants to split over."""


class ArithmeticInvariantViolation(SettlementError):
    pass


class EmptyParticipantSet(InputContractViolation, ZeroParticipantDivision):
    def __init__(self, message: str = "bill must have at least one participant") -> None:
        super().__init__(message)


class PayerNotInParticipants(InputContractViolation):
    def __init__(self, payer_id: Hashable) -> None:
        self.payer_id = payer_id
        super().__init__(f"payer {payer_id!r} is not a bill participant")


class NegativeAmount(InputContractViolation):
    def __init__(self, amount: Decimal, what: str = "amount") -> None:
        self.amount = amount
        super().__init__(f"{what} must be non-negative, got {amount}")


class UnknownParticipant(InputContractViolation):
    def __init__(self, participant_id: Hashable, where: str = "bill") -> None:
        self.participant_id = participant_id
        super().__init__(f"participant {participant_id!r} is not part of the {where}")


class ConservationViolation(ArithmeticInvariantViolation):
    def __init__(self, residual: Decimal, tolerance: Decimal) -> None:
        self.residual = residual
        self.tolerance = tolerance
        super().__init__(f"balances do not sum to zero: residual {residual} exceeds tolerance {tolerance}")


class BillNotFound(LookupError):
    def __init__(self, bill_id: Hashable) -> None:
        self.bill_id = bill_id
        super().__init__(f"bill {bill_id!r} not found")


class SessionNotFound(LookupError):
    def __init__(self, session_id: Hashable) -> None:
        self.session_id = session_id
        super().__init__(f"session {session_id!r} not found")
