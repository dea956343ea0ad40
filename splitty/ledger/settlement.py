"""
Settlement Recorder

Records a manual "settle up" between the user and a friend.

CRITICAL: This is the only place the core raises to its caller.
Invalid amounts and directions raise ValidationError synchronously so
the settle-up screen can show the message; every attempt, accepted or
rejected, is audited when a logger is configured.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional
from uuid import UUID

from splitty.audit import AuditLogger
from splitty.ledger.balances import settlement_delta
from splitty.models.ledger import GENERAL_CATEGORY_ID, SELF_ID, Expense, Friend
from splitty.models.views import SettlementOutcome
from splitty.services.interface import NotFoundError, ValidationError


INVALID_AMOUNT_MESSAGE = "Please enter a valid amount greater than 0."


def parse_settlement_amount(raw: Any) -> Decimal:
    """
    Turn user input into a positive amount.

    Accepts Decimal, int, float or text such as "1,250.50".

    Raises:
        ValidationError: If the input is not a finite number above zero
    """
    if isinstance(raw, bool) or raw is None:
        raise ValidationError(INVALID_AMOUNT_MESSAGE)

    try:
        if isinstance(raw, Decimal):
            value = raw
        elif isinstance(raw, (int, float)):
            value = Decimal(str(raw))
        elif isinstance(raw, str):
            value = Decimal(raw.replace(",", "").strip())
        else:
            raise ValidationError(INVALID_AMOUNT_MESSAGE)
    except InvalidOperation:
        raise ValidationError(INVALID_AMOUNT_MESSAGE)

    if not value.is_finite() or value <= 0:
        raise ValidationError(INVALID_AMOUNT_MESSAGE)
    return value


class SettlementRecorder:
    """
    Validates and records settlements.

    Flow:
    1. Parse the amount and check the direction
    2. Find the friend on the other side
    3. Build the settlement expense
    4. Apply the ledger's settlement rule to the friend's balance
    5. Audit
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit_logger = audit_logger

    def settle_up(
        self,
        friends: Iterable[Friend],
        payer_id: str,
        receiver_id: str,
        amount: Any,
        when: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> SettlementOutcome:
        """
        Record `payer_id` paying `receiver_id`.

        Returns:
            The settlement expense and the friend with the updated balance

        Raises:
            ValidationError: Amount not > 0, or neither/both sides are the user
            NotFoundError: The friend on the other side is unknown
        """
        try:
            value = parse_settlement_amount(amount)
            if payer_id == receiver_id:
                raise ValidationError("A settlement needs two different people.")
            if SELF_ID not in (payer_id, receiver_id):
                raise ValidationError("You must be either the payer or the receiver.")
        except ValidationError as e:
            self._reject(payer_id, receiver_id, amount, str(e), correlation_id)
            raise

        friend_id = receiver_id if payer_id == SELF_ID else payer_id
        friend = next((f for f in friends if f.id == friend_id), None)
        if friend is None:
            message = f"Friend not found: {friend_id}"
            self._reject(payer_id, receiver_id, amount, message, correlation_id)
            raise NotFoundError(message)

        expense = Expense(
            amount=value,
            date=when or datetime.now(),
            category=GENERAL_CATEGORY_ID,
            payer_id=payer_id,
            split_with=[receiver_id],
            is_settlement=True,
            description="Settlement",
        )

        _, delta = settlement_delta(payer_id, receiver_id, value)
        updated = friend.model_copy(update={"balance": friend.balance + delta})

        if self._audit_logger:
            self._audit_logger.log_settlement_recorded(
                expense_id=expense.id,
                payer_id=payer_id,
                receiver_id=receiver_id,
                amount=value,
                new_balance=updated.balance,
                correlation_id=correlation_id,
            )

        return SettlementOutcome(expense=expense, friend=updated)

    def _reject(
        self,
        payer_id: str,
        receiver_id: str,
        amount: Any,
        reason: str,
        correlation_id: Optional[UUID],
    ) -> None:
        if self._audit_logger:
            self._audit_logger.log_settlement_rejected(
                payer_id=payer_id,
                receiver_id=receiver_id,
                raw_amount=amount,
                reason=reason,
                correlation_id=correlation_id,
            )


def settle_up(
    friends: Iterable[Friend],
    payer_id: str,
    receiver_id: str,
    amount: Any,
    when: Optional[datetime] = None,
) -> SettlementOutcome:
    """Record a settlement without auditing. See SettlementRecorder.settle_up."""
    return SettlementRecorder().settle_up(friends, payer_id, receiver_id, amount, when=when)
