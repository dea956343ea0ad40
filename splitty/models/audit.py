"""
Audit Models for Splitty

Settlements are the only place the core changes money owed,
so every one of them (and every rejected attempt) is recorded.
Balance reconciliation also reports drift through this trail.

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Settlements
    SETTLEMENT_RECORDED = "settlement_recorded"
    SETTLEMENT_REJECTED = "settlement_rejected"

    # Balance maintenance
    BALANCE_DRIFT_DETECTED = "balance_drift_detected"

    # Category maintenance
    CATEGORY_REASSIGNED = "category_reassigned"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every settlement attempt creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'friend', 'expense', 'category')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one settle-up screen)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.settlement_recorded(expense_id, "self", "f1", amount)
    """

    @staticmethod
    def settlement_recorded(
        expense_id: str,
        payer_id: str,
        receiver_id: str,
        amount: Decimal,
        new_balance: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTLEMENT_RECORDED,
            entity_type="expense",
            entity_id=expense_id,
            correlation_id=correlation_id,
            description=f"Settlement of {amount} from {payer_id} to {receiver_id}",
            details={
                "payer_id": payer_id,
                "receiver_id": receiver_id,
                "amount": str(amount),
                "new_balance": str(new_balance),
            },
            is_user_action=True,
        )

    @staticmethod
    def settlement_rejected(
        payer_id: str,
        receiver_id: str,
        raw_amount: Any,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SETTLEMENT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="settlement",
            correlation_id=correlation_id,
            description=f"Settlement rejected: {reason}",
            details={
                "payer_id": payer_id,
                "receiver_id": receiver_id,
                "amount": str(raw_amount),
            },
            error_message=reason,
            is_user_action=True,
        )

    @staticmethod
    def balance_drift_detected(
        friend_id: str,
        cached: Decimal,
        recomputed: Decimal,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_DRIFT_DETECTED,
            severity=AuditSeverity.WARNING,
            entity_type="friend",
            entity_id=friend_id,
            description=f"Cached balance for {friend_id} differs from history",
            details={
                "cached": str(cached),
                "recomputed": str(recomputed),
            },
        )

    @staticmethod
    def category_reassigned(
        removed_id: str,
        target_id: str,
        expense_count: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CATEGORY_REASSIGNED,
            entity_type="category",
            entity_id=removed_id,
            description=f"{expense_count} expense(s) moved from {removed_id} to {target_id}",
            details={
                "removed_id": removed_id,
                "target_id": target_id,
                "expense_count": expense_count,
            },
            is_user_action=True,
        )
