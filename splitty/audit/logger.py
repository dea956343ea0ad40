"""
Audit Logger

DESIGN DECISION: Every settlement attempt, and every detected balance drift,
is logged. This provides:
1. Traceability of every change to money owed
2. Debugging capability when cached balances go stale
3. History the app can show the user

The audit logger:
- Is synchronous, like the rest of the core
- Gracefully handles storage failures (never breaks the calling flow)
- Supports correlation IDs to trace related events
"""

from decimal import Decimal
from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from splitty.models.audit import AuditEvent, AuditEventBuilder
from splitty.audit.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An audit storage backend, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("splitty.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_settlement_recorded(
        self,
        expense_id: str,
        payer_id: str,
        receiver_id: str,
        amount: Decimal,
        new_balance: Decimal,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful settlement."""
        event = AuditEventBuilder.settlement_recorded(
            expense_id=expense_id,
            payer_id=payer_id,
            receiver_id=receiver_id,
            amount=amount,
            new_balance=new_balance,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_settlement_rejected(
        self,
        payer_id: str,
        receiver_id: str,
        raw_amount: Any,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a settlement that failed validation."""
        event = AuditEventBuilder.settlement_rejected(
            payer_id=payer_id,
            receiver_id=receiver_id,
            raw_amount=raw_amount,
            reason=reason,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_balance_drift(
        self,
        friend_id: str,
        cached: Decimal,
        recomputed: Decimal,
    ) -> None:
        event = AuditEventBuilder.balance_drift_detected(
            friend_id=friend_id,
            cached=cached,
            recomputed=recomputed,
        )
        self.log(event)

    def log_category_reassigned(
        self,
        removed_id: str,
        target_id: str,
        expense_count: int,
    ) -> None:
        event = AuditEventBuilder.category_reassigned(
            removed_id=removed_id,
            target_id=target_id,
            expense_count=expense_count,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this when a settle-up screen opens and pass it to every
    settlement recorded from it.
    """
    return uuid4()
