"""
Data Models Package

This package contains all Pydantic models used by the Splitty core.
Every collection handed to the core, and every result it returns,
conforms to these schemas.
"""

from splitty.models.ledger import (
    GENERAL_CATEGORY_ID,
    SELF_ID,
    Budget,
    Category,
    EqualSplit,
    Expense,
    Friend,
    Group,
    SplitPolicy,
    UnequalSplit,
)
from splitty.models.views import (
    WARNING_RATIO,
    ActivityItem,
    ActivityQuery,
    BalanceDrift,
    BudgetOverview,
    BudgetSummary,
    CategoryRow,
    PeriodSpend,
    SettlementGraph,
    SettlementOutcome,
    SettlementSuggestion,
    ShareLine,
)
from splitty.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "GENERAL_CATEGORY_ID",
    "SELF_ID",
    "Budget",
    "Category",
    "EqualSplit",
    "Expense",
    "Friend",
    "Group",
    "SplitPolicy",
    "UnequalSplit",
    # View models
    "WARNING_RATIO",
    "ActivityItem",
    "ActivityQuery",
    "BalanceDrift",
    "BudgetOverview",
    "BudgetSummary",
    "CategoryRow",
    "PeriodSpend",
    "SettlementGraph",
    "SettlementOutcome",
    "SettlementSuggestion",
    "ShareLine",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
