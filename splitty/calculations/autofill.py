"""
Budget Auto-Fill

Suggests next month's category limits from the average personal
spend of the preceding months.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional

from splitty.calculations.period import (
    aggregate_spend,
    month_bounds_for_key,
    month_key,
    shift_month,
)
from splitty.models.ledger import GENERAL_CATEGORY_ID, Budget, Expense


ZERO = Decimal("0")
CENT = Decimal("0.01")


def suggest_budget(
    expenses: Iterable[Expense],
    target_month_start: datetime,
    hidden_categories: Iterable[str] = frozenset(),
    lookback_months: int = 3,
) -> dict[str, Decimal]:
    """
    Average monthly spend per category over the `lookback_months`
    months before the target month.

    Months without spend count as zero. General, hidden categories and
    averages that round to zero are left out.
    """
    if lookback_months < 1:
        return {}

    history = list(expenses)
    target_key = month_key(target_month_start)
    totals: dict[str, Decimal] = {}

    for offset in range(1, lookback_months + 1):
        start, end = month_bounds_for_key(shift_month(target_key, -offset))
        spend = aggregate_spend(history, start, end, hidden_categories)
        for category_id, amount in spend.per_category.items():
            totals[category_id] = totals.get(category_id, ZERO) + amount

    suggestion = {}
    for category_id, total in totals.items():
        if category_id == GENERAL_CATEGORY_ID:
            continue
        average = (total / lookback_months).quantize(CENT, rounding=ROUND_HALF_UP)
        if average > 0:
            suggestion[category_id] = average
    return suggestion


def apply_budget_suggestion(
    existing: Optional[Budget],
    month: str,
    suggestion: Mapping[str, Decimal],
) -> Budget:
    """Budget for `month` with suggested limits overriding existing ones."""
    categories = dict(existing.categories) if existing else {}
    categories.update(suggestion)
    return Budget(month=month, categories=categories)
