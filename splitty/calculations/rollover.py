"""
Rollover Engine

Carries unspent budget forward. For every budgeted month before the
target month, each category contributes `budget - spent`; overspend
contributes a negative amount. Contributions add up across every
qualifying month with no decay or cap unless a horizon is given.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from splitty.calculations.period import (
    aggregate_spend,
    month_bounds_for_key,
    month_key,
    shift_month,
)
from splitty.models.ledger import Budget, Expense


ZERO = Decimal("0")


def compute_rollover(
    budgets: Iterable[Budget],
    expenses: Iterable[Expense],
    target_month_start: datetime,
    hidden_categories: Iterable[str] = frozenset(),
    enabled: bool = False,
    horizon_months: Optional[int] = None,
) -> dict[str, Decimal]:
    """
    Signed carry-forward per category for the month starting at
    `target_month_start`.

    Args:
        budgets: Every stored monthly budget
        expenses: Full expense history
        target_month_start: First instant of the month being viewed
        hidden_categories: Categories left out of the result
        enabled: When False the result is always empty
        horizon_months: Only look back this many months (None = all,
            below 1 = none)

    Returns:
        Category -> accumulated (budget - spent). Categories never
        budgeted in a past month have no key.
    """
    if not enabled:
        return {}

    hidden = frozenset(hidden_categories)
    history = list(expenses)
    target_key = month_key(target_month_start)
    earliest_key = None
    if horizon_months is not None:
        if horizon_months < 1:
            return {}
        earliest_key = shift_month(target_key, -horizon_months)

    rollover: dict[str, Decimal] = {}
    for budget in sorted(budgets, key=lambda b: b.month):
        if budget.month >= target_key:
            continue
        if earliest_key and budget.month < earliest_key:
            continue

        # Spend is computed over all categories; hidden ones are only
        # dropped when accumulating.
        start, end = month_bounds_for_key(budget.month)
        spent = aggregate_spend(history, start, end).per_category

        for category_id, limit in budget.categories.items():
            if category_id in hidden:
                continue
            carried = limit - spent.get(category_id, ZERO)
            rollover[category_id] = rollover.get(category_id, ZERO) + carried

    return rollover
