"""
Budget Overview Pipeline

Ties the budget calculations together for one month:

    expenses ──► aggregate_spend ──┐
    budgets  ──► compute_rollover ─┼─► build_category_rows ──► BudgetOverview
    budget for the month ──────────┘        summarize_budget ─┘

DESIGN DECISION: The host app owns the one mutable state container.
On every relevant change (month navigation, data refresh, settings edit)
it calls build_budget_overview with the current collections and a
BudgetPreferences snapshot. Nothing here is cached or stored.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from splitty.calculations import (
    aggregate_spend,
    build_category_rows,
    compute_rollover,
    find_budget,
    month_bounds_for_key,
    suggest_budget,
    summarize_budget,
)
from splitty.config import BudgetPreferences
from splitty.models.ledger import Budget, Expense
from splitty.models.views import BudgetOverview


def build_budget_overview(
    expenses: Iterable[Expense],
    budgets: Iterable[Budget],
    month_key: str,
    preferences: Optional[BudgetPreferences] = None,
    as_of: Optional[date] = None,
) -> BudgetOverview:
    """
    Compute everything the budget screen shows for `month_key`.

    Args:
        expenses: Full expense history
        budgets: Every stored monthly budget
        month_key: Month to show, `YYYY-MM`
        preferences: Hidden categories, order and rollover settings
        as_of: Today's date, for the daily average (defaults to today)
    """
    preferences = preferences or BudgetPreferences()
    as_of = as_of or date.today()
    history = list(expenses)
    all_budgets = list(budgets)

    month_start, month_end = month_bounds_for_key(month_key)
    current_budget = find_budget(all_budgets, month_key)

    spend = aggregate_spend(
        history,
        month_start,
        month_end,
        preferences.hidden_categories,
    )
    rollover = compute_rollover(
        all_budgets,
        history,
        month_start,
        hidden_categories=preferences.hidden_categories,
        enabled=preferences.rollover_enabled,
        horizon_months=preferences.rollover_horizon_months,
    )
    rows = build_category_rows(
        spend.per_category,
        current_budget,
        rollover,
        hidden_categories=preferences.hidden_categories,
        category_order=preferences.category_order,
        rollover_enabled=preferences.rollover_enabled,
        warning_ratio=preferences.warning_ratio,
    )
    summary = summarize_budget(
        spend,
        current_budget,
        month_start,
        as_of,
        hidden_categories=preferences.hidden_categories,
    )

    return BudgetOverview(
        month_key=month_key,
        spend=spend,
        rollover=rollover,
        rows=rows,
        summary=summary,
    )


def suggest_budget_for(
    expenses: Iterable[Expense],
    month_key: str,
    preferences: Optional[BudgetPreferences] = None,
) -> dict[str, Decimal]:
    """Auto-fill suggestion for `month_key` using the configured lookback."""
    preferences = preferences or BudgetPreferences()
    month_start, _ = month_bounds_for_key(month_key)
    return suggest_budget(
        expenses,
        month_start,
        hidden_categories=preferences.hidden_categories,
        lookback_months=preferences.autofill_lookback_months,
    )
