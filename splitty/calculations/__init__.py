"""
Budget Calculations Package

Pure functions from expense/budget collections to budget view models:
- Personal share of an expense
- Monthly spend per category
- Budget rollover across months
- Ordered category rows
- Budget auto-fill suggestions
"""

from splitty.calculations.share import (
    compute_my_share,
    compute_participant_share,
    user_is_sharer,
)
from splitty.calculations.period import (
    aggregate_spend,
    category_expenses,
    find_budget,
    month_bounds,
    month_bounds_for_key,
    month_key,
    parse_month_key,
    shift_month,
    summarize_budget,
    to_local_naive,
)
from splitty.calculations.rollover import compute_rollover
from splitty.calculations.ranking import (
    budget_percentage,
    build_category_rows,
    move_category,
)
from splitty.calculations.autofill import (
    apply_budget_suggestion,
    suggest_budget,
)

__all__ = [
    # Share
    "compute_my_share",
    "compute_participant_share",
    "user_is_sharer",
    # Period
    "aggregate_spend",
    "category_expenses",
    "find_budget",
    "month_bounds",
    "month_bounds_for_key",
    "month_key",
    "parse_month_key",
    "shift_month",
    "summarize_budget",
    "to_local_naive",
    # Rollover
    "compute_rollover",
    # Ranking
    "budget_percentage",
    "build_category_rows",
    "move_category",
    # Auto-fill
    "apply_budget_suggestion",
    "suggest_budget",
]
