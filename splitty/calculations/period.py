"""
Period Aggregator

Filters expenses to one calendar month and sums the user's share
per category.

Month boundaries are local calendar time:
    start = day 1, 00:00:00
    end   = last day, 23:59:59 (inclusive)
Timezone-aware timestamps are converted to local time first.
"""

import calendar
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from splitty.calculations.share import compute_my_share
from splitty.models.ledger import Budget, Expense
from splitty.models.views import BudgetSummary, PeriodSpend, ShareLine


ZERO = Decimal("0")

_MONTH_KEY = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


# =============================================================================
# MONTH ARITHMETIC
# =============================================================================

def to_local_naive(moment: datetime) -> datetime:
    """Express a timestamp as naive local time."""
    if moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """First and last instant of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return (
        datetime(year, month, 1, 0, 0, 0),
        datetime(year, month, last_day, 23, 59, 59),
    )


def month_key(moment: date) -> str:
    """`YYYY-MM` key of the month containing `moment`."""
    return f"{moment.year:04d}-{moment.month:02d}"


def parse_month_key(key: str) -> tuple[int, int]:
    """
    Split a `YYYY-MM` key into (year, month).

    Raises:
        ValueError: If the key is malformed
    """
    match = _MONTH_KEY.match(key or "")
    if not match:
        raise ValueError(f"Invalid month key: {key!r} (expected YYYY-MM)")
    return int(match.group(1)), int(match.group(2))


def month_bounds_for_key(key: str) -> tuple[datetime, datetime]:
    return month_bounds(*parse_month_key(key))


def shift_month(key: str, months: int) -> str:
    """Move a month key forwards (or backwards, for negative `months`)."""
    year, month = parse_month_key(key)
    index = year * 12 + (month - 1) + months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def find_budget(budgets: Iterable[Budget], key: str) -> Optional[Budget]:
    """The budget for a month, if one was set."""
    for budget in budgets:
        if budget.month == key:
            return budget
    return None


# =============================================================================
# AGGREGATION
# =============================================================================

def _in_period(
    expense: Expense,
    month_start: datetime,
    month_end: datetime,
) -> bool:
    when = to_local_naive(expense.date)
    return to_local_naive(month_start) <= when <= to_local_naive(month_end)


def aggregate_spend(
    expenses: Iterable[Expense],
    month_start: datetime,
    month_end: datetime,
    hidden_categories: Iterable[str] = frozenset(),
) -> PeriodSpend:
    """
    Sum the user's share of each expense in the period, per category.

    Settlements and hidden categories are skipped. Expenses whose share
    is zero still count as matched but never create a zero bucket.
    `total` is the sum of the per-category values.
    """
    hidden = frozenset(hidden_categories)
    per_category: dict[str, Decimal] = {}
    matched: list[Expense] = []

    for expense in expenses:
        if expense.is_settlement or expense.category in hidden:
            continue
        if not _in_period(expense, month_start, month_end):
            continue

        matched.append(expense)
        share = compute_my_share(expense)
        if share > 0:
            per_category[expense.category] = per_category.get(expense.category, ZERO) + share

    return PeriodSpend(
        per_category=per_category,
        total=sum(per_category.values(), ZERO),
        matched_expenses=matched,
    )


def category_expenses(
    expenses: Iterable[Expense],
    category_id: str,
    month_start: datetime,
    month_end: datetime,
) -> list[ShareLine]:
    """
    Drill-down for one category and month: every expense the user
    carries a share of, newest first.
    """
    lines = []
    for expense in expenses:
        if expense.is_settlement or expense.category != category_id:
            continue
        if not _in_period(expense, month_start, month_end):
            continue
        share = compute_my_share(expense)
        if share > 0:
            lines.append(ShareLine(expense=expense, my_share=share))

    lines.sort(key=lambda line: to_local_naive(line.expense.date), reverse=True)
    return lines


def summarize_budget(
    spend: PeriodSpend,
    budget: Optional[Budget],
    month_start: datetime,
    as_of: date,
    hidden_categories: Iterable[str] = frozenset(),
) -> BudgetSummary:
    """
    Header totals for a month.

    The daily average divides by the days elapsed so far when `as_of`
    falls inside the month, otherwise by the length of the month.
    """
    hidden = frozenset(hidden_categories)
    total_budget = ZERO
    if budget is not None:
        total_budget = sum(
            (limit for cat, limit in budget.categories.items() if cat not in hidden),
            ZERO,
        )

    if (as_of.year, as_of.month) == (month_start.year, month_start.month):
        days = as_of.day
    else:
        days = calendar.monthrange(month_start.year, month_start.month)[1]
    days = max(1, days)

    return BudgetSummary(
        total_budget=total_budget,
        total_spent=spend.total,
        remaining=max(ZERO, total_budget - spend.total),
        daily_average=spend.total / days,
        days_counted=days,
    )
