"""
Category Merge & Ranking

Builds the rows of the monthly budget screen: every category with
spend, a budget, or (when enabled) rollover, ordered the way the
user arranged them.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping, Optional, Sequence

from splitty.models.ledger import Budget
from splitty.models.views import WARNING_RATIO, CategoryRow


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def budget_percentage(spent: Decimal, effective_budget: Decimal) -> int:
    """
    Progress-bar percentage, rounded half-up and clamped to [0, 100].

    Spending against no budget reads as 100%.
    """
    if effective_budget > 0:
        raw = min(spent / effective_budget * HUNDRED, HUNDRED)
    elif spent > 0:
        raw = HUNDRED
    else:
        raw = ZERO
    rounded = int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(100, rounded))


def build_category_rows(
    spend_by_category: Mapping[str, Decimal],
    current_budget: Optional[Budget],
    rollover_by_category: Mapping[str, Decimal],
    hidden_categories: Iterable[str] = frozenset(),
    category_order: Sequence[str] = (),
    rollover_enabled: bool = False,
    warning_ratio: Decimal = WARNING_RATIO,
) -> list[CategoryRow]:
    """
    Merge spend, budget and rollover into ordered display rows.

    Ordering:
    1. Categories in `category_order`, by their position there
    2. Everything else after them, highest spend first
    Ties keep encounter order (spend, then budget, then rollover).
    """
    hidden = frozenset(hidden_categories)
    limits = current_budget.categories if current_budget else {}
    rollover = rollover_by_category if rollover_enabled else {}

    candidates = list(spend_by_category) + list(limits) + list(rollover)
    category_ids = [c for c in dict.fromkeys(candidates) if c not in hidden]

    rows = []
    for category_id in category_ids:
        spent = spend_by_category.get(category_id, ZERO)
        budget = limits.get(category_id, ZERO)
        carried = rollover.get(category_id, ZERO)
        effective = max(ZERO, budget + carried)
        rows.append(CategoryRow(
            category_id=category_id,
            spent=spent,
            budget=budget,
            rollover=carried,
            effective_budget=effective,
            percentage=budget_percentage(spent, effective),
            warning_ratio=warning_ratio,
        ))

    positions: dict[str, int] = {}
    for index, category_id in enumerate(category_order):
        positions.setdefault(category_id, index)

    def rank(row: CategoryRow) -> tuple:
        if row.category_id in positions:
            return (0, positions[row.category_id], ZERO)
        return (1, 0, -row.spent)

    return sorted(rows, key=rank)


def move_category(
    category_order: Sequence[str],
    category_id: str,
    new_index: int,
) -> list[str]:
    """
    Preference list after dragging `category_id` to `new_index`.

    Ids not yet in the list are inserted; the index is clamped.
    """
    order = [c for c in category_order if c != category_id]
    new_index = max(0, min(new_index, len(order)))
    order.insert(new_index, category_id)
    return order
