"""
Activity Feed Queries

Filters and enriches the expense history for the activity screen.

DESIGN DECISION: Names are resolved here, once per query, so the
screen never looks anything up while rendering. Stale references
degrade to placeholders ("Unknown", General) instead of failing.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Optional

from splitty.calculations.period import to_local_naive
from splitty.models.ledger import SELF_ID, Expense, Friend, Group
from splitty.models.views import ActivityItem, ActivityQuery
from splitty.services.interface import CategoryLookupInterface


UNKNOWN_NAME = "Unknown"


def _amount_text(amount: Decimal) -> str:
    """Amount as the user would type it: no exponent, no trailing zeros."""
    text = format(amount, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def all_tags(expenses: Iterable[Expense]) -> list[str]:
    """Every tag used in the history, sorted."""
    return sorted({tag for expense in expenses for tag in expense.tags})


class ActivityFeed:
    """
    Executes ActivityQuery filters against an expense list.

    GUARANTEES:
    - Only returns expenses that exist in the input
    - Newest first
    - Every item carries a resolved category and payer name
    """

    def __init__(
        self,
        friends: Iterable[Friend],
        groups: Iterable[Group],
        category_lookup: CategoryLookupInterface,
        unknown_friend_names: Optional[Mapping[str, str]] = None,
    ):
        self._friend_names = {f.id: f.name for f in friends}
        self._group_names = {g.id: g.name for g in groups}
        self._categories = category_lookup
        self._unknown_friend_names = dict(unknown_friend_names or {})

    def payer_name(self, payer_id: str) -> str:
        """'You', a friend's name, a remembered name, or 'Unknown'."""
        if payer_id == SELF_ID:
            return "You"
        return (
            self._friend_names.get(payer_id)
            or self._unknown_friend_names.get(payer_id)
            or UNKNOWN_NAME
        )

    def run(
        self,
        expenses: Iterable[Expense],
        query: Optional[ActivityQuery] = None,
    ) -> list[ActivityItem]:
        query = query or ActivityQuery()
        needle = query.search.lower()

        selected = [
            e for e in expenses
            if (not needle or self._matches_search(e, needle))
            and (not query.tag or query.tag in e.tags)
        ]
        selected.sort(key=lambda e: to_local_naive(e.date), reverse=True)

        return [
            ActivityItem(
                expense=e,
                category=self._categories.get_category_by_id(e.category),
                payer_name=self.payer_name(e.payer_id),
                group_name=self._group_names.get(e.group_id) if e.group_id else None,
            )
            for e in selected
        ]

    def _matches_search(self, expense: Expense, needle: str) -> bool:
        # Search matches a friend's name only, never the "Unknown" placeholder
        if expense.payer_id == SELF_ID:
            payer = "you"
        else:
            payer = self._friend_names.get(expense.payer_id, "")

        return (
            needle in expense.description.lower()
            or needle in _amount_text(expense.amount)
            or needle in payer.lower()
            or any(needle in tag.lower() for tag in expense.tags)
        )
