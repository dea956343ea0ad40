"""
Settlement Graph

Splits friends into the two layers of the debt flow diagram:
those who owe the user (above) and those the user owes (below).
"""

from typing import Iterable, Optional

from splitty.models.ledger import Friend, Group
from splitty.models.views import SettlementGraph


def find_group(groups: Iterable[Group], group_id: Optional[str]) -> Optional[Group]:
    """The group with `group_id`; None for no id or an unknown id."""
    if not group_id:
        return None
    for group in groups:
        if group.id == group_id:
            return group
    return None


def build_settlement_graph(
    friends: Iterable[Friend],
    group: Optional[Group] = None,
) -> SettlementGraph:
    """
    Partition friends by the sign of their balance.

    When `group` is given only its members are considered; a friend
    matches by id or by linked user id. Settled friends (balance 0)
    appear in neither layer.
    """
    members = [f for f in friends if group is None or group.includes(f)]

    owed_to_user = sorted(
        (f for f in members if f.balance > 0),
        key=lambda f: f.balance,
        reverse=True,
    )
    user_owes = sorted(
        (f for f in members if f.balance < 0),
        key=lambda f: abs(f.balance),
        reverse=True,
    )
    return SettlementGraph(owed_to_user=owed_to_user, user_owes=user_owes)
