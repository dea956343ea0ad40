"""
Balance Ledger

Derives every friend's net balance from the full expense history.

Sign convention (from the user's point of view):
    balance > 0  the friend owes the user
    balance < 0  the user owes the friend

DESIGN DECISION: The history is the record of truth.
`Friend.balance` as stored by the app is a cache; reconcile_balances
reports where it has drifted from the recomputed value.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from splitty.audit import AuditLogger
from splitty.calculations.share import (
    compute_my_share,
    compute_participant_share,
    user_is_sharer,
)
from splitty.models.ledger import SELF_ID, Expense, Friend
from splitty.models.views import BalanceDrift, SettlementSuggestion
from splitty.services.interface import CurrencyFormatterInterface


ZERO = Decimal("0")
CENT = Decimal("0.01")
SETTLED_EPSILON = Decimal("0.01")


def settlement_delta(
    payer_id: str,
    receiver_id: Optional[str],
    amount: Decimal,
) -> Optional[tuple[str, Decimal]]:
    """
    Balance change caused by a settlement transfer.

    Returns (friend_id, delta), or None for transfers that do not
    involve exactly one of the user and a friend.
    """
    if not receiver_id or payer_id == receiver_id:
        return None
    if payer_id == SELF_ID:
        # User paid the friend back: user owes less
        return receiver_id, amount
    if receiver_id == SELF_ID:
        # Friend paid the user: friend owes less
        return payer_id, -amount
    return None


def compute_balances(expenses: Iterable[Expense]) -> dict[str, Decimal]:
    """
    Net balance per friend over the whole history.

    - User paid: every counterparty owes the user their share.
    - Friend paid and the user shared: the user owes the payer
      the user's share.
    - Settlements move the balance back towards zero.
    Friend-to-friend debts are not tracked.
    """
    balances: dict[str, Decimal] = {}

    def add(friend_id: str, delta: Decimal) -> None:
        balances[friend_id] = balances.get(friend_id, ZERO) + delta

    for expense in expenses:
        if expense.is_settlement:
            change = settlement_delta(expense.payer_id, expense.receiver_id, expense.amount)
            if change:
                add(*change)
            continue

        if expense.payer_id == SELF_ID:
            for participant_id in dict.fromkeys(expense.split_with):
                if participant_id == SELF_ID:
                    continue
                add(participant_id, compute_participant_share(expense, participant_id))
        elif user_is_sharer(expense):
            add(expense.payer_id, -compute_my_share(expense))

    return balances


def apply_recomputed_balances(
    friends: Iterable[Friend],
    expenses: Iterable[Expense],
) -> list[Friend]:
    """Friends with `balance` replaced by the value derived from history."""
    balances = compute_balances(expenses)
    return [
        friend.model_copy(update={"balance": balances.get(friend.id, ZERO)})
        for friend in friends
    ]


def reconcile_balances(
    friends: Iterable[Friend],
    expenses: Iterable[Expense],
    tolerance: Decimal = SETTLED_EPSILON,
    audit_logger: Optional[AuditLogger] = None,
) -> list[BalanceDrift]:
    """
    Compare cached friend balances against the history.

    Returns one BalanceDrift per friend whose cached balance is off by
    more than `tolerance`; each is also logged when a logger is given.
    """
    balances = compute_balances(expenses)
    drifts = []
    for friend in friends:
        recomputed = balances.get(friend.id, ZERO)
        if abs(friend.balance - recomputed) > tolerance:
            drift = BalanceDrift(
                friend_id=friend.id,
                cached=friend.balance,
                recomputed=recomputed,
            )
            drifts.append(drift)
            if audit_logger:
                audit_logger.log_balance_drift(
                    friend_id=friend.id,
                    cached=friend.balance,
                    recomputed=recomputed,
                )
    return drifts


def friends_with_open_balances(
    friends: Iterable[Friend],
    epsilon: Decimal = SETTLED_EPSILON,
) -> list[Friend]:
    """Friends the settle-up screen lists: anything beyond a rounding cent."""
    return [friend for friend in friends if abs(friend.balance) > epsilon]


def suggest_settlement(friend: Friend) -> SettlementSuggestion:
    """
    Pre-fill the settle-up form for a friend.

    If the user owes, the user pays; otherwise the friend pays.
    The amount is the full outstanding balance, rounded to cents.
    """
    amount = abs(friend.balance).quantize(CENT, rounding=ROUND_HALF_UP)
    if friend.balance < 0:
        return SettlementSuggestion(payer_id=SELF_ID, receiver_id=friend.id, amount=amount)
    return SettlementSuggestion(payer_id=friend.id, receiver_id=SELF_ID, amount=amount)


def balance_caption(
    friend: Friend,
    formatter: CurrencyFormatterInterface,
    epsilon: Decimal = SETTLED_EPSILON,
) -> str:
    """One-line description of where the user stands with a friend."""
    if abs(friend.balance) <= epsilon:
        return "Settled up"
    amount = formatter.format_currency(abs(friend.balance))
    if friend.balance > 0:
        return f"Owes you {amount}"
    return f"You owe {amount}"
