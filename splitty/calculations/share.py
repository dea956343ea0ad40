"""
Share Calculator

How much of a bill belongs to one participant.

An equal split always divides by the number of people in `split_with`
plus one slot for the payer, whoever the payer is. The result is
"my portion of a bill split N ways", not "what I paid out of pocket".
"""

from decimal import Decimal

from splitty.models.ledger import SELF_ID, EqualSplit, Expense, UnequalSplit


ZERO = Decimal("0")


def compute_participant_share(expense: Expense, participant_id: str) -> Decimal:
    """
    Portion of `expense` attributable to `participant_id`.

    Equal:   amount / (len(split_with) + 1)
    Unequal: details[participant_id], or 0 when absent
    Never negative.
    """
    split = expense.split
    if isinstance(split, UnequalSplit):
        share = split.details.get(participant_id, ZERO)
    elif isinstance(split, EqualSplit):
        share = expense.amount / (len(expense.split_with) + 1)
    else:
        share = ZERO
    return max(ZERO, share)


def compute_my_share(expense: Expense) -> Decimal:
    """The user's own portion of an expense."""
    return compute_participant_share(expense, SELF_ID)


def user_is_sharer(expense: Expense) -> bool:
    """Does the user take part in an expense someone else paid for?"""
    if SELF_ID in expense.split_with:
        return True
    split = expense.split
    return isinstance(split, UnequalSplit) and SELF_ID in split.details
