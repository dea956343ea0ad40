"""Friend balances, the debt graph and settlements."""

from splitty.ledger.balances import (
    apply_recomputed_balances,
    balance_caption,
    compute_balances,
    friends_with_open_balances,
    reconcile_balances,
    settlement_delta,
    suggest_settlement,
)
from splitty.ledger.graph import build_settlement_graph, find_group
from splitty.ledger.settlement import (
    SettlementRecorder,
    parse_settlement_amount,
    settle_up,
)

__all__ = [
    "apply_recomputed_balances",
    "balance_caption",
    "compute_balances",
    "friends_with_open_balances",
    "reconcile_balances",
    "settlement_delta",
    "suggest_settlement",
    "build_settlement_graph",
    "find_group",
    "SettlementRecorder",
    "parse_settlement_amount",
    "settle_up",
]
