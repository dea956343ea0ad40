"""
Tests for friend balances, settlements and the settlement graph.
"""

import pytest
from datetime import datetime
from decimal import Decimal

from splitty.audit import AuditLogger, InMemoryAuditStorage
from splitty.ledger import (
    SettlementRecorder,
    apply_recomputed_balances,
    balance_caption,
    build_settlement_graph,
    compute_balances,
    find_group,
    friends_with_open_balances,
    parse_settlement_amount,
    reconcile_balances,
    settle_up,
    settlement_delta,
    suggest_settlement,
)
from splitty.models.audit import AuditEventType
from splitty.models.ledger import Expense, Friend, Group, UnequalSplit
from splitty.config import CurrencySettings
from splitty.services import CurrencyFormatter, NotFoundError, ValidationError


WHEN = datetime(2024, 3, 10, 12, 0)


def make_expense(amount, payer_id="self", split_with=None, **kwargs):
    return Expense(
        amount=Decimal(str(amount)),
        date=WHEN,
        payer_id=payer_id,
        split_with=split_with or [],
        **kwargs,
    )


class FailingStorage(InMemoryAuditStorage):
    def append_event(self, event):
        raise RuntimeError("storage offline")


class TestBalanceLedger:
    """Tests for compute_balances."""

    def test_user_paid_equal_split(self):
        """Test each friend owes their equal share."""
        balances = compute_balances([make_expense(90, split_with=["f1", "f2"])])
        assert balances == {"f1": Decimal("30"), "f2": Decimal("30")}

    def test_user_paid_unequal_split(self):
        """Test a sharer missing from the split details owes nothing."""
        expense = make_expense(
            100, split_with=["f1", "f2"],
            split=UnequalSplit(details={"self": Decimal("10"), "f1": Decimal("90")}),
        )
        balances = compute_balances([expense])
        assert balances["f1"] == Decimal("90")
        assert balances["f2"] == Decimal("0")

    def test_friend_paid_user_shared(self):
        """Test the user owes the payer their own share."""
        balances = compute_balances([make_expense(60, payer_id="f1", split_with=["self", "f2"])])
        assert balances == {"f1": Decimal("-20")}

    def test_friend_paid_without_user_is_ignored(self):
        balances = compute_balances([make_expense(60, payer_id="f1", split_with=["f2"])])
        assert balances == {}

    def test_settlements_move_towards_zero(self):
        expenses = [
            make_expense(40, payer_id="f1", split_with=["self"]),
            make_expense(20, split_with=["f1"], is_settlement=True),
            make_expense(50, split_with=["f2"]),
            make_expense(25, payer_id="f2", split_with=["self"], is_settlement=True),
        ]
        assert compute_balances(expenses) == {"f1": Decimal("0"), "f2": Decimal("0")}

    def test_friend_to_friend_settlement_is_ignored(self):
        expense = make_expense(10, payer_id="f1", split_with=["f2"], is_settlement=True)
        assert compute_balances([expense]) == {}

    def test_settlement_delta(self):
        assert settlement_delta("self", "f1", Decimal("5")) == ("f1", Decimal("5"))
        assert settlement_delta("f1", "self", Decimal("5")) == ("f1", Decimal("-5"))
        assert settlement_delta("f1", "f2", Decimal("5")) is None
        assert settlement_delta("self", None, Decimal("5")) is None


class TestReconciliation:
    """Tests for comparing cached balances with the history."""

    def test_repeated_settle_up_matches_history(self):
        """Test balances kept by settle_up agree with a full recompute."""
        expenses = [make_expense(40, payer_id="f1", split_with=["self"])]
        friend = apply_recomputed_balances([Friend(id="f1", name="Alex")], expenses)[0]
        assert friend.balance == Decimal("-20")

        for amount in ("5", "7.50", "7.50"):
            outcome = settle_up([friend], "self", "f1", amount, when=WHEN)
            friend = outcome.friend
            expenses.append(outcome.expense)

        assert friend.balance == Decimal("0")
        assert compute_balances(expenses)["f1"] == friend.balance
        assert reconcile_balances([friend], expenses) == []

    def test_drift_is_reported_and_audited(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage=storage)
        friends = [Friend(id="f1", name="Alex", balance=Decimal("12"))]
        expenses = [make_expense(20, split_with=["f1"])]

        [drift] = reconcile_balances(friends, expenses, audit_logger=logger)
        assert drift.recomputed == Decimal("10")
        assert drift.difference == Decimal("2")

        [event] = storage.get_events_by_entity("friend", "f1")
        assert event.event_type == AuditEventType.BALANCE_DRIFT_DETECTED

    def test_tolerance_absorbs_rounding(self):
        friends = [Friend(id="f1", name="Alex", balance=Decimal("3.33"))]
        expenses = [make_expense(10, split_with=["f1", "f2"])]
        assert reconcile_balances(friends, expenses) == []


class TestSettlement:
    """Tests for SettlementRecorder."""

    def test_user_pays_back_debt(self):
        """Test balance -20 settled by the user reaches zero."""
        friends = [Friend(id="f1", name="Alex", balance=Decimal("-20"))]
        outcome = settle_up(friends, "self", "f1", 20, when=WHEN)

        assert outcome.friend.balance == Decimal("0")
        assert outcome.expense.is_settlement is True
        assert outcome.expense.category == "general"
        assert outcome.expense.split_with == ["f1"]
        assert outcome.expense.receiver_id == "f1"
        assert outcome.expense.description == "Settlement"
        assert friends[0].balance == Decimal("-20")

    def test_friend_pays_user(self):
        friends = [Friend(id="f1", name="Alex", balance=Decimal("30"))]
        outcome = settle_up(friends, "f1", "self", "1,250.50", when=WHEN)
        assert outcome.friend.balance == Decimal("-1220.50")

    @pytest.mark.parametrize("raw", [0, -5, "", "abc", None, "NaN", "inf", True])
    def test_invalid_amounts(self, raw):
        with pytest.raises(ValidationError, match="valid amount"):
            parse_settlement_amount(raw)

    def test_parse_accepts_text_with_commas(self):
        assert parse_settlement_amount(" 1,250.50 ") == Decimal("1250.50")
        assert parse_settlement_amount(2.5) == Decimal("2.5")

    def test_user_must_be_a_party(self):
        friends = [Friend(id="f1", name="Alex"), Friend(id="f2", name="Sam")]
        with pytest.raises(ValidationError):
            settle_up(friends, "f1", "f2", 10)
        with pytest.raises(ValidationError):
            settle_up(friends, "self", "self", 10)

    def test_unknown_friend(self):
        with pytest.raises(NotFoundError):
            settle_up([], "self", "ghost", 10)

    def test_attempts_are_audited(self):
        storage = InMemoryAuditStorage()
        recorder = SettlementRecorder(audit_logger=AuditLogger(storage=storage))
        friends = [Friend(id="f1", name="Alex", balance=Decimal("-20"))]

        with pytest.raises(ValidationError):
            recorder.settle_up(friends, "self", "f1", "-3")
        outcome = recorder.settle_up(friends, "self", "f1", "20")

        recent = storage.get_recent_events()
        assert [e.event_type for e in recent] == [
            AuditEventType.SETTLEMENT_RECORDED,
            AuditEventType.SETTLEMENT_REJECTED,
        ]
        assert recent[0].entity_id == outcome.expense.id
        assert recent[0].details["new_balance"] == "0"

    def test_storage_failure_does_not_break_settlement(self):
        recorder = SettlementRecorder(audit_logger=AuditLogger(storage=FailingStorage()))
        friends = [Friend(id="f1", name="Alex", balance=Decimal("-20"))]
        outcome = recorder.settle_up(friends, "self", "f1", "20")
        assert outcome.friend.balance == Decimal("0")


class TestSettleUpHelpers:
    """Tests for settle-up screen helpers."""

    def test_suggestion_when_user_owes(self):
        suggestion = suggest_settlement(Friend(id="f1", name="Alex", balance=Decimal("-12.345")))
        assert suggestion.user_pays is True
        assert suggestion.receiver_id == "f1"
        assert suggestion.amount == Decimal("12.35")

    def test_suggestion_when_friend_owes(self):
        suggestion = suggest_settlement(Friend(id="f1", name="Alex", balance=Decimal("8")))
        assert suggestion.payer_id == "f1"
        assert suggestion.receiver_id == "self"

    def test_open_balances_skip_rounding_noise(self):
        friends = [
            Friend(id="f1", name="A", balance=Decimal("0.01")),
            Friend(id="f2", name="B", balance=Decimal("-0.02")),
            Friend(id="f3", name="C"),
        ]
        assert [f.id for f in friends_with_open_balances(friends)] == ["f2"]

    def test_balance_caption(self):
        formatter = CurrencyFormatter(CurrencySettings())
        assert balance_caption(Friend(id="f1", name="A", balance=Decimal("1234.5")), formatter) == "Owes you $1,234.50"
        assert balance_caption(Friend(id="f1", name="A", balance=Decimal("-3")), formatter) == "You owe $3.00"
        assert balance_caption(Friend(id="f1", name="A", balance=Decimal("0.004")), formatter) == "Settled up"


class TestSettlementGraph:
    """Tests for build_settlement_graph."""

    def test_partition_and_order(self):
        friends = [
            Friend(id="a", name="A", balance=Decimal("10")),
            Friend(id="b", name="B", balance=Decimal("-40")),
            Friend(id="c", name="C", balance=Decimal("25")),
            Friend(id="d", name="D", balance=Decimal("0")),
            Friend(id="e", name="E", balance=Decimal("-5")),
        ]
        graph = build_settlement_graph(friends)
        assert [f.id for f in graph.owed_to_user] == ["c", "a"]
        assert [f.id for f in graph.user_owes] == ["b", "e"]
        assert graph.max_magnitude == Decimal("40")
        assert graph.edge_weight(friends[1]) == Decimal("8")
        assert graph.edge_weight(friends[4]) == Decimal("2")

    def test_group_filter_uses_linked_ids(self):
        friends = [
            Friend(id="a", name="A", balance=Decimal("10"), linked_user_id="u1"),
            Friend(id="b", name="B", balance=Decimal("-40")),
        ]
        groups = [Group(id="g1", name="Trip", members=["u1"])]
        graph = build_settlement_graph(friends, find_group(groups, "g1"))
        assert [f.id for f in graph.owed_to_user] == ["a"]
        assert graph.user_owes == []

    def test_unknown_group_means_everyone(self):
        groups = [Group(id="g1", name="Trip")]
        assert find_group(groups, "missing") is None
        assert find_group(groups, None) is None
        friends = [Friend(id="a", name="A", balance=Decimal("1"))]
        assert not build_settlement_graph(friends, find_group(groups, "missing")).is_empty

    def test_all_settled_is_empty(self):
        graph = build_settlement_graph([Friend(id="a", name="A")])
        assert graph.is_empty is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
