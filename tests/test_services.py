"""
Tests for configuration, the currency formatter and the category catalog.
"""

import pytest
from datetime import datetime
from decimal import Decimal

from splitty.audit import AuditLogger, InMemoryAuditStorage
from splitty.config import (
    BudgetSettings,
    CurrencySettings,
    LedgerSettings,
    get_settings,
    validate_all_settings,
)
from splitty.models.audit import AuditEventType
from splitty.models.ledger import Category, Expense
from splitty.services import (
    CategoryCatalog,
    CurrencyFormatter,
    ValidationError,
    reassign_category,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self):
        budget = BudgetSettings()
        assert budget.rollover_enabled is False
        assert budget.hidden_categories_set == frozenset()
        assert budget.warning_ratio == Decimal("0.85")
        assert LedgerSettings().settled_epsilon == Decimal("0.01")

    def test_budget_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("SPLITTY_BUDGET_HIDDEN_CATEGORIES", "rent, utilities,")
        monkeypatch.setenv("SPLITTY_BUDGET_CATEGORY_ORDER", "food,transport")
        monkeypatch.setenv("SPLITTY_BUDGET_ROLLOVER_ENABLED", "true")
        monkeypatch.setenv("SPLITTY_BUDGET_ROLLOVER_HORIZON_MONTHS", "6")

        preferences = get_settings().budget.budget_preferences()
        assert preferences.hidden_categories == frozenset({"rent", "utilities"})
        assert preferences.category_order == ("food", "transport")
        assert preferences.rollover_enabled is True
        assert preferences.rollover_horizon_months == 6

    def test_invalid_settings_are_reported(self, monkeypatch):
        monkeypatch.setenv("SPLITTY_CURRENCY_DECIMAL_PLACES", "9")
        results = validate_all_settings()
        assert results["budget"] is True
        assert results["currency"] is False
        assert "currency_error" in results


class TestCurrencyFormatter:
    """Tests for CurrencyFormatter."""

    def test_default_format(self):
        formatter = CurrencyFormatter(CurrencySettings())
        assert formatter.format_currency(Decimal("1234.5")) == "$1,234.50"
        assert formatter.format_currency(Decimal("-3")) == "-$3.00"
        assert formatter.format_currency(Decimal("0.005")) == "$0.01"
        assert formatter.get_currency_symbol() == "$"

    def test_custom_symbol_and_places(self):
        formatter = CurrencyFormatter(CurrencySettings(symbol="€", decimal_places=0))
        assert formatter.format_currency(Decimal("1999.5")) == "€2,000"


class TestCategoryCatalog:
    """Tests for CategoryCatalog."""

    def test_unknown_id_falls_back_to_general(self):
        catalog = CategoryCatalog()
        assert catalog.get_category_by_id("deleted").id == "general"
        assert catalog.get_category_by_id("food").label == "Food & Drink"

    def test_general_is_always_present(self):
        catalog = CategoryCatalog([Category(id="food", label="Food")])
        assert "general" in catalog
        assert catalog.categories[0].id == "general"

    def test_add_category_derives_unique_id(self):
        catalog = CategoryCatalog()
        first = catalog.add_category("Pet Care", "#000000", "Dog")
        second = catalog.add_category("pet care!", "#111111", "Cat")
        assert first.id == "pet-care"
        assert second.id == "pet-care-2"

    def test_add_category_rejects_blank_label(self):
        with pytest.raises(ValidationError):
            CategoryCatalog().add_category("   ", "#000000", "Tag")

    def test_general_cannot_be_removed(self):
        with pytest.raises(ValidationError, match="cannot be deleted"):
            CategoryCatalog().remove_category("general")

    def test_remove_reassigns_expenses(self):
        storage = InMemoryAuditStorage()
        catalog = CategoryCatalog(audit_logger=AuditLogger(storage=storage))
        expenses = [
            Expense(amount=Decimal("5"), date=datetime(2024, 3, 1), category="travel"),
            Expense(amount=Decimal("6"), date=datetime(2024, 3, 2), category="food"),
        ]
        result = catalog.remove_category("travel", expenses)

        assert [e.category for e in result] == ["general", "food"]
        assert "travel" not in catalog
        assert expenses[0].category == "travel"
        [event] = storage.get_recent_events()
        assert event.event_type == AuditEventType.CATEGORY_REASSIGNED
        assert event.details["expense_count"] == 1

    def test_reassign_without_matches_logs_nothing(self):
        storage = InMemoryAuditStorage()
        expenses = [Expense(amount=Decimal("5"), date=datetime(2024, 3, 1), category="food")]
        result = reassign_category(expenses, "travel", audit_logger=AuditLogger(storage=storage))
        assert result == expenses
        assert len(storage) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
