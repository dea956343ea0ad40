"""
Abstract Service Interfaces

DESIGN DECISION: The core does not own currency formatting or the category
catalogue. The host app injects them through these interfaces. This allows us to:
1. Swap the locale/currency without touching the computations
2. Use in-memory implementations for testing
3. Keep display lookups robust against stale ids
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from splitty.models.ledger import Category


class CurrencyFormatterInterface(ABC):
    """Turns amounts into display strings."""

    @abstractmethod
    def format_currency(self, amount: Decimal) -> str:
        """
        Format an amount for display.

        Args:
            amount: Signed monetary amount

        Returns:
            Display string including the currency symbol
        """
        pass

    @abstractmethod
    def get_currency_symbol(self) -> str:
        """Return the bare currency symbol (e.g. '$')."""
        pass


class CategoryLookupInterface(ABC):
    """Resolves category ids to display records."""

    @abstractmethod
    def get_category_by_id(self, category_id: str) -> Category:
        """
        Look up a category.

        Args:
            category_id: Category identifier

        Returns:
            The category, or the General category if the id is unknown.
            Never raises for unknown ids.
        """
        pass


class LedgerError(Exception):
    """Base exception for the Splitty core."""
    pass


class ValidationError(LedgerError):
    """User-supplied input rejected (e.g. a settlement amount <= 0)."""
    pass


class NotFoundError(LedgerError):
    """Referenced friend or record does not exist."""
    pass
