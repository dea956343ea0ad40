"""
Services Package

Interfaces for the collaborators the core calls back into,
their default implementations, and the core's exception taxonomy.
"""

from splitty.services.interface import (
    CategoryLookupInterface,
    CurrencyFormatterInterface,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from splitty.services.currency import CurrencyFormatter
from splitty.services.categories import (
    DEFAULT_CATEGORIES,
    GENERAL_CATEGORY,
    CategoryCatalog,
    reassign_category,
)

__all__ = [
    # Interfaces
    "CategoryLookupInterface",
    "CurrencyFormatterInterface",
    # Exceptions
    "LedgerError",
    "NotFoundError",
    "ValidationError",
    # Implementations
    "CurrencyFormatter",
    "DEFAULT_CATEGORIES",
    "GENERAL_CATEGORY",
    "CategoryCatalog",
    "reassign_category",
]
