"""Configuration package."""

from splitty.config.settings import (
    BudgetPreferences,
    BudgetSettings,
    CurrencySettings,
    LedgerSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "BudgetPreferences",
    "BudgetSettings",
    "CurrencySettings",
    "LedgerSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
