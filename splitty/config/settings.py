"""
Configuration Management for Splitty

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Settings are read here and nowhere else.
The computation functions never touch them: callers turn settings into a
BudgetPreferences value and pass it in explicitly.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from splitty.models.views import WARNING_RATIO


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class BudgetPreferences(BaseModel):
    """
    Explicit budget configuration handed to every budget computation.

    Replaces the app-wide mutable store the screens used to read from.
    """
    model_config = ConfigDict(frozen=True)

    hidden_categories: frozenset[str] = frozenset()
    category_order: tuple[str, ...] = ()
    rollover_enabled: bool = False
    rollover_horizon_months: Optional[int] = Field(default=None, ge=1)
    warning_ratio: Decimal = Field(default=WARNING_RATIO, gt=0, le=1)
    autofill_lookback_months: int = Field(default=3, ge=1)


class BudgetSettings(BaseSettings):
    """Budget screen behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="SPLITTY_BUDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    hidden_categories: str = Field(
        default="",
        description="Comma-separated category ids excluded from budgets"
    )
    category_order: str = Field(
        default="",
        description="Comma-separated category ids in preferred display order"
    )
    rollover_enabled: bool = Field(
        default=False,
        description="Carry unspent budget into later months"
    )
    rollover_horizon_months: Optional[int] = Field(
        default=None,
        ge=1,
        description="Only roll over from this many preceding months (unset = all)"
    )
    warning_ratio: Decimal = Field(
        default=WARNING_RATIO,
        gt=0,
        le=1,
        description="Share of the budget at which a category turns amber"
    )
    autofill_lookback_months: int = Field(
        default=3,
        ge=1,
        le=24,
        description="Months of history averaged by budget auto-fill"
    )

    @property
    def hidden_categories_set(self) -> frozenset[str]:
        return frozenset(_split_csv(self.hidden_categories))

    @property
    def category_order_list(self) -> list[str]:
        return _split_csv(self.category_order)

    def budget_preferences(self) -> BudgetPreferences:
        """Snapshot these settings as the value the computations consume."""
        return BudgetPreferences(
            hidden_categories=self.hidden_categories_set,
            category_order=tuple(self.category_order_list),
            rollover_enabled=self.rollover_enabled,
            rollover_horizon_months=self.rollover_horizon_months,
            warning_ratio=self.warning_ratio,
            autofill_lookback_months=self.autofill_lookback_months,
        )


class CurrencySettings(BaseSettings):
    """Currency display configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SPLITTY_CURRENCY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    symbol: str = Field(
        default="$",
        min_length=1,
        max_length=4,
        description="Symbol printed before amounts"
    )
    decimal_places: int = Field(
        default=2,
        ge=0,
        le=4,
        description="Digits after the decimal point"
    )


class LedgerSettings(BaseSettings):
    """Friend balance handling."""

    model_config = SettingsConfigDict(
        env_prefix="SPLITTY_LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    settled_epsilon: Decimal = Field(
        default=Decimal("0.01"),
        ge=0,
        description="Balances at or below this magnitude count as settled"
    )
    drift_tolerance: Decimal = Field(
        default=Decimal("0.01"),
        ge=0,
        description="Allowed gap between cached and recomputed balances"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def budget(self) -> BudgetSettings:
        return BudgetSettings()

    @property
    def currency(self) -> CurrencySettings:
        return CurrencySettings()

    @property
    def ledger(self) -> LedgerSettings:
        return LedgerSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an
    `<name>_error` entry describing each failure.
    """
    results = {}
    settings = get_settings()

    for name in ("budget", "currency", "ledger"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
