"""
Currency Formatter

Default formatter driven by CurrencySettings.
Amounts are rounded half-up to the configured number of places and
grouped by thousands: `$1,234.50`, `-$3.00`.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from splitty.config import CurrencySettings, get_settings
from splitty.services.interface import CurrencyFormatterInterface


class CurrencyFormatter(CurrencyFormatterInterface):
    """Symbol-prefixed formatter."""

    def __init__(self, settings: Optional[CurrencySettings] = None):
        self._settings = settings or get_settings().currency
        self._quantum = Decimal(1).scaleb(-self._settings.decimal_places)

    def format_currency(self, amount: Decimal) -> str:
        rounded = Decimal(amount).quantize(self._quantum, rounding=ROUND_HALF_UP)
        sign = "-" if rounded < 0 else ""
        places = self._settings.decimal_places
        return f"{sign}{self._settings.symbol}{abs(rounded):,.{places}f}"

    def get_currency_symbol(self) -> str:
        return self._settings.symbol
