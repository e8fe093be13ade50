"""
Number, currency and date text in the shop's regional convention.

tr-TR by default: decimal comma, period thousands separator, always two
fractional digits, as in "1.234,56 TL". The convention is a single process-wide
NumberLocale built from Settings and injected into CurrencyFormatter.

Rounding is half-up on the exact binary value of the amount.
"""

import html
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel

from .config import settings


class NumberLocale(BaseModel):
    decimal_separator: str = ","
    thousands_separator: str = "."
    currency_label: str = "TL"
    currency_symbol: str = "₺"
    date_format: str = "%d.%m.%Y"

    @classmethod
    def from_settings(cls) -> "NumberLocale":
        return cls(
            decimal_separator=settings.DECIMAL_SEPARATOR,
            thousands_separator=settings.THOUSANDS_SEPARATOR,
            currency_label=settings.CURRENCY_LABEL,
            currency_symbol=settings.CURRENCY_SYMBOL,
            date_format=settings.DATE_FORMAT,
        )


def _to_decimal(amount) -> Decimal:
    """None, NaN, infinities and junk all become zero."""
    if amount is None or isinstance(amount, bool):
        return Decimal(0)
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(
            amount if isinstance(amount, (int, float)) else str(amount).strip()
        )
    except (InvalidOperation, ValueError, TypeError):
        return Decimal(0)
    if not value.is_finite():
        return Decimal(0)
    return value


class CurrencyFormatter:
    """Formats amounts using one NumberLocale."""

    def __init__(self, locale: Optional[NumberLocale] = None):
        self.locale = locale or NumberLocale.from_settings()

    def _round(self, amount, places: int) -> Decimal:
        quantum = Decimal(1).scaleb(-places)
        value = _to_decimal(amount).quantize(quantum, rounding=ROUND_HALF_UP)
        if value == 0:
            value = abs(value)  # no "-0,00"
        return value

    def format_number(self, amount, places: int = 2) -> str:
        """Bare number: 1234.5 → '1.234,50'."""
        value = self._round(amount, places)
        integer, _, fraction = f"{abs(value):.{places}f}".partition(".")
        grouped = f"{int(integer):,}".replace(",", self.locale.thousands_separator)
        sign = "-" if value < 0 else ""
        if not places:
            return f"{sign}{grouped}"
        return f"{sign}{grouped}{self.locale.decimal_separator}{fraction}"

    def format_currency(self, amount) -> str:
        """Number with trailing currency label: '1.234,50 TL'."""
        return f"{self.format_number(amount)} {self.locale.currency_label}"

    def format_currency_markup(self, amount) -> str:
        """Symbol-prefixed, HTML-escaped variant for markup: '₺1.234,50', '-₺100,00'."""
        text = self.format_number(amount)
        if text.startswith("-"):
            text = f"-{self.locale.currency_symbol}{text[1:]}"
        else:
            text = f"{self.locale.currency_symbol}{text}"
        return html.escape(text)

    def format_fixed(self, amount, places: int = 2) -> str:
        """Plain fixed-point with a period and no grouping: 1.8 → '1.80'."""
        return f"{self._round(amount, places):.{places}f}"

    def format_date(self, value) -> str:
        """date / datetime / ISO string → locale date text. Empty → '-'."""
        if not value:
            return "-"
        if isinstance(value, str):
            try:
                value = datetime.fromisoformat(value.replace("Z", "+00:00"))
            except ValueError:
                return value
        if isinstance(value, (date, datetime)):
            return value.strftime(self.locale.date_format)
        return str(value)


def get_formatter() -> CurrencyFormatter:
    """Formatter for the process-wide locale."""
    return CurrencyFormatter(NumberLocale.from_settings())
