"""Display formatting for amounts and dates."""

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union


CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
}


def format_currency(amount: Union[Decimal, float, int], currency: str = "USD") -> str:
    """
    Format an amount for display, e.g. ``$1,234.56`` or ``-$5.50``.

    Unknown currency codes are prefixed with the code itself
    (``CHF 10.00``).
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    body = f"{abs(value):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{sign}{currency.upper()} {body}"
    return f"{sign}{symbol}{body}"


def format_date(value: Union[date, datetime]) -> str:
    """Format a date for display, e.g. ``Jan 5, 2024``."""
    return f"{value.strftime('%b')} {value.day}, {value.year}"
