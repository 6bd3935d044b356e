"""Currency-related utilities: cent conversion and formatting."""

import os
from decimal import Decimal, ROUND_HALF_UP
from typing import Union


# Display currency for rides that don't specify one
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "USD")

# Currency symbols for formatting
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "CA$",
    "CNY": "¥",
    "HKD": "HK$",
    "INR": "₹"
}

CENT = Decimal("0.01")


def round_half_up(value: Union[Decimal, int, float, str], places: Decimal = CENT) -> Decimal:
    """Round a value to the given exponent using standard half-up rounding."""
    # Go through str() so floats like 2.675 round the way they read
    return Decimal(str(value)).quantize(places, rounding=ROUND_HALF_UP)


def to_cents(value: Union[Decimal, int, float, str]) -> int:
    """
    Convert a decimal money amount to integer cents.

    Args:
        value: Amount in major units (e.g., Decimal("12.345") or "12.34")

    Returns:
        Amount in cents, rounded half-up (e.g., 1235)
    """
    return int(round_half_up(value) * 100)


def from_cents(amount_cents: int) -> Decimal:
    """Convert integer cents back to a Decimal amount in major units."""
    return (Decimal(amount_cents) / 100).quantize(CENT)


def format_currency(amount_cents: int, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Format an amount in cents as a currency string with symbol.

    Args:
        amount_cents: Amount in cents (e.g., 1234 for $12.34)
        currency: Currency code (e.g., "USD", "EUR")

    Returns:
        Formatted string with symbol (e.g., "$12.34", "€12.34")
    """
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    amount = Decimal(amount_cents) / 100

    # For currencies like JPY that don't use decimal places
    if currency == "JPY":
        amount = round_half_up(amount, Decimal("1"))
        if amount < 0:
            return f"-{symbol}{abs(amount)}"
        return f"{symbol}{amount}"

    amount = round_half_up(amount)

    # Handle negative amounts
    if amount < 0:
        return f"-{symbol}{abs(amount)}"
    else:
        return f"{symbol}{amount}"
