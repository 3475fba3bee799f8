"""
Formatting utilities.
"""

import math
from typing import Optional


def round_half_up(value: float) -> int:
    """
    Round to the nearest whole number, with halves rounded up.

    Python's built-in round() uses banker's rounding (round(10.5) == 10),
    which would move band boundaries and bonus amounts by a point.
    """
    return int(math.floor(value + 0.5))


def format_currency(amount: float, currency: str = "GBP") -> str:
    """
    Format an amount as currency in whole units.

    Args:
        amount: The amount in pounds (fractions are rounded half-up).
        currency: Currency code (default GBP).

    Returns:
        Formatted currency string, e.g. "£12,345" or "-£1,000".
    """
    symbols = {
        "GBP": "£",
        "USD": "$",
        "EUR": "€",
    }
    symbol = symbols.get(currency, currency + " ")
    whole = round_half_up(amount)
    if whole < 0:
        return f"-{symbol}{abs(whole):,}"
    return f"{symbol}{whole:,}"


def format_percent(value: Optional[float], decimals: int = 1) -> str:
    """
    Format a number as a percentage.

    Args:
        value: The percentage value (None renders as "n/a").
        decimals: Number of decimal places.

    Returns:
        Formatted percentage string.
    """
    if value is None:
        return "n/a"
    return f"{value:.{decimals}f}%"
