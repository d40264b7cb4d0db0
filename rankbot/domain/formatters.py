"""
Value formatting for report text.

Inputs are trusted: callers pass either ``None`` or a finite, non-negative
number.
"""

from decimal import Decimal
from typing import Optional

NOT_AVAILABLE = "N/A"


def format_magnitude(value: Optional[float]) -> str:
    """1.5e9 -> "1.50 B", 2.3e6 -> "2.30 M", 1234.5 -> "1,234.5"."""
    if value is None:
        return NOT_AVAILABLE
    if value >= 1e9:
        return f"{value / 1e9:.2f} B"
    if value >= 1e6:
        return f"{value / 1e6:.2f} M"
    # Thousands separators, at most three decimals, no trailing zeros
    text = f"{value:,.3f}"
    return text.rstrip("0").rstrip(".")


def format_price(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"${value:.4f}"


def format_ratio(value: float) -> str:
    return f"{value * 100:.2f}%"


def _plain_number(value: float) -> str:
    """Shortest round-trip digits, without exponent or a trailing ".0"."""
    text = repr(float(value))
    if "e" in text:
        text = format(Decimal(text), "f")
    if text.endswith(".0"):
        text = text[:-2]
    return text


def format_change(value: Optional[float]) -> str:
    """Raw 24h change with a direction arrow; the number is not rounded."""
    if value is None:
        return NOT_AVAILABLE
    text = _plain_number(value)
    if value > 0:
        return f"{text}% ⬆️"
    if value < 0:
        return f"{text}% ⬇️"
    return f"{text}%"


def format_gwei(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"{value:.2f}"
