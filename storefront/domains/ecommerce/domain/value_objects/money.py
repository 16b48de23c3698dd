"""
Minor-unit money helpers.

Amounts are integer cents everywhere. Rates and percentages go through
Decimal and are rounded half-up back to cents.
"""

from decimal import ROUND_HALF_UP, Decimal


def round_to_cents(amount: Decimal) -> int:
    """Round a fractional cent amount half-up to an integer."""
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def apply_rate(amount: int, rate: Decimal) -> int:
    """amount * rate, rounded half-up."""
    return round_to_cents(Decimal(amount) * rate)


def apply_percentage(amount: int, percentage: int | Decimal) -> int:
    """amount * percentage / 100, rounded half-up."""
    return round_to_cents(Decimal(amount) * Decimal(percentage) / Decimal(100))


def format_cents(amount: int) -> str:
    """1999 -> "$19.99"."""
    return f"${Decimal(amount) / Decimal(100):.2f}"
