"""
Order number and tracking code generation.
"""

import secrets
import string
from datetime import UTC, datetime

TRACKING_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_order_number(prefix: str, sequence: int, now: datetime | None = None) -> str:
    """
    Build an order number such as "LS2610-00042".

    Args:
        prefix: Store prefix
        sequence: 1-based order sequence
        now: Reference time for the year/month part
    """
    now = now or datetime.now(UTC)
    return f"{prefix}{now:%y%m}-{sequence:05d}"


def generate_tracking_code(length: int = 12) -> str:
    """Random upper-case alphanumeric code guests use to look up their order."""
    return "".join(secrets.choice(TRACKING_CODE_ALPHABET) for _ in range(length))
