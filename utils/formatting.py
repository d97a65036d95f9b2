"""
Formatting utilities.
"""

from typing import Optional


def format_aud(amount: Optional[int]) -> str:
    """
    Format a dollar amount compactly for display.

    Args:
        amount: Whole dollars, or None when the listing has no price.

    Returns:
        "$1.20M", "$850K", "$950", or "—" for a missing amount.
    """
    if amount is None:
        return "—"
    if amount >= 1_000_000:
        return f"${amount / 1_000_000:.2f}M"
    if amount >= 1_000:
        return f"${amount / 1_000:.0f}K"
    return f"${amount:,}"
