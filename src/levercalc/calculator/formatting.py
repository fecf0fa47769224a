"""Display formatting for calculator outputs."""

import math

NOT_AVAILABLE = "N/A"


def format_price(value: float, decimals: int = 2) -> str:
    if not math.isfinite(value):
        return NOT_AVAILABLE
    return f"{value:.{decimals}f}"


def format_currency(value: float, decimals: int = 2) -> str:
    """Format as dollars, e.g. 12.5 -> "$12.50"."""
    if not math.isfinite(value):
        return NOT_AVAILABLE
    return f"${value:.{decimals}f}"


def format_percent(value: float, decimals: int = 2) -> str:
    """Format an already-scaled percentage, e.g. 19.5 -> "19.50%"."""
    if not math.isfinite(value):
        return NOT_AVAILABLE
    return f"{value:.{decimals}f}%"
