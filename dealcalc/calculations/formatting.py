"""
Display formatting for calculated values.
"""

import math

from dealcalc.calculations.amortization import round_currency


def format_currency(value: float) -> str:
    """Format as whole dollars, e.g. $1,234 or -$500."""
    amount = round_currency(abs(value))
    sign = "-" if value < 0 and amount > 0 else ""
    return f"{sign}${amount:,}"


def format_percent(value: float) -> str:
    """Format a percent with two decimals; unbounded returns render as ∞."""
    if not math.isfinite(value):
        return "∞"
    return f"{value:.2f}%"


def format_compact_currency(value: float) -> str:
    """Short axis label: $1.2M, $350K, $800."""
    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if value >= 1000:
        return f"${value / 1000:.0f}K"
    return f"${value:g}"
