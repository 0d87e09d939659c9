"""Text formatting for match reasons (US locale)."""

from __future__ import annotations

from decimal import Decimal


def format_money(value: Decimal | int | None) -> str:
    """Format as US currency, dropping zero cents: 500000 -> "$500,000"."""
    if value is None:
        return "-"
    d = Decimal(str(value))
    if d == d.to_integral_value():
        return f"${int(d):,}"
    return f"${d:,.2f}"


def format_count(value: Decimal | int | None) -> str:
    """Format a room count without trailing zeros: 2.50 -> "2.5", 2.0 -> "2"."""
    if value is None:
        return "-"
    d = Decimal(str(value))
    if d == d.to_integral_value():
        return str(int(d))
    return f"{d.normalize():f}"


def format_sqft(value: int | None) -> str:
    """Format square footage: 1250 -> "1,250 sq ft"."""
    if value is None:
        return "-"
    return f"{value:,} sq ft"
