"""
Summary Formatter - Renders a tier set as a stable human-readable string.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from .models import CENT, DiscountType, Tier


EMPTY_SUMMARY = "No tiers configured"


def format_value(value: Decimal) -> str:
    """Plain decimal without trailing zeros: 10.00 -> "10", 2.50 -> "2.5"."""
    if value is None:
        return ""
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), 'f')


def quantize_money(amount: Decimal) -> Decimal:
    """Round a Decimal amount to cents, half up."""
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(amount) -> str:
    """Format an amount as dollars, e.g. $1,234.50."""
    return f"${quantize_money(amount):,.2f}"


def _sort_key(tier: Tier):
    # Full key so ties on min_qty still render in one fixed order
    return (tier.min_qty or 0, tier.end, tier.discount_type.value, tier.discount_value or 0)


def format_range(tier: Tier) -> str:
    if tier.max_qty is not None:
        return f"{tier.min_qty}-{tier.max_qty}"
    return f"{tier.min_qty}+"


def format_discount(tier: Tier) -> str:
    value = format_value(tier.discount_value)
    if tier.discount_type == DiscountType.PERCENT:
        return f"{value}% off"
    elif tier.discount_type == DiscountType.AMOUNT:
        return f"${value} off"
    return f"${value}/unit"


def format_summary(tiers: Sequence[Tier]) -> str:
    """
    Render tiers as "5-9 → 10% off; 10+ → 15% off".

    Output depends only on the set of tiers, not their input order.
    """
    if not tiers:
        return EMPTY_SUMMARY

    ordered = sorted(tiers, key=_sort_key)
    return "; ".join(f"{format_range(t)} → {format_discount(t)}" for t in ordered)
