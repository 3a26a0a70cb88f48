"""
Price Calculator - Applies a resolved tier to a base price.

Amounts are kept at full Decimal precision; rounding to cents happens only
when a result is rendered (see ResolvedPrice.to_dict and formatter).
"""
from decimal import Decimal
from typing import Optional

from .models import DiscountType, ResolvedPrice, Tier


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def discounted_unit_price(tier: Tier, base_price: Decimal) -> Decimal:
    """Unit price after applying a single tier's discount."""
    value = tier.discount_value or ZERO

    if tier.discount_type == DiscountType.PERCENT:
        return max(ZERO, base_price * (1 - value / HUNDRED))

    elif tier.discount_type == DiscountType.AMOUNT:
        return max(ZERO, base_price - value)

    elif tier.discount_type == DiscountType.FIXED_PRICE:
        # Absolute price, not a delta
        return value

    return base_price


def calculate_price(tier: Optional[Tier], base_price) -> ResolvedPrice:
    """
    Compute unit price and savings for one unit.

    A None tier means no discount applies and the list price stands.
    Savings never go negative, and savings_percent is 0 for a zero base price.
    """
    base_price = Decimal(str(base_price)) if not isinstance(base_price, Decimal) else base_price

    if tier is None:
        return ResolvedPrice(tier=None, unit_price=base_price, savings_per_unit=ZERO, savings_percent=ZERO)

    unit_price = discounted_unit_price(tier, base_price)
    savings = max(ZERO, base_price - unit_price)
    percent = savings / base_price * HUNDRED if base_price != 0 else ZERO

    return ResolvedPrice(
        tier=tier,
        unit_price=unit_price,
        savings_per_unit=savings,
        savings_percent=percent,
    )


def line_total(resolved: ResolvedPrice, quantity: int) -> Decimal:
    """Extended price for quantity units."""
    return resolved.unit_price * quantity
