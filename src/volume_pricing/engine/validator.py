"""
Tier Validator - Checks a tier set for structural validity and mutual exclusivity.

Every function here is pure and total: problems come back as a list of
ValidationError so that all of them can be shown at once. Nothing raises.
"""
from typing import Optional, Sequence

from .models import DiscountType, PricingModel, Tier, ValidationError


MIN_NAME_LENGTH = 3
MAX_PERCENT = 100


def describe_range(tier: Tier) -> str:
    """Render a tier's quantity range as used in error messages ("5-10", "10+")."""
    if tier.max_qty is None:
        return f"{tier.min_qty}+"
    return f"{tier.min_qty}-{tier.max_qty}"


def _overlaps(a: Tier, b: Tier) -> bool:
    return a.min_qty <= b.end and b.min_qty <= a.end


def validate_tier(tier: Tier, index: Optional[int] = None) -> list[ValidationError]:
    """Per-tier field checks."""
    errors = []

    if tier.min_qty is None or tier.min_qty < 1:
        errors.append(ValidationError('minQty', 'Minimum quantity must be at least 1', index))

    if not isinstance(tier.discount_type, DiscountType):
        errors.append(ValidationError('discountType', f"Unknown discount type '{tier.discount_type}'", index))

    value = tier.discount_value
    if value is None or value <= 0:
        errors.append(ValidationError('discountValue', 'Discount value must be greater than 0', index))
    elif tier.discount_type == DiscountType.PERCENT and value > MAX_PERCENT:
        errors.append(ValidationError('discountValue', 'Percentage discount cannot exceed 100', index))

    if tier.max_qty is not None and tier.min_qty is not None and tier.max_qty <= tier.min_qty:
        errors.append(ValidationError('maxQty', 'Maximum quantity must be greater than minimum quantity', index))

    return errors


def validate_tiers(tiers: Sequence[Tier]) -> list[ValidationError]:
    """
    Validate a whole tier set.

    Field checks run per tier, then each tier is checked for overlap against
    the tiers before it in ascending min_qty order. Only the first conflict
    per tier is reported.
    """
    errors = []
    for index, tier in enumerate(tiers):
        errors.extend(validate_tier(tier, index))

    # Tiers without a floor have no range to compare
    ranged = [(i, t) for i, t in enumerate(tiers) if t.min_qty is not None]
    ranged.sort(key=lambda pair: pair[1].min_qty)

    for pos, (index, tier) in enumerate(ranged):
        for _, earlier in ranged[:pos]:
            if _overlaps(tier, earlier):
                errors.append(ValidationError(
                    'minQty',
                    f"Overlaps with existing tier ({describe_range(earlier)})",
                    index,
                ))
                break

    return errors


def validate_model_name(name: Optional[str]) -> list[ValidationError]:
    """Model names are required and at least 3 characters once trimmed."""
    trimmed = (name or '').strip()
    if not trimmed:
        return [ValidationError('name', 'Model name is required')]
    if len(trimmed) < MIN_NAME_LENGTH:
        return [ValidationError('name', f'Model name must be at least {MIN_NAME_LENGTH} characters')]
    return []


def validate_products(product_ids: Optional[Sequence[str]]) -> list[ValidationError]:
    """At least one product must be associated."""
    if not product_ids:
        return [ValidationError('products', 'At least one product must be selected')]
    return []


def validate_model(model: PricingModel) -> list[ValidationError]:
    """All checks for a model about to be saved: name, products, then tiers."""
    return (
        validate_model_name(model.name)
        + validate_products(model.product_ids)
        + validate_tiers(model.tiers)
    )
