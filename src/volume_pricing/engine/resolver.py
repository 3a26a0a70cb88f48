"""
Tier Resolver - Picks the single tier that applies to a purchased quantity.
"""
from typing import Optional, Sequence

from .models import Tier


def resolve_tier(quantity: int, tiers: Sequence[Tier]) -> Optional[Tier]:
    """
    Return the tier covering quantity, or None when no discount applies.

    Tiers are scanned by min_qty, highest first, so on an overlapping
    (invalid) set the tier with the highest qualifying floor wins.
    """
    candidates = [t for t in tiers if t.min_qty is not None]
    candidates.sort(key=lambda t: t.min_qty, reverse=True)

    for tier in candidates:
        if tier.covers(quantity):
            return tier
    return None
