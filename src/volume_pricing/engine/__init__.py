"""Engine subpackage - core tier validation, resolution, pricing and formatting."""
from .models import DiscountType, DisplayStyle, Tier, PricingModel, ResolvedPrice, ValidationError, Quote
from .validator import validate_tiers, validate_model
from .resolver import resolve_tier
from .calculator import calculate_price
from .formatter import format_summary

__all__ = [
    'DiscountType', 'DisplayStyle', 'Tier', 'PricingModel', 'ResolvedPrice', 'ValidationError', 'Quote',
    'validate_tiers', 'validate_model', 'resolve_tier', 'calculate_price', 'format_summary',
]
