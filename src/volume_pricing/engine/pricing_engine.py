"""
Volume Pricing Engine - Customer-facing quote resolution with traceability.

Composes the catalog (base price), the model store (which tiers apply to a
product) and the pure resolver/calculator:

1. Look up the product's base price (or take the caller's)
2. Find the pricing model the product is associated with
3. Skip discounting when there is no model or it is inactive
4. Resolve the tier for the quantity
5. Price one unit under that tier and extend by quantity
"""
from decimal import Decimal
from typing import Optional, Sequence

from ..data.catalog import ProductCatalog, normalize_product_id
from ..services.models_service import VolumeModelsService
from .calculator import calculate_price, line_total
from .formatter import format_discount, format_money, format_range
from .models import PricingModel, Quote, ResolvedPrice, Tier, to_decimal
from .resolver import resolve_tier


def price_ladder(tiers: Sequence[Tier], base_price: Decimal) -> list[ResolvedPrice]:
    """Price every tier, in ascending min_qty order."""
    ordered = sorted((t for t in tiers if t.min_qty is not None), key=lambda t: t.min_qty)
    return [calculate_price(tier, base_price) for tier in ordered]


def best_tier(tiers: Sequence[Tier], base_price: Decimal) -> Optional[Tier]:
    """The tier with the largest per-unit savings (earliest floor wins ties)."""
    best = None
    for resolved in price_ladder(tiers, base_price):
        if best is None or resolved.savings_per_unit > best.savings_per_unit:
            best = resolved
    return best.tier if best else None


class VolumePricingEngine:
    """
    Resolves volume prices for storefront display.

    Holds no pricing state of its own; every quote reads the current model
    from the store, so a replaced tier set is picked up immediately.
    """

    def __init__(self, models_service: VolumeModelsService, catalog: ProductCatalog):
        self.models_service = models_service
        self.catalog = catalog

    def find_model(self, shop: str, product_id: str) -> Optional[PricingModel]:
        return self.models_service.find_model_for_product(shop, normalize_product_id(product_id))

    def quote(
        self,
        shop: str,
        product_id: str,
        quantity: int,
        base_price=None,
    ) -> Quote:
        """
        Price quantity units of a product.

        Raises LookupError when no base price is given and the product is
        not in the catalog.
        """
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        product_id = normalize_product_id(product_id)

        if base_price is None:
            base_price = self.catalog.get_price(product_id)
            if base_price is None:
                raise LookupError(f"Product '{product_id}' not found in catalog")
            source = "catalog"
        else:
            base_price = to_decimal(base_price)
            source = "caller"

        model = self.find_model(shop, product_id)
        quote = Quote(
            product_id=product_id,
            quantity=quantity,
            base_price=base_price,
            price=calculate_price(None, base_price),
            model_id=model.id if model else None,
        )
        quote.add_trace("Base Price", f"List price from {source}", format_money(base_price))

        if model is None:
            quote.add_trace("Model Lookup", "No volume model for product, using list price")
            return self._extend(quote)

        if not model.active:
            quote.add_trace("Model Lookup", f"Model {model.name} ({model.id}) is inactive, using list price")
            return self._extend(quote)

        quote.add_trace("Model Lookup", "Found volume model", f"{model.name} ({model.id})")

        tier = resolve_tier(quantity, model.tiers)
        if tier is None:
            quote.add_trace("Tier Resolution", f"No tier covers quantity {quantity}, using list price")
            return self._extend(quote)

        quote.add_trace("Tier Resolution", f"Quantity {quantity} falls in tier", format_range(tier))
        quote.price = calculate_price(tier, base_price)
        quote.add_trace(
            "Discount",
            f"Applied {format_discount(tier)}",
            f"{format_money(quote.price.unit_price)}/unit",
        )
        return self._extend(quote)

    @staticmethod
    def _extend(quote: Quote) -> Quote:
        total = line_total(quote.price, quote.quantity)
        quote.add_trace(
            "Extension",
            f"Quantity {quote.quantity} × {format_money(quote.price.unit_price)}",
            format_money(total),
        )
        return quote
