"""
Display API - Customer-facing volume pricing for a product page.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Query

from ..data.catalog import normalize_product_id
from ..engine.formatter import format_summary
from ..engine.models import round_money
from ..engine.pricing_engine import best_tier, price_ladder
from . import state


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["display"])


@router.get("/display")
async def get_display(
    product_id: str = Query(..., alias="productId"),
    quantity: Optional[int] = Query(None, ge=1),
    x_forwarded_host: Optional[str] = Header(None),
    host: Optional[str] = Header(None),
):
    """
    Tier table, price ladder and (optionally) a quote for one product.

    The shop comes from the *.myshopify.com host the request was proxied for.
    """
    shop = state.shop_from_host(x_forwarded_host)
    if shop == state.settings.default_shop:
        shop = state.shop_from_host(host)

    product_id = normalize_product_id(product_id)
    product = state.catalog.get_product(product_id)
    if product is None or product["price"] is None:
        raise HTTPException(status_code=404, detail=f"Product '{product_id}' not found")

    model = state.engine.find_model(shop, product_id)
    if model is None or not model.active:
        logger.debug("No active volume model for %s in shop %s", product_id, shop)
        return {"active": False, "message": "No volume pricing configured for this product"}

    base_price = product["price"]
    best = best_tier(model.tiers, base_price)
    response = {
        "active": model.active,
        "name": model.name,
        "productId": product_id,
        "title": product["title"],
        "basePrice": round_money(base_price),
        "tiers": [t.to_dict() for t in sorted(model.tiers, key=lambda t: t.min_qty or 0)],
        "summary": format_summary(model.tiers),
        "displaySettings": model.display.to_dict(),
        "ladder": [r.to_dict() for r in price_ladder(model.tiers, base_price)],
        "bestTier": best.to_dict() if best else None,
    }

    if quantity is not None:
        response["quote"] = state.engine.quote(shop, product_id, quantity, base_price=base_price).to_dict()

    return response


@router.get("/products")
async def list_products(search: Optional[str] = None, limit: int = 50):
    """Catalog listing for the admin product picker."""
    products = state.catalog.search(search, limit=limit)
    return [
        {**p, "price": round_money(p["price"]) if p["price"] is not None else None}
        for p in products
    ]
