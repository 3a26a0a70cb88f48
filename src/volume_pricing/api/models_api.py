"""
Models API - FastAPI router for volume pricing model management.
"""
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Header, HTTPException
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from ..data.catalog import normalize_product_id
from ..engine.formatter import format_summary
from ..engine.models import DiscountType, DisplaySettings, DisplayStyle, PricingModel, Tier
from ..engine.validator import validate_model
from ..services.models_service import InvalidModelError, ModelNotFoundError
from . import state

router = APIRouter(prefix="/api/volume-pricing", tags=["volume-pricing"])


# Pydantic models for API
class CamelModel(BaseModel):
    """Accepts and emits the camelCase interchange keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TierIn(CamelModel):
    """One tier as sent by the admin UI."""
    id: Optional[str] = None
    min_qty: Optional[int] = None
    max_qty: Optional[int] = None
    discount_type: DiscountType = DiscountType.PERCENT
    discount_value: Optional[Decimal] = None

    @field_validator('discount_type', mode='before')
    @classmethod
    def parse_discount_type(cls, value):
        return DiscountType.parse(value)

    def to_tier(self) -> Tier:
        return Tier(
            id=self.id,
            min_qty=self.min_qty,
            max_qty=self.max_qty,
            discount_type=self.discount_type,
            discount_value=self.discount_value,
        )


class DisplaySettingsIn(CamelModel):
    style: DisplayStyle = DisplayStyle.BADGE_ROW
    show_per_unit: bool = True
    show_compare_at: bool = False
    badge_tone: str = "success"
    custom_copy: Optional[str] = None

    def to_settings(self) -> DisplaySettings:
        return DisplaySettings(**self.model_dump())


class ModelCreate(CamelModel):
    """Request model for creating or validating a volume model."""
    id: Optional[str] = None
    name: str = ""
    product_ids: list[str] = []
    tiers: list[TierIn] = []
    display_settings: Optional[DisplaySettingsIn] = None
    active: bool = False

    def to_model(self) -> PricingModel:
        return PricingModel(
            id=self.id or '',
            name=self.name,
            product_ids=[normalize_product_id(p) for p in self.product_ids],
            tiers=tuple(t.to_tier() for t in self.tiers),
            display=self.display_settings.to_settings() if self.display_settings else DisplaySettings(),
            active=self.active,
        )


class ModelUpdate(CamelModel):
    """Request model for a full update; tiers, when sent, replace the whole set."""
    name: Optional[str] = None
    active: Optional[bool] = None
    product_ids: Optional[list[str]] = None
    tiers: Optional[list[TierIn]] = None
    display_settings: Optional[DisplaySettingsIn] = None

    def to_updates(self) -> dict:
        updates = {}
        if self.name is not None:
            updates['name'] = self.name
        if self.active is not None:
            updates['active'] = self.active
        if self.product_ids is not None:
            updates['product_ids'] = [normalize_product_id(p) for p in self.product_ids]
        if self.tiers is not None:
            updates['tiers'] = tuple(t.to_tier() for t in self.tiers)
        if self.display_settings is not None:
            updates['display'] = self.display_settings.to_settings()
        return updates


class ActiveToggle(CamelModel):
    active: bool


class BulkApplyRequest(CamelModel):
    product_ids: list[str]
    volume_model_id: str
    enabled: bool = True


def model_response(model: PricingModel) -> dict:
    """Interchange dict plus the rendered tier summary."""
    return {**model.to_dict(), "summary": format_summary(model.tiers)}


def resolve_shop(shop_domain: Optional[str]) -> str:
    return state.shop_from_host(shop_domain)


# Endpoints

@router.get("")
async def list_models(
    query: str = "",
    status: str = "all",
    page: int = 1,
    limit: Optional[int] = None,
    x_shop_domain: Optional[str] = Header(None),
):
    """List volume models with name search, status filter and pagination."""
    shop = resolve_shop(x_shop_domain)
    try:
        items, total = state.models_service.search_models(
            shop, query=query, status=status, page=page, limit=limit or state.settings.default_page_size
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"items": [model_response(m) for m in items], "page": max(1, page), "total": total}


@router.get("/stats")
async def get_stats(x_shop_domain: Optional[str] = Header(None)):
    """Get model statistics for the shop."""
    return state.models_service.get_stats(resolve_shop(x_shop_domain))


@router.post("/validate")
async def validate(model_data: ModelCreate):
    """Validate a model without saving."""
    errors = validate_model(model_data.to_model())
    return {"valid": not errors, "errors": [e.to_dict() for e in errors]}


@router.post("/bulk-apply")
async def bulk_apply(request: BulkApplyRequest, x_shop_domain: Optional[str] = Header(None)):
    """Attach (or detach) many products to a model at once."""
    if not request.product_ids:
        raise HTTPException(status_code=400, detail="Product IDs array is required")

    product_ids = [normalize_product_id(p) for p in request.product_ids]
    try:
        count = state.models_service.bulk_apply(
            resolve_shop(x_shop_domain), product_ids, request.volume_model_id, request.enabled
        )
    except ModelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    verb = "applied to" if request.enabled else "removed from"
    return {
        "success": True,
        "message": f"Volume pricing {verb} {count} products successfully",
        "appliedCount": count,
    }


@router.post("")
async def create_model(model_data: ModelCreate, x_shop_domain: Optional[str] = Header(None)):
    """Create a new volume model."""
    try:
        created = state.models_service.create_model(resolve_shop(x_shop_domain), model_data.to_model())
    except InvalidModelError as e:
        raise HTTPException(status_code=400, detail={"errors": [err.to_dict() for err in e.errors]})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"id": created.id}


@router.get("/{model_id}")
async def get_model(model_id: str, x_shop_domain: Optional[str] = Header(None)):
    """Get a single model by ID."""
    try:
        model = state.models_service.get_model(resolve_shop(x_shop_domain), model_id)
    except ModelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return model_response(model)


@router.put("/{model_id}")
async def update_model(model_id: str, updates: ModelUpdate, x_shop_domain: Optional[str] = Header(None)):
    """Update a model; a tiers list replaces the existing tier set in one write."""
    try:
        updated = state.models_service.update_model(resolve_shop(x_shop_domain), model_id, updates.to_updates())
    except ModelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidModelError as e:
        raise HTTPException(status_code=400, detail={"errors": [err.to_dict() for err in e.errors]})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return model_response(updated)


@router.patch("/{model_id}/active")
async def toggle_active(model_id: str, body: ActiveToggle, x_shop_domain: Optional[str] = Header(None)):
    """Toggle a model's active status."""
    try:
        state.models_service.set_active(resolve_shop(x_shop_domain), model_id, body.active)
    except ModelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidModelError as e:
        raise HTTPException(status_code=400, detail={"errors": [err.to_dict() for err in e.errors]})
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"success": True}


@router.post("/{model_id}/duplicate")
async def duplicate_model(model_id: str, x_shop_domain: Optional[str] = Header(None)):
    """Copy a model as a new inactive model."""
    try:
        copy = state.models_service.duplicate_model(resolve_shop(x_shop_domain), model_id)
    except ModelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidModelError as e:
        raise HTTPException(status_code=400, detail={"errors": [err.to_dict() for err in e.errors]})
    return {"id": copy.id}


@router.delete("/{model_id}")
async def delete_model(model_id: str, x_shop_domain: Optional[str] = Header(None)):
    """Delete a model."""
    try:
        state.models_service.delete_model(resolve_shop(x_shop_domain), model_id)
    except ModelNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "message": f"Volume model '{model_id}' deleted"}
