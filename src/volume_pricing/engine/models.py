"""
Data models for the volume pricing engine.

Uses dataclasses for structured, type-safe data representation.
All monetary amounts are single-currency Decimals.
"""
import math
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Optional


CENT = Decimal("0.01")


class DiscountType(str, Enum):
    """How a tier's discount_value is applied to the base price."""
    PERCENT = "PERCENT"
    AMOUNT = "AMOUNT"
    FIXED_PRICE = "FIXED_PRICE"

    @classmethod
    def parse(cls, value) -> 'DiscountType':
        """
        Parse a discount type from user input.

        Accepts the enum itself or its value in any case. The admin form
        historically sent FIXED for "Fixed Amount", which maps to AMOUNT.
        """
        if isinstance(value, cls):
            return value
        key = str(value or '').strip().upper()
        if key == 'FIXED':
            return cls.AMOUNT
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown discount type '{value}'") from None


class DisplayStyle(str, Enum):
    """Storefront presentation preset (passed through, never interpreted)."""
    BADGE_ROW = "BADGE_ROW"
    TIER_TABLE = "TIER_TABLE"
    INLINE_BANNER = "INLINE_BANNER"
    SLIDER = "SLIDER"
    DROPDOWN = "DROPDOWN"
    GRID = "GRID"


def to_decimal(value) -> Optional[Decimal]:
    """Parse an optional decimal amount (empty = None). NaN and Infinity are rejected."""
    if value is None or value == '':
        return None
    if isinstance(value, Decimal):
        parsed = value
    else:
        try:
            # str() keeps floats like 29.99 from picking up binary noise
            parsed = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"'{value}' is not a valid decimal amount") from None
    if not parsed.is_finite():
        raise ValueError(f"'{value}' is not a valid decimal amount")
    return parsed


def to_optional_int(value) -> Optional[int]:
    """Parse an optional integer (empty = None)."""
    if value is None or value == '':
        return None
    return int(value)


def to_number(value: Optional[Decimal]):
    """Render a Decimal as a JSON number (int when integral)."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def round_money(value: Decimal) -> float:
    """Round to cents for output."""
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Tier:
    """One quantity-bounded discount rule."""
    min_qty: Optional[int]
    discount_type: DiscountType
    discount_value: Optional[Decimal]
    max_qty: Optional[int] = None  # None = open-ended
    id: Optional[str] = None

    def __post_init__(self):
        # Amounts may arrive as int, float or str; arithmetic needs Decimal
        object.__setattr__(self, 'discount_value', to_decimal(self.discount_value))

    @property
    def end(self):
        """Upper bound of the covered range (inf when open-ended)."""
        return math.inf if self.max_qty is None else self.max_qty

    def covers(self, quantity: int) -> bool:
        """True if quantity falls in [min_qty, max_qty]."""
        if self.min_qty is None:
            return False
        return quantity >= self.min_qty and (self.max_qty is None or quantity <= self.max_qty)

    def to_dict(self) -> dict:
        """Convert to the JSON interchange shape."""
        data = {
            "minQty": self.min_qty,
            "maxQty": self.max_qty,
            "discountType": self.discount_type.value,
            "discountValue": to_number(self.discount_value),
        }
        if self.id:
            data = {"id": self.id, **data}
        return data

    def to_record(self) -> dict:
        """Convert to the storage shape (exact decimal as string)."""
        data = self.to_dict()
        data["discountValue"] = None if self.discount_value is None else str(self.discount_value)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Tier':
        """Create Tier from the JSON interchange shape."""
        return cls(
            id=data.get('id') or None,
            min_qty=to_optional_int(data.get('minQty')),
            max_qty=to_optional_int(data.get('maxQty')),
            discount_type=DiscountType.parse(data.get('discountType')),
            discount_value=to_decimal(data.get('discountValue')),
        )


@dataclass
class DisplaySettings:
    """Presentation settings for the storefront widget."""
    style: DisplayStyle = DisplayStyle.BADGE_ROW
    show_per_unit: bool = True
    show_compare_at: bool = False
    badge_tone: str = "success"
    custom_copy: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "style": self.style.value,
            "showPerUnit": self.show_per_unit,
            "showCompareAt": self.show_compare_at,
            "badgeTone": self.badge_tone,
            "customCopy": self.custom_copy,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'DisplaySettings':
        data = data or {}
        return cls(
            style=DisplayStyle(data.get('style') or data.get('preset') or DisplayStyle.BADGE_ROW),
            show_per_unit=True if data.get('showPerUnit') is None else bool(data['showPerUnit']),
            show_compare_at=bool(data.get('showCompareAt') or False),
            badge_tone=data.get('badgeTone') or "success",
            custom_copy=data.get('customCopy'),
        )


@dataclass
class PricingModel:
    """A named volume pricing model and the products it applies to."""
    id: str
    name: str
    product_ids: list[str] = field(default_factory=list)
    tiers: tuple[Tier, ...] = ()
    display: DisplaySettings = field(default_factory=DisplaySettings)
    active: bool = False
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "productIds": list(self.product_ids),
            "tiers": [tier.to_dict() for tier in self.tiers],
            "displaySettings": self.display.to_dict(),
            "active": self.active,
            "updatedAt": self.updated_at,
        }

    def to_record(self) -> dict:
        data = self.to_dict()
        data["tiers"] = [tier.to_record() for tier in self.tiers]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'PricingModel':
        return cls(
            id=data.get('id', ''),
            name=data.get('name', ''),
            product_ids=list(data.get('productIds') or []),
            tiers=tuple(Tier.from_dict(t) for t in data.get('tiers') or []),
            display=DisplaySettings.from_dict(data.get('displaySettings')),
            active=bool(data.get('active', False)),
            updated_at=data.get('updatedAt'),
        )


@dataclass(frozen=True)
class ResolvedPrice:
    """Derived price for one unit under a (possibly absent) tier."""
    tier: Optional[Tier]
    unit_price: Decimal
    savings_per_unit: Decimal
    savings_percent: Decimal

    def to_dict(self) -> dict:
        """Output shape, rounded to cents only here."""
        return {
            "tier": self.tier.to_dict() if self.tier else None,
            "unitPrice": round_money(self.unit_price),
            "savingsPerUnit": round_money(self.savings_per_unit),
            "savingsPercent": round_money(self.savings_percent),
        }


@dataclass(frozen=True)
class ValidationError:
    """A single configuration problem, tagged to the offending field."""
    field: str
    message: str
    index: Optional[int] = None  # tier position in input order

    @property
    def path(self) -> str:
        if self.index is None:
            return self.field
        return f"tiers[{self.index}].{self.field}"

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message, "path": self.path}


@dataclass
class TraceStep:
    """A single step in the quote resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class Quote:
    """Customer-facing price for a product at a quantity."""
    product_id: str
    quantity: int
    base_price: Decimal
    price: ResolvedPrice
    model_id: Optional[str] = None
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def extended_price(self) -> Decimal:
        return self.price.unit_price * self.quantity

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this quote."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "quantity": self.quantity,
            "modelId": self.model_id,
            "basePrice": round_money(self.base_price),
            **self.price.to_dict(),
            "extendedPrice": round_money(self.extended_price),
            "trace": [
                {"step": t.step, "description": t.description, "value": t.value}
                for t in self.trace
            ],
        }
