from decimal import Decimal

import pytest

from volume_pricing.engine.models import DiscountType, DisplayStyle, PricingModel, Tier, ValidationError


def test_discount_type_parse():
    assert DiscountType.parse("percent") is DiscountType.PERCENT
    assert DiscountType.parse(DiscountType.AMOUNT) is DiscountType.AMOUNT
    assert DiscountType.parse("FIXED_PRICE") is DiscountType.FIXED_PRICE


def test_legacy_fixed_means_fixed_amount():
    assert DiscountType.parse("FIXED") is DiscountType.AMOUNT


def test_discount_type_parse_rejects_unknown():
    with pytest.raises(ValueError, match="Unknown discount type"):
        DiscountType.parse("BOGO")


def test_tier_from_interchange_shape():
    tier = Tier.from_dict({"minQty": 5, "maxQty": None, "discountType": "PERCENT", "discountValue": 12.5})

    assert tier.min_qty == 5
    assert tier.max_qty is None
    assert tier.discount_value == Decimal("12.5")
    assert tier.id is None


def test_tier_from_numeric_strings():
    tier = Tier.from_dict({"id": "t1", "minQty": "5", "maxQty": "9", "discountType": "AMOUNT", "discountValue": "2.50"})
    assert (tier.min_qty, tier.max_qty, tier.discount_value) == (5, 9, Decimal("2.50"))


def test_tier_rejects_non_numeric_value():
    with pytest.raises(ValueError):
        Tier.from_dict({"minQty": 1, "discountType": "PERCENT", "discountValue": "ten"})


def test_tier_to_dict_uses_json_numbers():
    tier = Tier(id="t1", min_qty=10, max_qty=None, discount_type=DiscountType.PERCENT, discount_value=Decimal("15.00"))
    assert tier.to_dict() == {
        "id": "t1", "minQty": 10, "maxQty": None, "discountType": "PERCENT", "discountValue": 15,
    }
    assert tier.to_record()["discountValue"] == "15.00"


def test_tier_is_immutable():
    tier = Tier(min_qty=1, discount_type=DiscountType.PERCENT, discount_value=Decimal("5"))
    with pytest.raises(AttributeError):
        tier.min_qty = 2


def test_covers():
    tier = Tier(min_qty=5, max_qty=9, discount_type=DiscountType.PERCENT, discount_value=Decimal("5"))
    assert not tier.covers(4)
    assert tier.covers(5)
    assert tier.covers(9)
    assert not tier.covers(10)


def test_pricing_model_round_trip_defaults():
    model = PricingModel.from_dict({
        "id": "m1",
        "name": "Bulk",
        "productIds": ["gid://shopify/Product/1"],
        "tiers": [{"minQty": 2, "discountType": "FIXED", "discountValue": 1}],
        "displaySettings": {"preset": "TIER_TABLE", "showPerUnit": None},
    })

    assert model.tiers[0].discount_type is DiscountType.AMOUNT
    assert model.display.style is DisplayStyle.TIER_TABLE
    assert model.display.show_per_unit is True
    assert model.active is False
    assert PricingModel.from_dict(model.to_record()) == model


def test_validation_error_path():
    assert ValidationError("minQty", "bad", 2).path == "tiers[2].minQty"
    assert ValidationError("name", "bad").to_dict() == {"field": "name", "message": "bad", "path": "name"}


def test_tier_coerces_plain_numbers_to_decimal():
    assert Tier(min_qty=5, discount_type=DiscountType.PERCENT, discount_value=10).discount_value == Decimal("10")
    assert Tier(min_qty=5, discount_type=DiscountType.AMOUNT, discount_value=10.5).discount_value == Decimal("10.5")
    assert Tier(min_qty=5, discount_type=DiscountType.AMOUNT, discount_value="2.50").discount_value == Decimal("2.50")


@pytest.mark.parametrize("value", ["NaN", "Infinity", "-inf", float("nan")])
def test_tier_rejects_non_finite_values(value):
    with pytest.raises(ValueError, match="not a valid decimal amount"):
        Tier.from_dict({"minQty": 1, "discountType": "PERCENT", "discountValue": value})
