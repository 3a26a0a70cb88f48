import random
from decimal import Decimal

from volume_pricing.engine.formatter import (
    EMPTY_SUMMARY,
    format_discount,
    format_money,
    format_range,
    format_summary,
    format_value,
)
from volume_pricing.engine.models import DiscountType, Tier

from conftest import make_tier


def test_empty_summary():
    assert format_summary([]) == "No tiers configured"
    assert format_summary(()) == EMPTY_SUMMARY


def test_summary_example(example_tiers):
    assert format_summary(example_tiers) == "5-9 → 10% off; 10+ → 15% off"


def test_summary_all_discount_types():
    tiers = [
        make_tier(20, None, DiscountType.FIXED_PRICE, "9.00"),
        make_tier(2, 5, DiscountType.AMOUNT, "1.50"),
        make_tier(6, 19, DiscountType.PERCENT, "12.5"),
    ]
    assert format_summary(tiers) == "2-5 → $1.5 off; 6-19 → 12.5% off; 20+ → $9/unit"


def test_summary_is_order_invariant():
    tiers = [
        make_tier(1, 4, DiscountType.PERCENT, "5"),
        make_tier(5, 9, DiscountType.AMOUNT, "2"),
        make_tier(10, 49, DiscountType.PERCENT, "15"),
        make_tier(50, None, DiscountType.FIXED_PRICE, "19.99"),
    ]
    expected = format_summary(tiers)
    rng = random.Random(7)
    for _ in range(20):
        shuffled = list(tiers)
        rng.shuffle(shuffled)
        assert format_summary(shuffled) == expected


def test_summary_is_idempotent(example_tiers):
    assert format_summary(example_tiers) == format_summary(example_tiers)


def test_summary_order_invariant_with_duplicate_floors():
    a = make_tier(5, 9, DiscountType.PERCENT, "10")
    b = make_tier(5, 9, DiscountType.AMOUNT, "3")
    assert format_summary([a, b]) == format_summary([b, a])


def test_range_and_discount_pieces():
    assert format_range(make_tier(5, 9)) == "5-9"
    assert format_range(make_tier(10)) == "10+"
    assert format_discount(make_tier(1, discount_type=DiscountType.PERCENT, value="10")) == "10% off"
    assert format_discount(make_tier(1, discount_type=DiscountType.AMOUNT, value="2.25")) == "$2.25 off"
    assert format_discount(make_tier(1, discount_type=DiscountType.FIXED_PRICE, value="35")) == "$35/unit"


def test_format_value_strips_trailing_zeros():
    assert format_value(Decimal("10.00")) == "10"
    assert format_value(Decimal("2.50")) == "2.5"
    assert format_value(Decimal("1E+1")) == "10"


def test_format_money():
    assert format_money(Decimal("26.991")) == "$26.99"
    assert format_money(Decimal("2.999")) == "$3.00"
    assert format_money(Decimal("1234.5")) == "$1,234.50"
    assert format_money(0) == "$0.00"


def test_summary_accepts_int_values():
    tiers = [
        Tier(min_qty=5, max_qty=9, discount_type=DiscountType.PERCENT, discount_value=10),
        Tier(min_qty=10, discount_type=DiscountType.PERCENT, discount_value=15),
    ]
    assert format_summary(tiers) == "5-9 → 10% off; 10+ → 15% off"
