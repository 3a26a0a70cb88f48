"""
Tier resolution: highest qualifying floor wins, None when nothing applies.
"""
from volume_pricing.engine.resolver import resolve_tier

from conftest import make_tier


def test_quantity_in_bounded_tier(example_tiers):
    assert resolve_tier(7, example_tiers) is example_tiers[0]


def test_quantity_in_open_ended_tier(example_tiers):
    assert resolve_tier(15, example_tiers) is example_tiers[1]
    assert resolve_tier(10_000, example_tiers) is example_tiers[1]


def test_quantity_below_smallest_tier_is_none(example_tiers):
    assert resolve_tier(3, example_tiers) is None
    assert resolve_tier(1, example_tiers) is None


def test_boundaries_are_inclusive(example_tiers):
    assert resolve_tier(5, example_tiers) is example_tiers[0]
    assert resolve_tier(9, example_tiers) is example_tiers[0]
    assert resolve_tier(10, example_tiers) is example_tiers[1]


def test_gap_between_tiers_is_none():
    tiers = [make_tier(1, 4), make_tier(10, 20)]
    assert resolve_tier(7, tiers) is None
    assert resolve_tier(21, tiers) is None


def test_empty_tier_set():
    assert resolve_tier(5, []) is None


def test_input_order_does_not_matter(example_tiers):
    reversed_tiers = list(reversed(example_tiers))
    for qty in range(1, 30):
        assert resolve_tier(qty, reversed_tiers) is resolve_tier(qty, example_tiers)


def test_overlapping_set_prefers_highest_floor():
    low = make_tier(5, 10, value="5")
    high = make_tier(8, 20, value="20")
    assert resolve_tier(9, [low, high]) is high
    assert resolve_tier(6, [low, high]) is low


def test_tier_without_floor_never_matches():
    assert resolve_tier(3, [make_tier(None)]) is None


def test_resolved_tier_always_covers_quantity():
    tiers = [make_tier(1, 4), make_tier(5, 9), make_tier(12, 20), make_tier(25)]
    for qty in range(1, 60):
        tier = resolve_tier(qty, tiers)
        if tier is not None:
            assert tier.min_qty <= qty
            assert tier.max_qty is None or qty <= tier.max_qty
        else:
            assert not any(t.covers(qty) for t in tiers)


def test_resolution_is_monotonic_in_quantity():
    tiers = [make_tier(1, 4), make_tier(5, 9), make_tier(10, 24), make_tier(25)]
    floors = [resolve_tier(qty, tiers).min_qty for qty in range(1, 60)]
    assert floors == sorted(floors)
