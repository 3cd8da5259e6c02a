"""Nightly rate resolution."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from apps.bookings.domain.pricing import PricingResolver, tier_is_exhausted
from shared.domain.exceptions import InvalidSelection
from shared.domain.value_objects import Money

accommodation = SimpleNamespace(base_price=Decimal("50000"))
room = SimpleNamespace(price_per_night=Decimal("70000"))
resolver = PricingResolver(currency="XOF")


def test_room_rate_wins():
    assert resolver.resolve(accommodation, room=room) == Money(Decimal("70000"), "XOF")


def test_tier_rate_used_when_units_remain():
    suite = SimpleNamespace(price_per_night=Decimal("90000"), rooms_available=3)
    assert resolver.resolve(accommodation, tier=suite).amount == Decimal("90000")


def test_untracked_tier_is_never_exhausted():
    suite = SimpleNamespace(price_per_night=Decimal("90000"), rooms_available=None)
    assert not tier_is_exhausted(suite)
    assert resolver.resolve(accommodation, tier=suite).amount == Decimal("90000")


def test_exhausted_tier_falls_back_to_base_rate():
    suite = SimpleNamespace(price_per_night=Decimal("90000"), rooms_available=0)
    assert tier_is_exhausted(suite)
    assert resolver.resolve(accommodation, tier=suite).amount == Decimal("50000")


def test_no_selection_uses_base_rate():
    assert resolver.resolve(accommodation).amount == Decimal("50000")


def test_room_and_tier_together_are_rejected():
    suite = SimpleNamespace(price_per_night=Decimal("90000"), rooms_available=1)
    with pytest.raises(InvalidSelection):
        resolver.resolve(accommodation, room=room, tier=suite)
