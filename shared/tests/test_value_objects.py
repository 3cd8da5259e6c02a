"""Money and DateRange behaviour."""

from datetime import date
from decimal import Decimal

import pytest

from shared.domain.value_objects import DateRange, Money


def test_money_coerces_to_decimal():
    assert Money(70000).amount == Decimal("70000")
    assert Money("12.50", "EUR").currency == "EUR"


@pytest.mark.parametrize("currency", ["xof", "XO", ""])
def test_money_rejects_bad_currency(currency):
    with pytest.raises(ValueError):
        Money(1, currency)


def test_money_rejects_negative_amount():
    with pytest.raises(ValueError):
        Money(-1)


def test_money_arithmetic_requires_same_currency():
    assert Money(70000) * 3 == Money(210000)
    assert Money(210000) - Money(21000) == Money(189000)
    with pytest.raises(ValueError):
        Money(1, "XOF") + Money(1, "EUR")


@pytest.mark.parametrize(
    "amount, rate, expected",
    [
        ("210000", "10", "21000"),
        ("1005", "10", "101"),  # 100.5 rounds half up
        ("1004", "10", "100"),
        ("999", "0", "0"),
    ],
)
def test_percentage_rounds_half_up_to_whole_units(amount, rate, expected):
    assert Money(amount).percentage(Decimal(rate)).amount == Decimal(expected)


def test_date_range_is_half_open():
    stay = DateRange(date(2024, 6, 10), date(2024, 6, 15))

    assert len(stay) == 5
    assert stay.contains(date(2024, 6, 10))
    assert not stay.contains(date(2024, 6, 15))
    assert list(stay.days())[-1] == date(2024, 6, 14)


def test_date_range_overlap_excludes_shared_boundary():
    stay = DateRange(date(2024, 6, 10), date(2024, 6, 15))

    assert stay.overlaps_with(DateRange(date(2024, 6, 12), date(2024, 6, 18)))
    assert not stay.overlaps_with(DateRange(date(2024, 6, 15), date(2024, 6, 18)))


def test_empty_date_range_is_rejected():
    with pytest.raises(ValueError):
        DateRange(date(2024, 6, 10), date(2024, 6, 10))
