"""
Commission split

The platform keeps ``rate`` percent of a paid booking and the host the
rest. The commission is rounded half-up to whole currency units and the
host amount is whatever remains, so the two always add back up to the
booking amount.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from shared.domain.base import ValueObject
from shared.domain.exceptions import InvalidRate
from shared.domain.value_objects import Money

MIN_RATE = Decimal('0')
MAX_RATE = Decimal('100')
# matches the precision rates are stored with
RATE_STEP = Decimal('0.01')


def validate_rate(rate) -> Decimal:
    """
    Coerce ``rate`` to a Decimal percentage

    Raises InvalidRate outside [0, 100] or with more than two decimal places.
    """
    try:
        value = Decimal(str(rate))
    except (InvalidOperation, ValueError):
        raise InvalidRate(f"Commission rate {rate!r} is not a number", rate=str(rate)) from None
    if not value.is_finite() or not MIN_RATE <= value <= MAX_RATE:
        raise InvalidRate(rate=str(rate))
    if value != value.quantize(RATE_STEP):
        raise InvalidRate(f"Commission rate {rate!r} has more than two decimal places", rate=str(rate))
    return value


@dataclass(frozen=True)
class RateSnapshot(ValueObject):
    """The configured rate as read at one moment, with its config version"""
    rate: Decimal
    version: int


@dataclass(frozen=True)
class CommissionSplit(ValueObject):
    booking_amount: Money
    rate: Decimal
    commission: Money
    host_amount: Money

    @classmethod
    def compute(cls, booking_amount: Money, rate) -> 'CommissionSplit':
        rate = validate_rate(rate)
        commission = booking_amount.percentage(rate)
        if commission.amount > booking_amount.amount:
            # rounding a 100% share of fractional units up
            commission = booking_amount
        return cls(
            booking_amount=booking_amount,
            rate=rate,
            commission=commission,
            host_amount=booking_amount - commission,
        )
