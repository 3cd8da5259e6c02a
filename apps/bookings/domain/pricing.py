"""
Nightly rate resolution

Priority, highest first:
1. the selected room's own rate
2. the selected room-type tier's rate, unless the tier is exhausted
3. the accommodation's base rate

The resolved rate is frozen on the booking at creation; nothing here is
ever re-run for an existing booking.
"""

import logging
from decimal import Decimal

from shared.domain.exceptions import InvalidSelection
from shared.domain.value_objects import Money

logger = logging.getLogger(__name__)


def tier_is_exhausted(tier) -> bool:
    """A tier with a tracked unit count of zero cannot supply its rate"""
    units = getattr(tier, 'rooms_available', None)
    return units is not None and units <= 0


class PricingResolver:
    """
    Resolves the nightly rate for a booking request.

    Works on any objects exposing ``base_price`` (accommodation) and
    ``price_per_night`` (room, tier); tiers may expose ``rooms_available``.
    """

    def __init__(self, currency: str):
        self.currency = currency

    def resolve(self, accommodation, room=None, tier=None) -> Money:
        if room is not None and tier is not None:
            raise InvalidSelection()

        if room is not None:
            rate, source = room.price_per_night, 'room'
        elif tier is not None and not tier_is_exhausted(tier):
            rate, source = tier.price_per_night, 'room_type'
        else:
            rate, source = accommodation.base_price, 'base'

        logger.debug("Resolved nightly rate %s from %s", rate, source)
        return Money(Decimal(str(rate)), self.currency)
