"""
Booking Domain Events

Published after the transaction that produced them commits.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class BookingCreated(DomainEvent):
    """A booking was accepted in ``pending``"""
    booking_id: int
    accommodation_id: int
    room_id: int | None
    room_type: str
    check_in: date
    check_out: date
    total_price: Decimal


@dataclass(kw_only=True)
class BookingConfirmed(DomainEvent):
    """pending -> confirmed"""
    booking_id: int


@dataclass(kw_only=True)
class BookingCancelled(DomainEvent):
    """
    The booking reached ``cancelled``

    Triggers:
    - cancel the commission record, if one exists
    """
    booking_id: int
    previous_status: str
    reason: str = ''
    refunded: bool = False


@dataclass(kw_only=True)
class BookingPaymentChanged(DomainEvent):
    """
    Payment status moved

    Triggers:
    - previous -> ``paid``: materialize the commission record
    """
    booking_id: int
    previous_status: str
    current_status: str

    @property
    def became_paid(self) -> bool:
        return self.current_status == 'paid' and self.previous_status != 'paid'
