"""
Booking lifecycle

Two independent state machines tracked on every booking.

Booking status:
    pending   -> confirmed   (confirm)
    pending   -> cancelled   (cancel)
    confirmed -> cancelled   (cancel)
    cancelled is terminal

Payment status:
    pending  -> paid      (paid)
    pending  -> failed    (failed)
    failed   -> pending   (retry)
    paid     -> refunded  (refunded)
    refunded is terminal

Cancelling a booking whose payment is ``paid`` refunds it automatically.
A cancelled booking accepts no new payment, only the refund of an
existing one. Anything else raises InvalidTransition.
"""

from dataclasses import dataclass
from enum import Enum

from shared.domain.base import Aggregate
from shared.domain.exceptions import InvalidTransition

from apps.bookings.domain.events import (
    BookingCancelled,
    BookingConfirmed,
    BookingPaymentChanged,
)


class BookingStatus(str, Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'


class PaymentStatus(str, Enum):
    PENDING = 'pending'
    PAID = 'paid'
    FAILED = 'failed'
    REFUNDED = 'refunded'


class BookingAction(str, Enum):
    CONFIRM = 'confirm'
    CANCEL = 'cancel'


class PaymentOutcome(str, Enum):
    PAID = 'paid'
    FAILED = 'failed'
    RETRY = 'retry'
    REFUNDED = 'refunded'


BOOKING_TRANSITIONS = {
    (BookingStatus.PENDING, BookingAction.CONFIRM): BookingStatus.CONFIRMED,
    (BookingStatus.PENDING, BookingAction.CANCEL): BookingStatus.CANCELLED,
    (BookingStatus.CONFIRMED, BookingAction.CANCEL): BookingStatus.CANCELLED,
}

PAYMENT_TRANSITIONS = {
    (PaymentStatus.PENDING, PaymentOutcome.PAID): PaymentStatus.PAID,
    (PaymentStatus.PENDING, PaymentOutcome.FAILED): PaymentStatus.FAILED,
    (PaymentStatus.FAILED, PaymentOutcome.RETRY): PaymentStatus.PENDING,
    (PaymentStatus.PAID, PaymentOutcome.REFUNDED): PaymentStatus.REFUNDED,
}


def next_booking_status(current: BookingStatus, action: BookingAction) -> BookingStatus:
    try:
        return BOOKING_TRANSITIONS[(current, action)]
    except KeyError:
        raise InvalidTransition(
            f"Cannot {action.value} a booking in status {current.value}",
            status=current.value,
            action=action.value,
        ) from None


def next_payment_status(current: PaymentStatus, outcome: PaymentOutcome) -> PaymentStatus:
    try:
        return PAYMENT_TRANSITIONS[(current, outcome)]
    except KeyError:
        raise InvalidTransition(
            f"Cannot record payment outcome {outcome.value} while payment is {current.value}",
            payment_status=current.value,
            outcome=outcome.value,
        ) from None


@dataclass(kw_only=True, eq=False)
class BookingLifecycle(Aggregate):
    """
    Lifecycle aggregate for one booking

    Loaded from the locked booking row, mutated, then written back. The
    ``id`` is the booking's primary key.
    """
    status: BookingStatus = BookingStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING

    @classmethod
    def from_booking(cls, booking) -> 'BookingLifecycle':
        return cls(
            id=booking.pk,
            status=BookingStatus(booking.status),
            payment_status=PaymentStatus(booking.payment_status),
        )

    def apply_to(self, booking) -> list[str]:
        """Copy state onto the ORM row, returning the changed field names"""
        changed = []
        if booking.status != self.status.value:
            booking.status = self.status.value
            changed.append('status')
        if booking.payment_status != self.payment_status.value:
            booking.payment_status = self.payment_status.value
            changed.append('payment_status')
        return changed

    def perform(self, action: BookingAction, reason: str = ''):
        if action is BookingAction.CONFIRM:
            self.confirm()
        else:
            self.cancel(reason)

    def confirm(self):
        self.status = next_booking_status(self.status, BookingAction.CONFIRM)
        self.add_event(BookingConfirmed(aggregate_id=self.id, booking_id=self.id))

    def cancel(self, reason: str = ''):
        previous = self.status
        self.status = next_booking_status(self.status, BookingAction.CANCEL)

        refunded = False
        if self.payment_status is PaymentStatus.PAID:
            self._move_payment(PaymentOutcome.REFUNDED)
            refunded = True

        self.add_event(BookingCancelled(
            aggregate_id=self.id,
            booking_id=self.id,
            previous_status=previous.value,
            reason=reason,
            refunded=refunded,
        ))

    def record_payment(self, outcome: PaymentOutcome):
        if self.status is BookingStatus.CANCELLED and outcome is not PaymentOutcome.REFUNDED:
            raise InvalidTransition(
                f"Cannot record payment outcome {outcome.value} on a cancelled booking",
                status=self.status.value,
                outcome=outcome.value,
            )
        self._move_payment(outcome)

    def _move_payment(self, outcome: PaymentOutcome):
        previous = self.payment_status
        self.payment_status = next_payment_status(previous, outcome)
        self.add_event(BookingPaymentChanged(
            aggregate_id=self.id,
            booking_id=self.id,
            previous_status=previous.value,
            current_status=self.payment_status.value,
        ))
