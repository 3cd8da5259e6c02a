"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Validate and create a pending booking
- TransitionBookingCommand: Confirm or cancel a booking
- RecordPaymentCommand: Record a payment outcome
"""

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional
import logging

from django.conf import settings
from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.exceptions import CapacityExceeded, InvalidDateRange, NotFound, Overlap
from shared.domain.value_objects import DateRange
from apps.accommodations.models import Accommodation
from apps.bookings import services
from apps.bookings.domain.events import BookingCreated
from apps.bookings.domain.lifecycle import BookingAction, BookingLifecycle, PaymentOutcome
from apps.bookings.domain.pricing import PricingResolver
from apps.bookings.models import Booking

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    ``room_id`` and ``room_type`` are mutually exclusive; with neither the
    whole accommodation is booked.
    """
    accommodation_id: int
    guest: object
    check_in: date
    check_out: date
    guests: int = 1
    room_id: Optional[int] = None
    room_type: str = ''
    notes: str = ''


@dataclass
class TransitionBookingCommand:
    booking_id: int
    action: BookingAction
    reason: str = ''


@dataclass
class RecordPaymentCommand:
    booking_id: int
    outcome: PaymentOutcome


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Dates are checked first. Everything else runs in one transaction holding
    the Accommodation row lock, plus the Room row lock for a room booking:
    the published status, the room or tier selection, capacity, occupancy
    and the insert. Two requests that could share a night are serialized
    and the loser sees Overlap.
    """

    def __init__(self, pricing: PricingResolver | None = None, today: Callable[[], date] | None = None):
        self.pricing = pricing or PricingResolver(currency=settings.STAYBOOK_CURRENCY)
        self.today = today or timezone.localdate

    def handle(self, command: CreateBookingCommand) -> Booking:
        """
        Raises:
            InvalidDateRange, CapacityExceeded, Overlap, InvalidSelection, NotFound
        """
        logger.info(
            "Creating booking for accommodation %s (room=%s, room_type=%r), dates %s - %s",
            command.accommodation_id, command.room_id, command.room_type,
            command.check_in, command.check_out,
        )

        self._check_dates(command)
        stay = DateRange(command.check_in, command.check_out)

        with DjangoUnitOfWork() as uow:
            # status, selection and tier units are read under the accommodation lock
            accommodation = services.lock_published_accommodation(command.accommodation_id)
            room, tier = services.resolve_selection(accommodation, command.room_id, command.room_type)
            self._check_capacity(command.guests, accommodation, room)

            target = services.target_for(accommodation, room, tier)
            units = services.units_for(tier)

            services.lock_target(target)
            try:
                services.ensure_target_is_available(target, stay, units)
            except Overlap as exc:
                logger.warning("Booking rejected for %s %s: %s", target, stay, exc.details)
                raise

            rate = self.pricing.resolve(accommodation, room, tier)
            nights = len(stay)
            booking = Booking.objects.create(
                guest=command.guest,
                accommodation=accommodation,
                room=room,
                room_type=tier.room_type if tier is not None else '',
                reference=Booking.generate_reference(),
                check_in=command.check_in,
                check_out=command.check_out,
                guests=command.guests,
                nightly_rate=rate.amount,
                total_nights=nights,
                total_price=(rate * nights).amount,
                currency=rate.currency,
                notes=command.notes,
            )

            lifecycle = BookingLifecycle.from_booking(booking)
            lifecycle.add_event(BookingCreated(
                aggregate_id=booking.pk,
                booking_id=booking.pk,
                accommodation_id=accommodation.pk,
                room_id=booking.room_id,
                room_type=booking.room_type,
                check_in=booking.check_in,
                check_out=booking.check_out,
                total_price=booking.total_price,
            ))
            uow.collect_events(lifecycle)

        logger.info(
            "Booking created successfully: %s (ID: %s, total %s %s)",
            booking.reference, booking.pk, booking.total_price, booking.currency,
        )
        return booking

    def _check_dates(self, command: CreateBookingCommand):
        if command.check_out <= command.check_in:
            raise InvalidDateRange(
                "Check-out date must be after check-in date",
                check_in=command.check_in.isoformat(),
                check_out=command.check_out.isoformat(),
            )
        if command.check_in < self.today():
            raise InvalidDateRange(
                "Check-in date cannot be in the past",
                check_in=command.check_in.isoformat(),
            )

    def _check_capacity(self, guests: int, accommodation: Accommodation, room):
        capacity = room.capacity if room is not None else accommodation.max_guests
        if guests > capacity:
            logger.warning("Booking rejected: %s guests for capacity %s", guests, capacity)
            raise CapacityExceeded(
                f"Guests count ({guests}) exceeds capacity ({capacity})",
                guests=guests,
                capacity=capacity,
            )


def _locked_booking(booking_id) -> Booking:
    booking = services.lock_for_update(Booking.objects.filter(pk=booking_id)).first()
    if booking is None:
        raise NotFound(f"Booking {booking_id} not found")
    return booking


class TransitionBookingHandler:
    """Handler for confirming or cancelling a booking"""

    def handle(self, command: TransitionBookingCommand) -> Booking:
        logger.info("Booking %s: %s requested", command.booking_id, command.action.value)

        with DjangoUnitOfWork() as uow:
            booking = _locked_booking(command.booking_id)

            lifecycle = BookingLifecycle.from_booking(booking)
            lifecycle.perform(command.action, command.reason)

            changed = lifecycle.apply_to(booking)
            now = timezone.now()
            if command.action is BookingAction.CONFIRM:
                booking.confirmed_at = now
                changed.append('confirmed_at')
            else:
                booking.cancelled_at = now
                booking.cancellation_reason = command.reason[:255]
                changed += ['cancelled_at', 'cancellation_reason']

            booking.save(update_fields=changed + ['updated_at'])
            uow.collect_events(lifecycle)

        logger.info(
            "Booking %s is now %s (payment %s)",
            booking.reference, booking.status, booking.payment_status,
        )
        return booking


class RecordPaymentHandler:
    """Handler for payment outcomes reported by the payment side"""

    def handle(self, command: RecordPaymentCommand) -> Booking:
        logger.info("Booking %s: payment outcome %s", command.booking_id, command.outcome.value)

        with DjangoUnitOfWork() as uow:
            booking = _locked_booking(command.booking_id)

            lifecycle = BookingLifecycle.from_booking(booking)
            lifecycle.record_payment(command.outcome)

            changed = lifecycle.apply_to(booking)
            if command.outcome is PaymentOutcome.PAID:
                booking.paid_at = timezone.now()
                changed.append('paid_at')

            booking.save(update_fields=changed + ['updated_at'])
            uow.collect_events(lifecycle)

        logger.info("Booking %s payment is now %s", booking.reference, booking.payment_status)
        return booking
