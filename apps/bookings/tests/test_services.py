"""Booking creation rules and the availability index against the database."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase, override_settings

from apps.accommodations.models import Accommodation, AvailabilityDay, Room, RoomTypePricing
from apps.bookings import services
from apps.bookings.application.command_handlers import (
    CreateBookingCommand,
    CreateBookingHandler,
    TransitionBookingCommand,
    TransitionBookingHandler,
)
from apps.bookings.domain.lifecycle import BookingAction
from apps.bookings.models import Booking
from apps.users.models import User
from shared.domain.exceptions import InvalidDateRange, InvalidSelection, NotFound, Overlap


def today():
    return date(2024, 6, 1)


class BookingServiceTestCase(TestCase):
    def setUp(self) -> None:
        self.host = User.objects.create_user(email="host@example.com", password="x", role=User.RoleChoices.HOST)
        self.guest = User.objects.create_user(email="guest@example.com", password="x")
        self.accommodation = Accommodation.objects.create(
            owner=self.host,
            name="Résidence Almadies",
            city="Dakar",
            status=Accommodation.Status.PUBLISHED,
            base_price=Decimal("45000"),
            max_guests=4,
        )
        self.handler = CreateBookingHandler(today=today)

    def book(self, check_in, check_out, **extra):
        return self.handler.handle(
            CreateBookingCommand(
                accommodation_id=self.accommodation.pk,
                guest=self.guest,
                check_in=check_in,
                check_out=check_out,
                **extra,
            )
        )

    def cancel(self, booking):
        return TransitionBookingHandler().handle(
            TransitionBookingCommand(booking_id=booking.pk, action=BookingAction.CANCEL)
        )


class CreateBookingTests(BookingServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.room = Room.objects.create(
            accommodation=self.accommodation, name="R1", capacity=2, price_per_night=Decimal("60000"),
        )
        existing = self.book(date(2024, 6, 10), date(2024, 6, 15), room_id=self.room.pk)
        TransitionBookingHandler().handle(
            TransitionBookingCommand(booking_id=existing.pk, action=BookingAction.CONFIRM)
        )

    def test_overlapping_stay_is_rejected(self) -> None:
        with self.assertRaises(Overlap) as ctx:
            self.book(date(2024, 6, 12), date(2024, 6, 18), room_id=self.room.pk)

        self.assertEqual(ctx.exception.details["first_unavailable_day"], "2024-06-12")
        self.assertEqual(Booking.objects.count(), 1)

    def test_check_in_on_previous_check_out_succeeds(self) -> None:
        booking = self.book(date(2024, 6, 15), date(2024, 6, 18), room_id=self.room.pk)

        self.assertEqual(booking.total_nights, 3)
        self.assertEqual(booking.total_price, Decimal("180000"))

    def test_other_room_is_independent(self) -> None:
        other = Room.objects.create(
            accommodation=self.accommodation, name="R2", capacity=2, price_per_night=Decimal("55000"),
        )

        booking = self.book(date(2024, 6, 12), date(2024, 6, 14), room_id=other.pk)

        self.assertEqual(booking.room, other)

    def test_past_check_in_uses_injected_clock(self) -> None:
        with self.assertRaises(InvalidDateRange):
            self.book(date(2024, 5, 31), date(2024, 6, 2), room_id=self.room.pk)

    def test_inactive_room_is_not_found(self) -> None:
        self.room.is_active = False
        self.room.save()

        with self.assertRaises(NotFound):
            self.book(date(2024, 7, 1), date(2024, 7, 3), room_id=self.room.pk)

    def test_accommodation_wide_maintenance_blocks_rooms(self) -> None:
        AvailabilityDay.objects.create(
            accommodation=self.accommodation,
            date=date(2024, 7, 2),
            status=AvailabilityDay.DayStatus.MAINTENANCE,
        )

        with self.assertRaises(Overlap):
            self.book(date(2024, 7, 1), date(2024, 7, 4), room_id=self.room.pk)

    def test_whole_accommodation_is_refused_while_a_room_is_booked(self) -> None:
        with self.assertRaises(Overlap) as ctx:
            self.book(date(2024, 6, 12), date(2024, 6, 14))

        self.assertEqual(ctx.exception.details["first_unavailable_day"], "2024-06-12")
        self.assertEqual(Booking.objects.count(), 1)

    def test_rooms_are_refused_while_whole_accommodation_is_booked(self) -> None:
        other = Room.objects.create(
            accommodation=self.accommodation, name="R2", capacity=2, price_per_night=Decimal("55000"),
        )
        self.book(date(2024, 7, 1), date(2024, 7, 4))

        for room in (self.room, other):
            with self.assertRaises(Overlap):
                self.book(date(2024, 7, 3), date(2024, 7, 5), room_id=room.pk)
        self.book(date(2024, 7, 4), date(2024, 7, 6), room_id=other.pk)

    def test_cancelled_room_booking_frees_whole_accommodation(self) -> None:
        self.cancel(Booking.objects.get())

        booking = self.book(date(2024, 6, 12), date(2024, 6, 14))

        self.assertIsNone(booking.room)

    def test_created_booking_is_pending(self) -> None:
        booking = self.book(date(2024, 7, 1), date(2024, 7, 2))

        self.assertEqual(booking.status, Booking.Status.PENDING)
        self.assertEqual(booking.payment_status, Booking.PaymentStatus.PENDING)
        self.assertEqual(booking.nightly_rate, Decimal("45000"))
        self.assertIsNone(booking.room)


class RoomTypeBookingTests(BookingServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.suite = RoomTypePricing.objects.create(
            accommodation=self.accommodation,
            room_type="Suite",
            price_per_night=Decimal("80000"),
            rooms_available=2,
        )

    def test_tracked_tier_accepts_as_many_stays_as_units(self) -> None:
        first = self.book(date(2024, 6, 10), date(2024, 6, 12), room_type="Suite")
        self.book(date(2024, 6, 11), date(2024, 6, 13), room_type="Suite")

        with self.assertRaises(Overlap):
            self.book(date(2024, 6, 11), date(2024, 6, 12), room_type="Suite")

        self.cancel(first)
        booking = self.book(date(2024, 6, 11), date(2024, 6, 12), room_type="Suite")
        self.assertEqual(booking.nightly_rate, Decimal("80000"))

    def test_exhausted_tier_rejects_bookings(self) -> None:
        self.suite.rooms_available = 0
        self.suite.save()

        with self.assertRaises(Overlap):
            self.book(date(2024, 6, 10), date(2024, 6, 12), room_type="Suite")

    def test_tracked_tier_and_whole_accommodation_exclude_each_other(self) -> None:
        self.book(date(2024, 6, 10), date(2024, 6, 12), room_type="Suite")

        with self.assertRaises(Overlap):
            self.book(date(2024, 6, 11), date(2024, 6, 13))

        self.book(date(2024, 6, 20), date(2024, 6, 22))
        with self.assertRaises(Overlap):
            self.book(date(2024, 6, 21), date(2024, 6, 23), room_type="Suite")

    def test_tier_unit_count_is_read_at_booking_time(self) -> None:
        self.book(date(2024, 6, 10), date(2024, 6, 12), room_type="Suite")
        RoomTypePricing.objects.filter(pk=self.suite.pk).update(rooms_available=1)

        with self.assertRaises(Overlap):
            self.book(date(2024, 6, 10), date(2024, 6, 12), room_type="Suite")

    def test_untracked_tier_shares_accommodation_space(self) -> None:
        RoomTypePricing.objects.create(
            accommodation=self.accommodation,
            room_type="Standard",
            price_per_night=Decimal("30000"),
        )
        self.book(date(2024, 6, 10), date(2024, 6, 12), room_type="Standard")

        with self.assertRaises(Overlap):
            self.book(date(2024, 6, 11), date(2024, 6, 13))

    def test_rooms_cannot_be_booked_when_tiers_exist(self) -> None:
        room = Room.objects.create(accommodation=self.accommodation, capacity=2, price_per_night=Decimal("1"))

        with self.assertRaises(InvalidSelection):
            self.book(date(2024, 6, 10), date(2024, 6, 12), room_id=room.pk)

    def test_unknown_tier_is_not_found(self) -> None:
        with self.assertRaises(NotFound):
            self.book(date(2024, 6, 10), date(2024, 6, 12), room_type="Penthouse")


class AvailabilityCalendarTests(BookingServiceTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.room = Room.objects.create(
            accommodation=self.accommodation, capacity=2, price_per_night=Decimal("60000"),
        )

    def test_day_statuses_and_prices(self) -> None:
        self.book(date(2024, 6, 10), date(2024, 6, 12), room_id=self.room.pk)
        AvailabilityDay.objects.create(
            accommodation=self.accommodation,
            room=self.room,
            date=date(2024, 6, 13),
            status=AvailabilityDay.DayStatus.MAINTENANCE,
        )
        AvailabilityDay.objects.create(
            accommodation=self.accommodation, date=date(2024, 6, 14), price=Decimal("40000"),
        )
        AvailabilityDay.objects.create(
            accommodation=self.accommodation, room=self.room, date=date(2024, 6, 14), price=Decimal("65000"),
        )

        days = services.availability_calendar(self.accommodation, self.room, date(2024, 6, 9), date(2024, 6, 14))

        self.assertEqual(
            [(d["date"].day, d["status"]) for d in days],
            [(9, "available"), (10, "occupied"), (11, "occupied"), (12, "available"),
             (13, "maintenance"), (14, "available")],
        )
        self.assertEqual(days[-1]["price"], Decimal("65000"))
        self.assertNotIn("price", days[0])

    def test_room_bookings_fill_the_accommodation_calendar(self) -> None:
        self.book(date(2024, 6, 10), date(2024, 6, 12), room_id=self.room.pk)

        days = services.availability_calendar(self.accommodation, None, date(2024, 6, 10), date(2024, 6, 12))

        self.assertEqual([d["status"] for d in days], ["occupied", "occupied", "available"])

    def test_whole_accommodation_booking_fills_room_calendars(self) -> None:
        self.book(date(2024, 6, 10), date(2024, 6, 11))

        days = services.availability_calendar(self.accommodation, self.room, date(2024, 6, 10), date(2024, 6, 11))

        self.assertEqual([d["status"] for d in days], ["occupied", "available"])

    def test_cancelled_bookings_free_the_calendar(self) -> None:
        booking = self.book(date(2024, 6, 10), date(2024, 6, 12), room_id=self.room.pk)
        self.cancel(booking)

        days = services.availability_calendar(self.accommodation, self.room, date(2024, 6, 10), date(2024, 6, 11))

        self.assertEqual({d["status"] for d in days}, {"available"})

    def test_reversed_range_is_invalid(self) -> None:
        with self.assertRaises(InvalidDateRange):
            services.availability_calendar(self.accommodation, self.room, date(2024, 6, 10), date(2024, 6, 9))

    @override_settings(STAYBOOK_CALENDAR_MAX_DAYS=31)
    def test_span_is_bounded(self) -> None:
        with self.assertRaises(InvalidDateRange):
            services.availability_calendar(self.accommodation, self.room, date(2024, 6, 1), date(2024, 7, 2))

        days = services.availability_calendar(self.accommodation, self.room, date(2024, 6, 1), date(2024, 7, 1))
        self.assertEqual(len(days), 31)
