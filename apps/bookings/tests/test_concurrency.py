"""Concurrent booking attempts on the same target."""

from __future__ import annotations

import threading
import time
from datetime import timedelta
from decimal import Decimal

from django.db import connection, transaction
from django.test import TransactionTestCase
from django.utils import timezone

from apps.accommodations.models import Accommodation, Room
from apps.bookings.application.command_handlers import CreateBookingCommand, CreateBookingHandler
from apps.bookings.models import Booking
from apps.users.models import User
from shared.domain.exceptions import NotFound, Overlap


class ConcurrentBookingTests(TransactionTestCase):
    def setUp(self) -> None:
        host = User.objects.create_user(email="host@example.com", password="x", role=User.RoleChoices.HOST)
        self.guests = [
            User.objects.create_user(email=f"guest{i}@example.com", password="x") for i in range(2)
        ]
        self.accommodation = Accommodation.objects.create(
            owner=host,
            name="Hôtel Océan",
            city="Dakar",
            status=Accommodation.Status.PUBLISHED,
            base_price=Decimal("35000"),
            max_guests=2,
        )
        self.room = Room.objects.create(
            accommodation=self.accommodation, capacity=2, price_per_night=Decimal("35000"),
        )
        self.check_in = timezone.localdate() + timedelta(days=5)

    def _command(self, guest, room_id, offset=0):
        return CreateBookingCommand(
            accommodation_id=self.accommodation.pk,
            guest=guest,
            room_id=room_id,
            check_in=self.check_in + timedelta(days=offset),
            check_out=self.check_in + timedelta(days=offset + 3),
        )

    def _race(self, *commands):
        barrier = threading.Barrier(len(commands))
        outcomes: list = []
        lock = threading.Lock()

        def attempt(command):
            try:
                barrier.wait()
                result = CreateBookingHandler().handle(command).pk
            except (Overlap, NotFound) as exc:
                result = exc
            finally:
                connection.close()
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=attempt, args=(command,)) for command in commands]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)
        return outcomes

    def test_only_one_of_two_overlapping_room_bookings_wins(self) -> None:
        outcomes = self._race(
            self._command(self.guests[0], self.room.pk),
            self._command(self.guests[1], self.room.pk, offset=1),
        )

        self.assertEqual(len(outcomes), 2)
        self.assertEqual(sum(isinstance(o, Overlap) for o in outcomes), 1)
        self.assertEqual(Booking.objects.filter(room=self.room).count(), 1)

    def test_only_one_of_two_overlapping_accommodation_bookings_wins(self) -> None:
        outcomes = self._race(
            self._command(self.guests[0], None),
            self._command(self.guests[1], None, offset=1),
        )

        self.assertEqual(sum(isinstance(o, Overlap) for o in outcomes), 1)
        self.assertEqual(Booking.objects.filter(room__isnull=True).count(), 1)

    def test_room_and_whole_accommodation_on_the_same_nights(self) -> None:
        outcomes = self._race(
            self._command(self.guests[0], self.room.pk),
            self._command(self.guests[1], None),
        )

        self.assertEqual(len(outcomes), 2)
        self.assertEqual(sum(isinstance(o, Overlap) for o in outcomes), 1)
        self.assertEqual(Booking.objects.count(), 1)

    def test_booking_waits_for_a_pending_unpublish(self) -> None:
        unpublished = threading.Event()
        outcomes: list = []

        def unpublish():
            try:
                with transaction.atomic():
                    Accommodation.objects.filter(pk=self.accommodation.pk).update(status=Accommodation.Status.DRAFT)
                    unpublished.set()
                    time.sleep(0.5)
            finally:
                connection.close()

        def book():
            unpublished.wait(timeout=10)
            try:
                outcomes.append(CreateBookingHandler().handle(self._command(self.guests[0], self.room.pk)))
            except NotFound as exc:
                outcomes.append(exc)
            finally:
                connection.close()

        threads = [threading.Thread(target=unpublish), threading.Thread(target=book)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        self.assertEqual(len(outcomes), 1)
        self.assertIsInstance(outcomes[0], NotFound)
        self.assertFalse(Booking.objects.exists())
