"""Tests for accommodation calendars and availability markers."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.accommodations.models import Accommodation, AvailabilityDay, Room
from apps.bookings.models import Booking
from apps.users.models import User


class AccommodationCalendarAPITests(APITestCase):
    def setUp(self) -> None:
        self.owner = User.objects.create_user(
            email="host-calendar@example.com",
            password="StrongPass123",
            role=User.RoleChoices.HOST,
        )
        self.guest = User.objects.create_user(email="guest@example.com", password="x")
        self.accommodation = Accommodation.objects.create(
            owner=self.owner,
            name="Campement Sine Saloum",
            city="Toubacouta",
            status=Accommodation.Status.PUBLISHED,
            base_price=Decimal("25000.00"),
            max_guests=4,
        )
        self.room = Room.objects.create(
            accommodation=self.accommodation,
            name="Case 1",
            capacity=2,
            price_per_night=Decimal("30000.00"),
        )
        self.start = timezone.localdate() + timedelta(days=5)

    def _availability_url(self, accommodation_id=None):
        return reverse(
            "availability-day-list",
            kwargs={"accommodation_id": accommodation_id or self.accommodation.id},
        )

    def _room_calendar_url(self):
        return reverse(
            "room-calendar",
            kwargs={"accommodation_id": self.accommodation.id, "room_id": self.room.id},
        )

    def _range(self, days: int) -> dict:
        return {"start": str(self.start), "end": str(self.start + timedelta(days=days))}

    def test_room_calendar_is_public_and_inclusive(self) -> None:
        Booking.objects.create(
            guest=self.guest,
            accommodation=self.accommodation,
            room=self.room,
            reference="BKCAL1",
            check_in=self.start + timedelta(days=1),
            check_out=self.start + timedelta(days=3),
            nightly_rate=Decimal("30000"),
            total_nights=2,
            total_price=Decimal("60000"),
            currency="XOF",
        )

        response = self.client.get(self._room_calendar_url(), self._range(3))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["room_id"], self.room.id)
        self.assertEqual(
            [day["status"] for day in response.data["dates"]],
            ["available", "occupied", "occupied", "available"],
        )

    def test_accommodation_calendar_shows_maintenance_and_price(self) -> None:
        AvailabilityDay.objects.create(
            accommodation=self.accommodation,
            date=self.start,
            status=AvailabilityDay.DayStatus.MAINTENANCE,
        )
        AvailabilityDay.objects.create(
            accommodation=self.accommodation,
            date=self.start + timedelta(days=1),
            price=Decimal("27500.00"),
        )

        response = self.client.get(
            reverse("accommodation-calendar", kwargs={"accommodation_id": self.accommodation.id}),
            self._range(1),
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        first, second = response.data["dates"]
        self.assertEqual(first["status"], "maintenance")
        self.assertNotIn("price", first)
        self.assertEqual(second["status"], "available")
        self.assertEqual(second["price"], "27500.00")

    def test_reversed_range_is_rejected(self) -> None:
        response = self.client.get(
            self._room_calendar_url(),
            {"start": str(self.start), "end": str(self.start - timedelta(days=1))},
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "invalid_date_range")

    def test_missing_range_is_a_validation_error(self) -> None:
        response = self.client.get(self._room_calendar_url())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unpublished_calendar_is_hidden_from_public(self) -> None:
        self.accommodation.status = Accommodation.Status.DRAFT
        self.accommodation.save()

        anonymous = self.client.get(self._room_calendar_url(), self._range(1))
        self.client.force_authenticate(self.owner)
        owner = self.client.get(self._room_calendar_url(), self._range(1))

        self.assertEqual(anonymous.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(owner.status_code, status.HTTP_200_OK)

    def test_owner_marks_maintenance_day(self) -> None:
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            self._availability_url(),
            {"room": self.room.id, "date": str(self.start), "status": "maintenance", "note": "Toiture"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        marker = AvailabilityDay.objects.get()
        self.assertEqual(marker.accommodation, self.accommodation)
        self.assertEqual(marker.status, AvailabilityDay.DayStatus.MAINTENANCE)

    def test_duplicate_marker_is_rejected(self) -> None:
        AvailabilityDay.objects.create(accommodation=self.accommodation, room=self.room, date=self.start)
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            self._availability_url(),
            {"room": self.room.id, "date": str(self.start), "status": "maintenance"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_marker_for_foreign_room_is_rejected(self) -> None:
        other = Accommodation.objects.create(
            owner=self.owner, name="Autre", city="Kaolack", base_price=Decimal("1"),
        )
        foreign_room = Room.objects.create(accommodation=other, capacity=1, price_per_night=Decimal("1"))
        self.client.force_authenticate(self.owner)

        response = self.client.post(
            self._availability_url(),
            {"room": foreign_room.id, "date": str(self.start)},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("room", response.data)

    def test_other_host_cannot_edit_markers(self) -> None:
        intruder = User.objects.create_user(email="intruder@example.com", password="x", role=User.RoleChoices.HOST)
        self.client.force_authenticate(intruder)

        response = self.client.post(
            self._availability_url(),
            {"date": str(self.start), "status": "maintenance"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(AvailabilityDay.objects.exists())

    def test_markers_are_listed_by_date_range(self) -> None:
        for offset in range(3):
            AvailabilityDay.objects.create(
                accommodation=self.accommodation,
                date=self.start + timedelta(days=offset),
                price=Decimal("20000"),
            )
        self.client.force_authenticate(self.owner)

        response = self.client.get(
            self._availability_url(),
            {"start": str(self.start + timedelta(days=1)), "end": str(self.start + timedelta(days=2))},
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 2)


class AccommodationAPITests(APITestCase):
    def setUp(self) -> None:
        self.host = User.objects.create_user(email="host@example.com", password="x", role=User.RoleChoices.HOST)
        self.guest = User.objects.create_user(email="guest@example.com", password="x")
        self.published = Accommodation.objects.create(
            owner=self.host,
            name="Publié",
            city="Dakar",
            status=Accommodation.Status.PUBLISHED,
            base_price=Decimal("30000"),
        )
        self.draft = Accommodation.objects.create(
            owner=self.host, name="Brouillon", city="Dakar", base_price=Decimal("30000"),
        )

    def test_public_list_shows_only_published(self) -> None:
        response = self.client.get(reverse("accommodation-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            set(response.data),
            {"data", "total", "per_page", "current_page", "last_page"},
        )
        self.assertEqual([a["id"] for a in response.data["data"]], [self.published.id])

    def test_host_sees_own_drafts(self) -> None:
        self.client.force_authenticate(self.host)

        response = self.client.get(reverse("accommodation-list"))

        self.assertEqual(response.data["total"], 2)

    def test_host_creates_draft_accommodation(self) -> None:
        self.client.force_authenticate(self.host)

        response = self.client.post(
            reverse("accommodation-list"),
            {"name": "Nouveau", "city": "Thiès", "base_price": "15000.00", "max_guests": 3, "status": "published"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        created = Accommodation.objects.get(name="Nouveau")
        self.assertEqual(created.owner, self.host)
        self.assertEqual(created.status, Accommodation.Status.DRAFT)

    def test_guest_cannot_create_accommodation(self) -> None:
        self.client.force_authenticate(self.guest)

        response = self.client.post(
            reverse("accommodation-list"),
            {"name": "X", "city": "Y", "base_price": "1.00", "max_guests": 1},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_owner_adds_room_and_room_type(self) -> None:
        self.client.force_authenticate(self.host)

        room = self.client.post(
            reverse("room-list", kwargs={"accommodation_id": self.published.id}),
            {"name": "Chambre bleue", "capacity": 2, "price_per_night": "40000.00"},
            format="json",
        )
        tier = self.client.post(
            reverse("room-type-list", kwargs={"accommodation_id": self.published.id}),
            {"room_type": "Suite", "price_per_night": "90000.00", "rooms_available": 2},
            format="json",
        )

        self.assertEqual(room.status_code, status.HTTP_201_CREATED, room.data)
        self.assertEqual(tier.status_code, status.HTTP_201_CREATED, tier.data)
        self.assertEqual(self.published.rooms.count(), 1)
        self.assertTrue(self.published.uses_room_type_pricing)

    def test_room_price_change_keeps_booking_totals(self) -> None:
        room = Room.objects.create(accommodation=self.published, capacity=2, price_per_night=Decimal("40000"))
        check_in = date.today() + timedelta(days=3)
        booking = Booking.objects.create(
            guest=self.guest,
            accommodation=self.published,
            room=room,
            reference="BKKEEP",
            check_in=check_in,
            check_out=check_in + timedelta(days=2),
            nightly_rate=Decimal("40000"),
            total_nights=2,
            total_price=Decimal("80000"),
            currency="XOF",
        )
        self.client.force_authenticate(self.host)

        response = self.client.patch(
            reverse("room-detail", kwargs={"accommodation_id": self.published.id, "pk": room.id}),
            {"price_per_night": "55000.00"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        booking.refresh_from_db()
        self.assertEqual(booking.total_price, Decimal("80000"))

    def test_other_host_cannot_add_rooms(self) -> None:
        intruder = User.objects.create_user(email="other@example.com", password="x", role=User.RoleChoices.HOST)
        self.client.force_authenticate(intruder)

        response = self.client.post(
            reverse("room-list", kwargs={"accommodation_id": self.published.id}),
            {"capacity": 2, "price_per_night": "1.00"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
