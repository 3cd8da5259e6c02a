"""Accommodation models for StayBook."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Accommodation(models.Model):
    """An accommodation offered by a host."""

    class Status(models.TextChoices):
        DRAFT = "draft", _("Draft")
        PENDING_REVIEW = "pending_review", _("Pending review")
        PUBLISHED = "published", _("Published")
        SUSPENDED = "suspended", _("Suspended")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="accommodations",
    )
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    city = models.CharField(max_length=100)
    address = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.DRAFT)
    base_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Nightly rate used when neither a room nor a room type is selected."),
    )
    max_guests = models.PositiveSmallIntegerField(default=1)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Accommodation")
        verbose_name_plural = _("Accommodations")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "status"], name="accommodation_owner_status_idx"),
            models.Index(fields=["city"], name="accommodation_city_idx"),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def uses_room_type_pricing(self) -> bool:
        return self.room_type_pricing.exists()


class Room(models.Model):
    """A bookable room inside an accommodation."""

    accommodation = models.ForeignKey(
        Accommodation,
        on_delete=models.CASCADE,
        related_name="rooms",
    )
    name = models.CharField(max_length=100, blank=True)
    capacity = models.PositiveSmallIntegerField(default=1)
    price_per_night = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["accommodation_id", "id"]

    def __str__(self) -> str:
        return f"{self.accommodation.name}: {self.name or self.pk}"


class RoomTypePricing(models.Model):
    """
    A named rate class (e.g. "Suite") that is not tied to a physical room.

    ``rooms_available`` is the number of interchangeable units of the tier.
    When it is set, bookings of the tier consume one unit for their stay;
    when it is empty the tier shares the accommodation-wide overlap space.
    """

    accommodation = models.ForeignKey(
        Accommodation,
        on_delete=models.CASCADE,
        related_name="room_type_pricing",
    )
    room_type = models.CharField(max_length=100)
    price_per_night = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    rooms_available = models.PositiveSmallIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room type pricing")
        verbose_name_plural = _("Room type pricing")
        ordering = ["accommodation_id", "room_type"]
        constraints = [
            models.UniqueConstraint(
                fields=["accommodation", "room_type"],
                name="room_type_pricing_unique_tier",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.accommodation.name}: {self.room_type}"

    @property
    def tracks_units(self) -> bool:
        return self.rooms_available is not None


class AvailabilityDay(models.Model):
    """
    Host-set marker for one day of a room, or of the whole accommodation
    when ``room`` is empty. Occupancy is never stored here; it is derived
    from bookings.
    """

    class DayStatus(models.TextChoices):
        AVAILABLE = "available", _("Available")
        MAINTENANCE = "maintenance", _("Maintenance")

    accommodation = models.ForeignKey(
        Accommodation,
        on_delete=models.CASCADE,
        related_name="availability_days",
    )
    room = models.ForeignKey(
        Room,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="availability_days",
    )
    date = models.DateField()
    status = models.CharField(max_length=20, choices=DayStatus.choices, default=DayStatus.AVAILABLE)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Informational price shown on the calendar; never used for billing."),
    )
    note = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Availability day")
        verbose_name_plural = _("Availability days")
        ordering = ["date"]
        constraints = [
            models.UniqueConstraint(
                fields=["room", "date"],
                condition=models.Q(room__isnull=False),
                name="availability_day_unique_room_date",
            ),
            models.UniqueConstraint(
                fields=["accommodation", "date"],
                condition=models.Q(room__isnull=True),
                name="availability_day_unique_accommodation_date",
            ),
        ]
        indexes = [
            models.Index(fields=["accommodation", "room", "date"], name="availability_day_target_idx"),
        ]

    def __str__(self) -> str:
        target = self.room or self.accommodation
        return f"{target}: {self.date} ({self.status})"
