"""Booking model for StayBook."""

from __future__ import annotations

import secrets
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import DateRange


class BookingQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status__in=Booking.ACTIVE_STATUSES)

    def overlapping(self, check_in, check_out):
        return self.filter(check_in__lt=check_out, check_out__gt=check_in)

    def for_host(self, host):
        return self.filter(accommodation__owner=host)


class Booking(models.Model):
    """A dated stay at an accommodation, optionally in a room or a room type."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Awaiting payment")
        PAID = "paid", _("Paid")
        FAILED = "failed", _("Payment failed")
        REFUNDED = "refunded", _("Refunded")

    ACTIVE_STATUSES = (Status.PENDING, Status.CONFIRMED)

    guest = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    accommodation = models.ForeignKey(
        "accommodations.Accommodation",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    room = models.ForeignKey(
        "accommodations.Room",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="bookings",
    )
    room_type = models.CharField(
        max_length=100,
        blank=True,
        help_text=_("Name of the room-type tier booked, when no specific room is selected."),
    )
    reference = models.CharField(max_length=24, unique=True, editable=False)
    check_in = models.DateField()
    check_out = models.DateField()
    guests = models.PositiveSmallIntegerField(default=1)
    nightly_rate = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        editable=False,
        help_text=_("Nightly rate frozen when the booking was created."),
    )
    total_nights = models.PositiveSmallIntegerField(editable=False)
    total_price = models.DecimalField(max_digits=14, decimal_places=2, editable=False)
    currency = models.CharField(max_length=3, editable=False)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    cancellation_reason = models.CharField(max_length=255, blank=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out__gt=models.F("check_in")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(room__isnull=True) | models.Q(room_type=""),
                name="booking_room_or_room_type",
            ),
        ]
        indexes = [
            models.Index(fields=["accommodation", "check_in", "check_out"], name="booking_accommodation_idx"),
            models.Index(fields=["room", "check_in", "check_out"], name="booking_room_idx"),
            models.Index(fields=["status"], name="booking_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.reference} ({self.status})"

    @staticmethod
    def generate_reference() -> str:
        return f"BK{timezone.now():%Y%m%d}{secrets.token_hex(3).upper()}"

    @property
    def stay(self) -> DateRange:
        return DateRange(self.check_in, self.check_out)

    @property
    def frozen_total(self) -> Decimal:
        return self.nightly_rate * self.total_nights
