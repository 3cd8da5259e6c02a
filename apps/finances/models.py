"""Commission models for StayBook."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CommissionRateConfig(models.Model):
    """
    Platform commission percentage, stored as a single versioned row.

    Only new CommissionRecords read it; existing records keep the rate they
    were created with.
    """

    SINGLETON_ID = 1

    rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("100"))],
    )
    version = models.PositiveIntegerField(default=1)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Commission rate")
        verbose_name_plural = _("Commission rate")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(rate__gte=0) & models.Q(rate__lte=100),
                name="commission_rate_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.rate}% (v{self.version})"


class CommissionRateChange(models.Model):
    """Audit entry written for every accepted rate change."""

    old_rate = models.DecimalField(max_digits=5, decimal_places=2)
    new_rate = models.DecimalField(max_digits=5, decimal_places=2)
    version = models.PositiveIntegerField()
    changed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="commission_rate_changes",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Commission rate change")
        verbose_name_plural = _("Commission rate changes")
        ordering = ["-created_at", "-version"]

    def __str__(self) -> str:
        return f"v{self.version}: {self.old_rate}% -> {self.new_rate}%"


class CommissionRecord(models.Model):
    """
    Platform/host split of one paid booking.

    Amounts and the snapshotted rate are written once; only ``status``
    moves afterwards.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending payout")
        PAID = "paid", _("Paid out")
        CANCELLED = "cancelled", _("Cancelled")

    booking = models.OneToOneField(
        "bookings.Booking",
        on_delete=models.PROTECT,
        related_name="commission_record",
    )
    booking_amount = models.DecimalField(max_digits=14, decimal_places=2, editable=False)
    commission_rate = models.DecimalField(max_digits=5, decimal_places=2, editable=False)
    rate_version = models.PositiveIntegerField(editable=False)
    commission_amount = models.DecimalField(max_digits=14, decimal_places=2, editable=False)
    host_amount = models.DecimalField(max_digits=14, decimal_places=2, editable=False)
    currency = models.CharField(max_length=3, editable=False)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    paid_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Commission record")
        verbose_name_plural = _("Commission records")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="commission_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Commission {self.commission_amount} {self.currency} for booking {self.booking_id}"
