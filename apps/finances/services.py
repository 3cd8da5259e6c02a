"""Commission engine and revenue statistics."""

from __future__ import annotations

import logging
from datetime import timedelta
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Count, Sum  # type: ignore
from django.db.models.functions import TruncMonth  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.bookings.services import lock_for_update
from shared.domain.exceptions import InvalidTransition, NotFound
from shared.domain.value_objects import Money

from .domain.commission import CommissionSplit, RateSnapshot, validate_rate
from .models import CommissionRateChange, CommissionRateConfig, CommissionRecord

logger = logging.getLogger(__name__)

REVENUE_WINDOWS = (("last_day", 1), ("last_week", 7), ("last_month", 30))


def _load_config(lock: bool = False) -> CommissionRateConfig:
    """The singleton config row, seeded from settings on first use."""

    config, created = CommissionRateConfig.objects.get_or_create(
        pk=CommissionRateConfig.SINGLETON_ID,
        defaults={"rate": validate_rate(settings.STAYBOOK_DEFAULT_COMMISSION_RATE)},
    )
    if created:
        logger.info("Seeded commission rate config at %s%%", config.rate)
    if lock:
        config = lock_for_update(CommissionRateConfig.objects.filter(pk=config.pk)).get()
    return config


def get_commission_rate() -> RateSnapshot:
    config = _load_config()
    return RateSnapshot(rate=config.rate, version=config.version)


def set_commission_rate(rate, actor=None) -> RateSnapshot:
    """
    Replace the platform rate for future commission records.

    Raises:
        InvalidRate: ``rate`` is outside [0, 100] or finer than 0.01; the stored rate is untouched
    """

    value = validate_rate(rate)
    if actor is not None and not getattr(actor, "is_authenticated", False):
        actor = None

    with transaction.atomic():
        config = _load_config(lock=True)
        old_rate = config.rate
        config.rate = value
        config.version += 1
        config.updated_by = actor
        config.save(update_fields=["rate", "version", "updated_by", "updated_at"])
        CommissionRateChange.objects.create(
            old_rate=old_rate,
            new_rate=value,
            version=config.version,
            changed_by=actor,
        )

    logger.info(
        "Commission rate changed from %s%% to %s%% (version %s, by %s)",
        old_rate, value, config.version, getattr(actor, "pk", None),
    )
    return RateSnapshot(rate=config.rate, version=config.version)


def record_commission(booking_id: int, snapshot: RateSnapshot) -> CommissionRecord | None:
    """
    Materialize the commission of a paid booking at ``snapshot``'s rate.

    Safe to call any number of times: a booking that already has a record
    keeps it unchanged. Returns None when the booking is not paid.
    """

    with transaction.atomic():
        booking = lock_for_update(Booking.objects.filter(pk=booking_id)).first()
        if booking is None:
            raise NotFound(f"Booking {booking_id} not found")

        existing = CommissionRecord.objects.filter(booking=booking).first()
        if existing is not None:
            logger.info("Commission record for booking %s already exists, skipping", booking_id)
            return existing

        if booking.payment_status != Booking.PaymentStatus.PAID:
            logger.info(
                "Booking %s payment is %s, no commission recorded",
                booking_id, booking.payment_status,
            )
            return None

        split = CommissionSplit.compute(Money(booking.total_price, booking.currency), snapshot.rate)
        record, created = CommissionRecord.objects.get_or_create(
            booking=booking,
            defaults={
                "booking_amount": split.booking_amount.amount,
                "commission_rate": split.rate,
                "rate_version": snapshot.version,
                "commission_amount": split.commission.amount,
                "host_amount": split.host_amount.amount,
                "currency": split.booking_amount.currency,
            },
        )

    if created:
        logger.info(
            "Commission recorded for booking %s: %s of %s at %s%% (host %s)",
            booking.reference, record.commission_amount, record.booking_amount,
            record.commission_rate, record.host_amount,
        )
    return record


def cancel_commission_for_booking(booking_id: int) -> CommissionRecord | None:
    with transaction.atomic():
        record = lock_for_update(CommissionRecord.objects.filter(booking_id=booking_id)).first()
        if record is None or record.status == CommissionRecord.Status.CANCELLED:
            return record
        if record.status == CommissionRecord.Status.PAID:
            logger.warning(
                "Commission record %s for booking %s is already paid out, left unchanged",
                record.pk, booking_id,
            )
            return record
        record.status = CommissionRecord.Status.CANCELLED
        record.cancelled_at = timezone.now()
        record.save(update_fields=["status", "cancelled_at", "updated_at"])

    logger.info("Commission record %s for booking %s cancelled", record.pk, booking_id)
    return record


def mark_commission_paid(record_id: int) -> CommissionRecord:
    """Settle the host payout of a pending record."""

    with transaction.atomic():
        record = lock_for_update(CommissionRecord.objects.filter(pk=record_id)).first()
        if record is None:
            raise NotFound(f"Commission record {record_id} not found")
        if record.status != CommissionRecord.Status.PENDING:
            raise InvalidTransition(
                f"Cannot mark a {record.status} commission record as paid",
                status=record.status,
            )
        record.status = CommissionRecord.Status.PAID
        record.paid_at = timezone.now()
        record.save(update_fields=["status", "paid_at", "updated_at"])

    logger.info("Commission record %s marked paid", record.pk)
    return record


def bookings_missing_commission():
    """Paid bookings whose commission record was never written."""
    return Booking.objects.filter(
        payment_status=Booking.PaymentStatus.PAID,
        commission_record__isnull=True,
    ).values_list("pk", flat=True)


def _total(records, field: str) -> Decimal:
    return records.aggregate(total=Sum(field))["total"] or Decimal("0")


def revenue_summary(records, amount_field: str, now=None) -> dict:
    """Totals of ``amount_field`` over non-cancelled records."""

    now = now or timezone.now()
    live = records.exclude(status=CommissionRecord.Status.CANCELLED)

    summary = {
        "currency": settings.STAYBOOK_CURRENCY,
        "records": live.count(),
        "total": _total(live, amount_field),
        "paid": _total(live.filter(status=CommissionRecord.Status.PAID), amount_field),
        "pending": _total(live.filter(status=CommissionRecord.Status.PENDING), amount_field),
    }
    for name, days in REVENUE_WINDOWS:
        summary[name] = _total(live.filter(created_at__gte=now - timedelta(days=days)), amount_field)

    monthly = (
        live.annotate(month=TruncMonth("created_at"))
        .values("month")
        .annotate(amount=Sum(amount_field), count=Count("id"))
        .order_by("month")
    )
    summary["monthly"] = [
        {"month": row["month"].date().isoformat(), "amount": row["amount"], "count": row["count"]}
        for row in monthly
    ]
    return summary


def platform_revenue(now=None) -> dict:
    return revenue_summary(CommissionRecord.objects.all(), "commission_amount", now)


def host_revenue(host, now=None) -> dict:
    records = CommissionRecord.objects.filter(booking__accommodation__owner=host)
    return revenue_summary(records, "host_amount", now)
