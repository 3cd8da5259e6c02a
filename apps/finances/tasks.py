"""Celery tasks for the finance domain."""

from __future__ import annotations

import logging
from decimal import Decimal

from celery import shared_task  # type: ignore
from django.db import OperationalError  # type: ignore

from .domain.commission import RateSnapshot
from .services import bookings_missing_commission, get_commission_rate, record_commission

logger = logging.getLogger(__name__)


@shared_task(
    name="finances.create_commission_record",
    autoretry_for=(OperationalError,),
    retry_backoff=True,
    max_retries=5,
)
def create_commission_record(booking_id: int, rate: str, rate_version: int) -> int | None:
    """
    Создаёт запись комиссии для оплаченного бронирования.

    The rate is the snapshot taken when the payment was recorded. Redelivery
    of the task is harmless: an existing record is left as it is.
    """
    record = record_commission(booking_id, RateSnapshot(rate=Decimal(rate), version=rate_version))
    return record.pk if record is not None else None


# ============================================================================
# PERIODIC TASKS (запускаются автоматически через Celery Beat)
# ============================================================================

@shared_task(name="finances.reconcile_commission_records")
def reconcile_commission_records() -> dict[str, int]:
    """
    Досоздаёт записи комиссии для оплаченных броней без записи.

    Covers payment events lost between commit and task delivery; such
    bookings get the rate configured at reconciliation time.
    """
    snapshot = get_commission_rate()
    created = 0
    for booking_id in list(bookings_missing_commission()):
        if record_commission(booking_id, snapshot) is not None:
            created += 1
    if created:
        logger.warning("Reconciled %s missing commission records", created)
    return {"created": created}
