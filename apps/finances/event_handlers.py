"""
Finance subscriptions to booking events

Registered on the message bus from FinancesConfig.ready().
"""

from __future__ import annotations

import logging

from apps.bookings.domain.events import BookingCancelled, BookingPaymentChanged
from shared.application.message_bus import message_bus

from .services import cancel_commission_for_booking, get_commission_rate
from .tasks import create_commission_record

logger = logging.getLogger(__name__)


def on_booking_payment_changed(event: BookingPaymentChanged) -> None:
    if event.became_paid:
        # the rate in force when the payment landed, not when the task runs
        snapshot = get_commission_rate()
        logger.info(
            "Booking %s paid, scheduling commission at %s%% (v%s)",
            event.booking_id, snapshot.rate, snapshot.version,
        )
        create_commission_record.delay(event.booking_id, str(snapshot.rate), snapshot.version)
    elif event.current_status == "refunded":
        cancel_commission_for_booking(event.booking_id)


def on_booking_cancelled(event: BookingCancelled) -> None:
    cancel_commission_for_booking(event.booking_id)


def register_handlers(bus=message_bus) -> None:
    bus.register_event_handler(BookingPaymentChanged, on_booking_payment_changed)
    bus.register_event_handler(BookingCancelled, on_booking_cancelled)
