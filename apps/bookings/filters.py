"""FilterSet definitions for booking listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Booking


class BookingFilterSet(django_filters.FilterSet):
    """Filters shared by the guest, host and admin booking lists."""

    status = django_filters.ChoiceFilter(choices=Booking.Status.choices)
    payment_status = django_filters.ChoiceFilter(choices=Booking.PaymentStatus.choices)
    accommodation = django_filters.NumberFilter(field_name="accommodation_id")
    room = django_filters.NumberFilter(field_name="room_id")
    # stays touching [date_from, date_to]
    date_from = django_filters.DateFilter(field_name="check_out", lookup_expr="gt")
    date_to = django_filters.DateFilter(field_name="check_in", lookup_expr="lte")

    class Meta:
        model = Booking
        fields = ["status", "payment_status", "accommodation", "room"]
