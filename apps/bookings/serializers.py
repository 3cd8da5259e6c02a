"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .domain.lifecycle import PaymentOutcome
from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Request shape of ``create_booking``; the rules live in CreateBookingHandler."""

    accommodation = serializers.IntegerField(min_value=1)
    room = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    room_type = serializers.CharField(max_length=100, required=False, allow_blank=True, default="")
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guests = serializers.IntegerField(min_value=1, default=1)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class BookingSerializer(serializers.ModelSerializer):
    """Детальный сериализатор бронирования."""

    guest_id = serializers.ReadOnlyField(source="guest.id")
    accommodation_id = serializers.ReadOnlyField(source="accommodation.id")
    accommodation_name = serializers.ReadOnlyField(source="accommodation.name")
    room_id = serializers.ReadOnlyField(source="room.id", default=None)

    class Meta:
        model = Booking
        fields = [
            "id",
            "reference",
            "guest_id",
            "accommodation_id",
            "accommodation_name",
            "room_id",
            "room_type",
            "check_in",
            "check_out",
            "guests",
            "status",
            "payment_status",
            "nightly_rate",
            "total_nights",
            "total_price",
            "currency",
            "notes",
            "confirmed_at",
            "cancelled_at",
            "cancellation_reason",
            "paid_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingCalendarEntrySerializer(serializers.ModelSerializer):
    """Compact booking used by the host overview and the month grid."""

    accommodation_id = serializers.ReadOnlyField(source="accommodation.id")
    accommodation_name = serializers.ReadOnlyField(source="accommodation.name")
    guest_email = serializers.ReadOnlyField(source="guest.email")

    class Meta:
        model = Booking
        fields = [
            "id",
            "reference",
            "accommodation_id",
            "accommodation_name",
            "room_id",
            "room_type",
            "guest_email",
            "check_in",
            "check_out",
            "guests",
            "status",
            "payment_status",
            "total_price",
        ]
        read_only_fields = fields


class CancelBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")


class RecordPaymentSerializer(serializers.Serializer):
    outcome = serializers.ChoiceField(choices=[outcome.value for outcome in PaymentOutcome])


class HostOverviewQuerySerializer(serializers.Serializer):
    today = serializers.DateField(required=False)


class MonthQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1970, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)


def serialize_grid(weeks, context=None) -> list:
    return [
        [
            {
                "date": cell.day,
                "in_month": cell.in_month,
                "count": cell.count,
                "bookings": BookingCalendarEntrySerializer(cell.bookings, many=True, context=context).data,
            }
            for cell in week
        ]
        for week in weeks
    ]
