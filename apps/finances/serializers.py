"""Serializers for the finance domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import CommissionRateChange, CommissionRecord


class CommissionRateSerializer(serializers.Serializer):
    rate = serializers.DecimalField(max_digits=5, decimal_places=2, read_only=True)
    version = serializers.IntegerField(read_only=True)


class CommissionRateUpdateSerializer(serializers.Serializer):
    """Shape only; bounds and precision are enforced by set_commission_rate."""

    rate = serializers.DecimalField(max_digits=12, decimal_places=4)


class CommissionRateChangeSerializer(serializers.ModelSerializer):
    changed_by_id = serializers.ReadOnlyField(source="changed_by.id", default=None)

    class Meta:
        model = CommissionRateChange
        fields = ["id", "old_rate", "new_rate", "version", "changed_by_id", "created_at"]
        read_only_fields = fields


class CommissionRecordSerializer(serializers.ModelSerializer):
    booking_id = serializers.ReadOnlyField(source="booking.id")
    booking_reference = serializers.ReadOnlyField(source="booking.reference")
    accommodation_id = serializers.ReadOnlyField(source="booking.accommodation_id")

    class Meta:
        model = CommissionRecord
        fields = [
            "id",
            "booking_id",
            "booking_reference",
            "accommodation_id",
            "booking_amount",
            "commission_rate",
            "rate_version",
            "commission_amount",
            "host_amount",
            "currency",
            "status",
            "paid_at",
            "cancelled_at",
            "created_at",
        ]
        read_only_fields = fields
