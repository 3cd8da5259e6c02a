"""Serializers for accommodations, rooms and calendars."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Accommodation, AvailabilityDay, Room, RoomTypePricing


class RoomSerializer(serializers.ModelSerializer):
    class Meta:
        model = Room
        fields = ["id", "name", "capacity", "price_per_night", "is_active"]
        read_only_fields = ["id"]


class RoomTypePricingSerializer(serializers.ModelSerializer):
    class Meta:
        model = RoomTypePricing
        fields = ["id", "room_type", "price_per_night", "rooms_available"]
        read_only_fields = ["id"]


class AccommodationSerializer(serializers.ModelSerializer):
    """Детальный сериализатор объекта размещения."""

    owner_id = serializers.ReadOnlyField(source="owner.id")
    rooms = RoomSerializer(many=True, read_only=True)
    room_type_pricing = RoomTypePricingSerializer(many=True, read_only=True)

    class Meta:
        model = Accommodation
        fields = [
            "id",
            "owner_id",
            "name",
            "description",
            "city",
            "address",
            "status",
            "base_price",
            "max_guests",
            "rooms",
            "room_type_pricing",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AccommodationWriteSerializer(serializers.ModelSerializer):
    """
    Create/update by the host.

    ``status`` is moderated outside this API, so hosts cannot write it.
    """

    max_guests = serializers.IntegerField(min_value=1)

    class Meta:
        model = Accommodation
        fields = ["name", "description", "city", "address", "base_price", "max_guests"]


class AvailabilityDaySerializer(serializers.ModelSerializer):
    room = serializers.PrimaryKeyRelatedField(queryset=Room.objects.all(), required=False, allow_null=True)

    class Meta:
        model = AvailabilityDay
        fields = ["id", "room", "date", "status", "price", "note", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_room(self, room):  # type: ignore
        accommodation = self.context.get("accommodation")
        if room is not None and accommodation is not None and room.accommodation_id != accommodation.pk:
            raise serializers.ValidationError("Room does not belong to this accommodation.")
        return room

    def validate(self, attrs):  # type: ignore
        accommodation = self.context["accommodation"]
        room = attrs.get("room", getattr(self.instance, "room", None))
        day = attrs.get("date", getattr(self.instance, "date", None))
        duplicates = AvailabilityDay.objects.filter(accommodation=accommodation, room=room, date=day)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError("This day already has a marker.")
        return attrs


class CalendarQuerySerializer(serializers.Serializer):
    start = serializers.DateField()
    end = serializers.DateField()


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    status = serializers.CharField()
    price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
