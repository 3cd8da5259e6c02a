"""Admin registration for accommodations."""

from __future__ import annotations

from django.contrib import admin

from .models import Accommodation, AvailabilityDay, Room, RoomTypePricing


class RoomInline(admin.TabularInline):
    model = Room
    extra = 0


class RoomTypePricingInline(admin.TabularInline):
    model = RoomTypePricing
    extra = 0


@admin.register(Accommodation)
class AccommodationAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "city", "status", "base_price", "max_guests", "created_at")
    list_filter = ("status", "city")
    search_fields = ("name", "city", "owner__email")
    inlines = [RoomInline, RoomTypePricingInline]


@admin.register(AvailabilityDay)
class AvailabilityDayAdmin(admin.ModelAdmin):
    list_display = ("accommodation", "room", "date", "status", "price")
    list_filter = ("status",)
    date_hierarchy = "date"
