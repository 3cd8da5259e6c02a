"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "reference",
        "accommodation",
        "room",
        "room_type",
        "guest",
        "status",
        "payment_status",
        "check_in",
        "check_out",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "payment_status", "check_in", "check_out")
    search_fields = ("reference", "accommodation__name", "guest__email")
    readonly_fields = (
        "reference",
        "created_at",
        "updated_at",
        "nightly_rate",
        "total_nights",
        "total_price",
        "currency",
    )

    def has_delete_permission(self, request, obj=None):  # type: ignore
        # bookings end as cancelled, never deleted
        return False
