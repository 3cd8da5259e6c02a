"""Admin registration for commission models."""

from __future__ import annotations

from django.contrib import admin

from .models import CommissionRateChange, CommissionRateConfig, CommissionRecord


@admin.register(CommissionRateConfig)
class CommissionRateConfigAdmin(admin.ModelAdmin):
    # changes go through set_commission_rate so they are versioned and audited
    list_display = ("rate", "version", "updated_by", "updated_at")
    readonly_fields = ("rate", "version", "updated_by", "updated_at")

    def has_add_permission(self, request):  # type: ignore
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore
        return False


@admin.register(CommissionRateChange)
class CommissionRateChangeAdmin(admin.ModelAdmin):
    list_display = ("version", "old_rate", "new_rate", "changed_by", "created_at")
    readonly_fields = ("version", "old_rate", "new_rate", "changed_by", "created_at")


@admin.register(CommissionRecord)
class CommissionRecordAdmin(admin.ModelAdmin):
    list_display = (
        "booking",
        "booking_amount",
        "commission_rate",
        "commission_amount",
        "host_amount",
        "currency",
        "status",
        "created_at",
    )
    list_filter = ("status", "currency")
    search_fields = ("booking__reference",)
    readonly_fields = (
        "booking",
        "booking_amount",
        "commission_rate",
        "rate_version",
        "commission_amount",
        "host_amount",
        "currency",
        "created_at",
    )
