"""URL routing for the finance domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    CommissionRateHistoryView,
    CommissionRateView,
    CommissionRecordViewSet,
    HostRevenueView,
    PlatformRevenueView,
)

router = DefaultRouter()
router.register(r"commissions", CommissionRecordViewSet, basename="commission")

urlpatterns = [
    path("commission-rate/", CommissionRateView.as_view(), name="commission-rate"),
    path("commission-rate/history/", CommissionRateHistoryView.as_view(), name="commission-rate-history"),
    path("revenue/", PlatformRevenueView.as_view(), name="platform-revenue"),
    path("host-revenue/", HostRevenueView.as_view(), name="host-revenue"),
    path("", include(router.urls)),
]
