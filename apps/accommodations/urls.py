"""URL routing for the accommodations domain."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    AccommodationViewSet,
    AvailabilityDayViewSet,
    CalendarView,
    RoomTypePricingViewSet,
    RoomViewSet,
)

router = DefaultRouter()
router.register(r"", AccommodationViewSet, basename="accommodation")

room_list = RoomViewSet.as_view({"get": "list", "post": "create"})
room_detail = RoomViewSet.as_view(
    {"patch": "partial_update", "put": "update", "delete": "destroy", "get": "retrieve"}
)
tier_list = RoomTypePricingViewSet.as_view({"get": "list", "post": "create"})
tier_detail = RoomTypePricingViewSet.as_view(
    {"patch": "partial_update", "put": "update", "delete": "destroy", "get": "retrieve"}
)
availability_list = AvailabilityDayViewSet.as_view({"get": "list", "post": "create"})
availability_detail = AvailabilityDayViewSet.as_view(
    {"patch": "partial_update", "put": "update", "delete": "destroy", "get": "retrieve"}
)

urlpatterns = [
    path("", include(router.urls)),
    path("<int:accommodation_id>/rooms/", room_list, name="room-list"),
    path("<int:accommodation_id>/rooms/<int:pk>/", room_detail, name="room-detail"),
    path("<int:accommodation_id>/room-types/", tier_list, name="room-type-list"),
    path("<int:accommodation_id>/room-types/<int:pk>/", tier_detail, name="room-type-detail"),
    path(
        "<int:accommodation_id>/calendar/availability/",
        availability_list,
        name="availability-day-list",
    ),
    path(
        "<int:accommodation_id>/calendar/availability/<int:pk>/",
        availability_detail,
        name="availability-day-detail",
    ),
    # Day-by-day calendars
    path("<int:accommodation_id>/calendar/", CalendarView.as_view(), name="accommodation-calendar"),
    path(
        "<int:accommodation_id>/rooms/<int:room_id>/calendar/",
        CalendarView.as_view(),
        name="room-calendar",
    ),
]
