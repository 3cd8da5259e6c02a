"""Accommodation API views."""

from __future__ import annotations

from django.db.models import Q  # type: ignore
from django.http import Http404  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.services import availability_calendar
from apps.users.capabilities import Capability, request_capabilities
from shared.api.pagination import StandardPagination

from .filters import AccommodationFilterSet
from .models import Accommodation, AvailabilityDay, Room, RoomTypePricing
from .serializers import (
    AccommodationSerializer,
    AccommodationWriteSerializer,
    AvailabilityDaySerializer,
    CalendarDaySerializer,
    CalendarQuerySerializer,
    RoomSerializer,
    RoomTypePricingSerializer,
)


def manages_accommodation(request, accommodation: Accommodation) -> bool:
    if Capability.MANAGE_ALL_BOOKINGS in request_capabilities(request):
        return True
    return request.user.is_authenticated and accommodation.owner_id == request.user.id


class IsAccommodationOwnerOrAdmin(permissions.BasePermission):
    """Позволяет управлять объектом его владельцу и администраторам."""

    def has_permission(self, request, view):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        if getattr(view, "action", None) == "create":
            return Capability.MANAGE_OWN_ACCOMMODATIONS in request_capabilities(request)
        return request.user.is_authenticated

    def has_object_permission(self, request, view, obj):  # type: ignore
        if request.method in permissions.SAFE_METHODS:
            return True
        # rooms, tiers and day markers are checked through their accommodation
        return manages_accommodation(request, getattr(obj, "accommodation", obj))


class AccommodationViewSet(viewsets.ModelViewSet):
    """Viewset для управления объектами размещения."""

    queryset = Accommodation.objects.select_related("owner").prefetch_related("rooms", "room_type_pricing")
    permission_classes = [IsAccommodationOwnerOrAdmin]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = AccommodationFilterSet
    ordering_fields = ["base_price", "created_at", "max_guests"]

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        published = Q(status=Accommodation.Status.PUBLISHED)
        capabilities = request_capabilities(self.request)
        if Capability.MANAGE_ALL_BOOKINGS in capabilities:
            return qs
        if Capability.MANAGE_OWN_ACCOMMODATIONS in capabilities:
            return qs.filter(published | Q(owner=self.request.user))
        return qs.filter(published)

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return AccommodationWriteSerializer
        return AccommodationSerializer

    def perform_create(self, serializer):  # type: ignore
        serializer.save(owner=self.request.user)


class AccommodationScopedMixin:
    """Вспомогательный миксин для получения объекта и проверки прав."""

    accommodation_lookup_url_kwarg = "accommodation_id"
    permission_classes = [permissions.IsAuthenticated, IsAccommodationOwnerOrAdmin]

    def initial(self, request, *args, **kwargs):  # type: ignore
        super().initial(request, *args, **kwargs)
        accommodation_id = kwargs.get(self.accommodation_lookup_url_kwarg)
        self.accommodation = get_object_or_404(Accommodation, pk=accommodation_id)
        if not manages_accommodation(request, self.accommodation):
            self.permission_denied(request)

    def get_serializer_context(self):  # type: ignore
        context = super().get_serializer_context()
        context["accommodation"] = getattr(self, "accommodation", None)
        return context

    def perform_create(self, serializer):  # type: ignore
        serializer.save(accommodation=self.accommodation)


class RoomViewSet(AccommodationScopedMixin, viewsets.ModelViewSet):
    """Rooms of one accommodation. Rate changes never touch existing bookings."""

    serializer_class = RoomSerializer

    def get_queryset(self):  # type: ignore
        return Room.objects.filter(accommodation=self.accommodation)


class RoomTypePricingViewSet(AccommodationScopedMixin, viewsets.ModelViewSet):
    serializer_class = RoomTypePricingSerializer

    def get_queryset(self):  # type: ignore
        return RoomTypePricing.objects.filter(accommodation=self.accommodation)


class AvailabilityDayViewSet(AccommodationScopedMixin, viewsets.ModelViewSet):
    """Maintenance days and informational day prices."""

    serializer_class = AvailabilityDaySerializer

    def get_queryset(self):  # type: ignore
        qs = AvailabilityDay.objects.filter(accommodation=self.accommodation)
        start = self.request.query_params.get("start")
        end = self.request.query_params.get("end")
        room = self.request.query_params.get("room")
        if start:
            qs = qs.filter(date__gte=start)
        if end:
            qs = qs.filter(date__lte=end)
        if room:
            qs = qs.filter(room_id=room)
        return qs.order_by("date")


class CalendarView(APIView):
    """
    Day-by-day availability between ``start`` and ``end`` (inclusive).

    Published accommodations are public; others only to their managers.
    """

    permission_classes = [permissions.AllowAny]

    def get(self, request, accommodation_id, room_id=None):  # type: ignore
        accommodation = get_object_or_404(Accommodation, pk=accommodation_id)
        if accommodation.status != Accommodation.Status.PUBLISHED and not manages_accommodation(
            request, accommodation
        ):
            raise Http404("Accommodation is not published.")

        room = None
        if room_id is not None:
            room = get_object_or_404(Room, pk=room_id, accommodation=accommodation)

        query = CalendarQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        days = availability_calendar(
            accommodation,
            room,
            query.validated_data["start"],
            query.validated_data["end"],
        )
        return Response(
            {
                "accommodation_id": accommodation.pk,
                "room_id": room.pk if room is not None else None,
                "dates": CalendarDaySerializer(days, many=True).data,
            }
        )
