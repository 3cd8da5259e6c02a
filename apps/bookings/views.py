"""API views for the booking domain."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.capabilities import Capability, request_capabilities
from apps.users.permissions import CanManageOwnAccommodations, HasCapability
from shared.api.pagination import StandardPagination

from .application.command_handlers import (
    CreateBookingCommand,
    CreateBookingHandler,
    RecordPaymentCommand,
    RecordPaymentHandler,
    TransitionBookingCommand,
    TransitionBookingHandler,
)
from .application.queries import bookings_visible_to, get_host_booking_overview, get_host_month_grid
from .domain.lifecycle import BookingAction, PaymentOutcome
from .filters import BookingFilterSet
from .models import Booking
from .serializers import (
    BookingCalendarEntrySerializer,
    BookingCreateSerializer,
    BookingSerializer,
    CancelBookingSerializer,
    HostOverviewQuerySerializer,
    MonthQuerySerializer,
    RecordPaymentSerializer,
    serialize_grid,
)


class CanBook(HasCapability):
    required_capability = Capability.BOOK


def manages_booking(request, booking: Booking) -> bool:
    """Admins manage every booking, hosts the bookings on their accommodations."""
    if Capability.MANAGE_ALL_BOOKINGS in request_capabilities(request):
        return True
    return booking.accommodation.owner_id == request.user.id


class IsBookingStakeholder(permissions.BasePermission):
    """Гости, владельцы объектов и администраторы имеют доступ к бронированию."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        if obj.guest_id == request.user.id and view.action in ("retrieve", "cancel"):
            return True
        return manages_booking(request, obj)


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Create, list and move bookings through their lifecycle."""

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated, IsBookingStakeholder]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = BookingFilterSet
    ordering_fields = ["check_in", "created_at", "total_price"]
    ordering = ["-created_at"]

    def get_queryset(self):  # type: ignore
        return bookings_visible_to(self.request.user)

    def get_permissions(self):  # type: ignore
        if self.action == "create":
            return [permissions.IsAuthenticated(), CanBook()]
        if self.action in ("host_overview", "host_calendar"):
            return [permissions.IsAuthenticated(), CanManageOwnAccommodations()]
        return super().get_permissions()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        return BookingSerializer

    def _respond(self, booking: Booking, status_code=status.HTTP_200_OK) -> Response:
        serializer = BookingSerializer(booking, context=self.get_serializer_context())
        return Response(serializer.data, status=status_code)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = CreateBookingHandler().handle(
            CreateBookingCommand(
                accommodation_id=data["accommodation"],
                guest=request.user,
                room_id=data.get("room"),
                room_type=data["room_type"],
                check_in=data["check_in"],
                check_out=data["check_out"],
                guests=data["guests"],
                notes=data["notes"],
            )
        )
        return self._respond(booking, status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def confirm(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        booking = TransitionBookingHandler().handle(
            TransitionBookingCommand(booking_id=booking.pk, action=BookingAction.CONFIRM)
        )
        return self._respond(booking)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        serializer = CancelBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = TransitionBookingHandler().handle(
            TransitionBookingCommand(
                booking_id=booking.pk,
                action=BookingAction.CANCEL,
                reason=serializer.validated_data["reason"],
            )
        )
        return self._respond(booking)

    @action(detail=True, methods=["post"])
    def payment(self, request, pk=None):  # type: ignore
        booking = self.get_object()
        serializer = RecordPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = RecordPaymentHandler().handle(
            RecordPaymentCommand(
                booking_id=booking.pk,
                outcome=PaymentOutcome(serializer.validated_data["outcome"]),
            )
        )
        return self._respond(booking)

    @action(detail=False, methods=["get"], url_path="host/overview")
    def host_overview(self, request):  # type: ignore
        query = HostOverviewQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        views = get_host_booking_overview(request.user, query.validated_data.get("today"))
        context = self.get_serializer_context()
        return Response(
            {
                name: BookingCalendarEntrySerializer(bookings, many=True, context=context).data
                for name, bookings in views.items()
            }
        )

    @action(detail=False, methods=["get"], url_path="host/calendar")
    def host_calendar(self, request):  # type: ignore
        query = MonthQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        year, month = query.validated_data["year"], query.validated_data["month"]
        weeks = get_host_month_grid(request.user, year, month)
        return Response(
            {
                "year": year,
                "month": month,
                "weeks": serialize_grid(weeks, context=self.get_serializer_context()),
            }
        )
