"""API views for commission and revenue.

The platform rate is read by any authenticated user and written by
admins. Commission records are listed for admins (all) and hosts (their
accommodations); only admins settle payouts.
"""

from __future__ import annotations


from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import mixins, permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.generics import ListAPIView  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.users.capabilities import Capability, request_capabilities
from apps.users.permissions import (
    CanManageCommission,
    CanManageOwnAccommodations,
    CanViewPlatformRevenue,
    IsAdminOrReadOnly,
)
from shared.api.pagination import StandardPagination

from .models import CommissionRateChange, CommissionRecord
from .serializers import (
    CommissionRateChangeSerializer,
    CommissionRateSerializer,
    CommissionRateUpdateSerializer,
    CommissionRecordSerializer,
)
from .services import (
    get_commission_rate,
    host_revenue,
    mark_commission_paid,
    platform_revenue,
    set_commission_rate,
)



class CommissionRateView(APIView):
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request):  # type: ignore
        return Response(CommissionRateSerializer(get_commission_rate()).data)

    def put(self, request):  # type: ignore
        serializer = CommissionRateUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        snapshot = set_commission_rate(serializer.validated_data["rate"], actor=request.user)
        return Response(CommissionRateSerializer(snapshot).data)


class CommissionRateHistoryView(ListAPIView):
    permission_classes = [permissions.IsAuthenticated, CanManageCommission]
    serializer_class = CommissionRateChangeSerializer
    pagination_class = StandardPagination
    queryset = CommissionRateChange.objects.select_related("changed_by")


class CanSeeCommissionRecords(permissions.BasePermission):
    def has_permission(self, request, view):  # type: ignore
        capabilities = request_capabilities(request)
        return bool(
            {Capability.MANAGE_COMMISSION, Capability.MANAGE_OWN_ACCOMMODATIONS} & capabilities
        )


class CommissionRecordViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = CommissionRecordSerializer
    permission_classes = [permissions.IsAuthenticated, CanSeeCommissionRecords]
    pagination_class = StandardPagination
    filter_backends = [DjangoFilterBackend]
    filterset_fields = ["status", "currency"]

    def get_queryset(self):  # type: ignore
        qs = CommissionRecord.objects.select_related("booking")
        if Capability.MANAGE_COMMISSION in request_capabilities(self.request):
            return qs
        return qs.filter(booking__accommodation__owner=self.request.user)

    @action(
        detail=True,
        methods=["post"],
        url_path="mark-paid",
        permission_classes=[permissions.IsAuthenticated, CanManageCommission],
    )
    def mark_paid(self, request, pk=None):  # type: ignore
        record = self.get_object()
        record = mark_commission_paid(record.pk)
        return Response(self.get_serializer(record).data)


class PlatformRevenueView(APIView):
    permission_classes = [permissions.IsAuthenticated, CanViewPlatformRevenue]

    def get(self, request):  # type: ignore
        return Response(platform_revenue())


class HostRevenueView(APIView):
    permission_classes = [permissions.IsAuthenticated, CanManageOwnAccommodations]

    def get(self, request):  # type: ignore
        return Response(host_revenue(request.user))
