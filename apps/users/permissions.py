"""Permission classes built on request capabilities."""

from __future__ import annotations

from rest_framework import permissions  # type: ignore

from .capabilities import Capability, request_capabilities


class HasCapability(permissions.BasePermission):
    """Grant access when the request carries ``required_capability``."""

    required_capability: Capability

    def has_permission(self, request, view) -> bool:  # type: ignore
        return self.required_capability in request_capabilities(request)


class CanManageCommission(HasCapability):
    required_capability = Capability.MANAGE_COMMISSION


class CanViewPlatformRevenue(HasCapability):
    required_capability = Capability.VIEW_PLATFORM_REVENUE


class CanManageOwnAccommodations(HasCapability):
    required_capability = Capability.MANAGE_OWN_ACCOMMODATIONS


class IsAdminOrReadOnly(permissions.BasePermission):
    """Reads for any authenticated user, writes for admins only."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return Capability.MANAGE_COMMISSION in request_capabilities(request)
