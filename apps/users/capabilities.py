"""Capabilities resolved once per request from the user's role."""

from __future__ import annotations

from enum import Enum


class Capability(str, Enum):
    BOOK = "book"
    VIEW_OWN_BOOKINGS = "view_own_bookings"
    MANAGE_OWN_ACCOMMODATIONS = "manage_own_accommodations"
    MANAGE_ALL_BOOKINGS = "manage_all_bookings"
    MANAGE_COMMISSION = "manage_commission"
    VIEW_PLATFORM_REVENUE = "view_platform_revenue"


ROLE_CAPABILITIES: dict[str, frozenset[Capability]] = {
    "guest": frozenset({Capability.BOOK, Capability.VIEW_OWN_BOOKINGS}),
    "host": frozenset(
        {
            Capability.BOOK,
            Capability.VIEW_OWN_BOOKINGS,
            Capability.MANAGE_OWN_ACCOMMODATIONS,
        }
    ),
    "admin": frozenset(Capability),
}


def capabilities_for(user) -> frozenset[Capability]:  # type: ignore
    if user is None or not user.is_authenticated:
        return frozenset()
    if user.is_superuser or user.is_staff:
        return ROLE_CAPABILITIES["admin"]
    return ROLE_CAPABILITIES.get(getattr(user, "role", ""), frozenset())


def request_capabilities(request) -> frozenset[Capability]:  # type: ignore
    """Resolve and cache the capability set on the request."""
    cached = getattr(request, "_staybook_capabilities", None)
    if cached is None:
        cached = capabilities_for(request.user)
        request._staybook_capabilities = cached
    return cached
