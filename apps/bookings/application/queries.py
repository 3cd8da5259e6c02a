"""
Booking queries

Snapshot reads over committed state; nothing here locks.
"""

from datetime import date

from django.db.models import Q
from django.utils import timezone

from apps.bookings.domain import host_calendar
from apps.bookings.models import Booking
from apps.users.capabilities import Capability, capabilities_for


def bookings_visible_to(user):
    """Guests see their own bookings, hosts those on their accommodations, admins all."""
    qs = Booking.objects.select_related('accommodation', 'room', 'guest')
    capabilities = capabilities_for(user)
    if Capability.MANAGE_ALL_BOOKINGS in capabilities:
        return qs
    if Capability.MANAGE_OWN_ACCOMMODATIONS in capabilities:
        return qs.filter(Q(accommodation__owner=user) | Q(guest=user))
    return qs.filter(guest=user)


def host_bookings(host):
    return Booking.objects.for_host(host).select_related('accommodation', 'room', 'guest')


def get_host_booking_overview(host, today: date | None = None) -> dict:
    """``{week, month, two_months, history}`` for every booking on the host's accommodations"""
    today = today or timezone.localdate()
    return host_calendar.partition_bookings(host_bookings(host), today)


def get_host_month_grid(host, year: int, month: int):
    """Monday-first month grid of the host's non-cancelled bookings"""
    first = date(year, month, 1)
    # the grid is padded to whole weeks
    window_start = host_calendar.first_of_month(first, -1)
    window_end = host_calendar.first_of_month(first, 2)
    bookings = (
        host_bookings(host)
        .active()
        .overlapping(window_start, window_end)
    )
    return host_calendar.month_grid(bookings, year, month)
