"""Availability index: occupancy of booking targets backed by the ORM."""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING

from django.conf import settings  # type: ignore
from django.db import transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore

from apps.accommodations.models import Accommodation, AvailabilityDay, Room, RoomTypePricing
from shared.domain.exceptions import InvalidDateRange, InvalidSelection, NotFound
from shared.domain.value_objects import DateRange

from .domain.inventory import BookingTarget, Inventory

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from django.db.models import QuerySet


def lock_for_update(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def resolve_selection(
    accommodation: Accommodation,
    room_id: int | None = None,
    room_type: str = "",
) -> tuple[Room | None, RoomTypePricing | None]:
    """Look up the room or tier a request selects within ``accommodation``."""

    if room_id and room_type:
        raise InvalidSelection()

    if room_id:
        room = Room.objects.filter(pk=room_id, accommodation=accommodation, is_active=True).first()
        if room is None:
            raise NotFound(f"Room {room_id} not found in accommodation {accommodation.pk}")
        if accommodation.uses_room_type_pricing:
            raise InvalidSelection("This accommodation is booked by room type, not by individual room.")
        return room, None

    if room_type:
        tier = accommodation.room_type_pricing.filter(room_type=room_type).first()
        if tier is None:
            raise NotFound(f"Room type {room_type!r} not found in accommodation {accommodation.pk}")
        return None, tier

    return None, None


def target_for(
    accommodation: Accommodation,
    room: Room | None = None,
    tier: RoomTypePricing | None = None,
) -> BookingTarget:
    if room is not None:
        return BookingTarget(accommodation_id=accommodation.pk, room_id=room.pk)
    if tier is not None and tier.tracks_units:
        return BookingTarget(accommodation_id=accommodation.pk, room_type=tier.room_type)
    return BookingTarget(accommodation_id=accommodation.pk)


def units_for(tier: RoomTypePricing | None) -> int:
    if tier is not None and tier.tracks_units:
        return tier.rooms_available
    return 1


def tracked_room_types(accommodation_id: int) -> list[str]:
    return list(
        RoomTypePricing.objects.filter(
            accommodation_id=accommodation_id,
            rooms_available__isnull=False,
        ).values_list("room_type", flat=True)
    )


def _whole_place_filter(accommodation_id: int) -> Q:
    """Bookings of the accommodation as a whole, untracked tiers included."""
    return Q(room__isnull=True) & ~Q(room_type__in=tracked_room_types(accommodation_id))


def bookings_for_target(target: BookingTarget) -> "QuerySet":
    """Bookings taking a unit of ``target`` itself."""

    from .models import Booking  # Local import to prevent circular dependency

    qs = Booking.objects.filter(accommodation_id=target.accommodation_id)
    if target.kind == "room":
        return qs.filter(room_id=target.room_id)
    if target.kind == "room_type":
        return qs.filter(room__isnull=True, room_type=target.room_type)
    return qs.filter(_whole_place_filter(target.accommodation_id))


def bookings_blocking_target(target: BookingTarget) -> "QuerySet":
    """
    Bookings elsewhere in the accommodation that take all of ``target``.

    A whole-place booking blocks every room and tier; any room or tracked
    tier booking blocks the whole place.
    """

    from .models import Booking

    qs = Booking.objects.filter(accommodation_id=target.accommodation_id)
    whole_place = _whole_place_filter(target.accommodation_id)
    if target.kind == "accommodation":
        return qs.exclude(whole_place)
    return qs.filter(whole_place)


def _target_days(target: BookingTarget, window: DateRange) -> "QuerySet":
    days = AvailabilityDay.objects.filter(
        accommodation_id=target.accommodation_id,
        date__gte=window.start_date,
        date__lt=window.end_date,
    )
    if target.room_id is not None:
        # accommodation-wide markers apply to every room
        return days.filter(Q(room_id=target.room_id) | Q(room__isnull=True))
    return days.filter(room__isnull=True)


def lock_published_accommodation(accommodation_id: int) -> Accommodation:
    """
    Load and row-lock a bookable accommodation.

    Must run inside transaction.atomic(); the lock is held until commit.
    Every booking of the accommodation takes this lock first.

    Raises:
        NotFound: unknown or not published
    """

    accommodation = lock_for_update(
        Accommodation.objects.filter(pk=accommodation_id, status=Accommodation.Status.PUBLISHED)
    ).first()
    if accommodation is None:
        raise NotFound(f"Accommodation {accommodation_id} not found or not published")
    return accommodation


def lock_target(target: BookingTarget) -> None:
    """
    Take the row locks serializing every check-then-insert on ``target``:
    the Accommodation row, then the Room row for a room target.

    Must run inside transaction.atomic(); the locks are held until commit.
    """

    rows = [Accommodation.objects.filter(pk=target.accommodation_id)]
    if target.room_id is not None:
        rows.append(Room.objects.filter(pk=target.room_id, accommodation_id=target.accommodation_id))
    for qs in rows:
        if not lock_for_update(qs).exists():
            raise NotFound(f"Booking target {target} not found")


def load_inventory(target: BookingTarget, window: DateRange, units: int = 1) -> Inventory:
    """Occupancy of ``target`` restricted to ``window``."""

    def stays(qs):
        return qs.active().overlapping(window.start_date, window.end_date).values_list(
            "pk", "check_in", "check_out"
        )

    maintenance = _target_days(target, window).filter(
        status=AvailabilityDay.DayStatus.MAINTENANCE,
    ).values_list("date", flat=True)
    return Inventory.from_ranges(
        target,
        stays(bookings_for_target(target)),
        maintenance_days=maintenance,
        units=units,
        exclusive_ranges=stays(bookings_blocking_target(target)),
    )


def ensure_target_is_available(target: BookingTarget, stay: DateRange, units: int = 1) -> Inventory:
    """
    Raise Overlap unless every night of ``stay`` is free on ``target``.

    The caller must already hold the target lock for the answer to stay
    valid until its insert commits.
    """

    inventory = load_inventory(target, stay, units)
    inventory.allocate(None, stay)
    return inventory


def availability_calendar(
    accommodation: Accommodation,
    room: Room | None,
    start_date: date,
    end_date: date,
) -> list[dict]:
    """
    Day-by-day status of a room (or the whole accommodation) between
    ``start_date`` and ``end_date`` inclusive.
    """

    if end_date < start_date:
        raise InvalidDateRange("end_date must not be before start_date")
    max_days = getattr(settings, "STAYBOOK_CALENDAR_MAX_DAYS", 366)
    if (end_date - start_date).days + 1 > max_days:
        raise InvalidDateRange(f"A calendar query may span at most {max_days} days")

    target = target_for(accommodation, room)
    window = DateRange(start_date, end_date + timedelta(days=1))
    inventory = load_inventory(target, window)

    prices: dict[date, object] = {}
    # room-specific prices win over accommodation-wide ones
    for marker in _target_days(target, window).filter(price__isnull=False):
        if marker.room_id is None:
            prices.setdefault(marker.date, marker.price)
        else:
            prices[marker.date] = marker.price

    result = []
    for day in window.days():
        entry = {"date": day, "status": inventory.day_status(day)}
        if day in prices:
            entry["price"] = prices[day]
        result.append(entry)
    return result
