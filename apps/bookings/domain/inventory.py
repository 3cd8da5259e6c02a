"""
Inventory

Occupancy of one booking target over time. Built from the active stays of
the target (pending and confirmed bookings) and the host's maintenance days
while the target is locked, then asked whether a new stay fits.

A target is a room, a room-type tier that tracks its unit count, or the
accommodation as a whole. Stays booked on the whole accommodation and
stays booked on one of its parts exclude each other, so each target also
carries the exclusive stays of its neighbours.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, List, Set

from shared.domain.base import ValueObject
from shared.domain.exceptions import Overlap
from shared.domain.value_objects import DateRange


class DayStatus:
    AVAILABLE = 'available'
    OCCUPIED = 'occupied'
    MAINTENANCE = 'maintenance'


@dataclass(frozen=True)
class BookingTarget(ValueObject):
    """What a booking occupies: a room, a tracked tier, or the accommodation"""
    accommodation_id: int
    room_id: int | None = None
    room_type: str = ''

    @property
    def kind(self) -> str:
        if self.room_id is not None:
            return 'room'
        if self.room_type:
            return 'room_type'
        return 'accommodation'

    def __str__(self):
        if self.room_id is not None:
            return f"room {self.room_id}"
        if self.room_type:
            return f"room type {self.room_type!r} of accommodation {self.accommodation_id}"
        return f"accommodation {self.accommodation_id}"


@dataclass(frozen=True)
class Stay:
    booking_id: object
    dates: DateRange
    # a whole-place stay takes every unit of the target
    exclusive: bool = False


@dataclass
class Inventory:
    """
    Occupancy of a target

    ``units`` is how many stays may share a day: 1 for rooms and
    accommodations, the unit count for a tracked tier. An exclusive stay
    fills the day whatever the unit count.
    """
    target: BookingTarget
    stays: List[Stay] = field(default_factory=list)
    maintenance_days: Set[date] = field(default_factory=set)
    units: int = 1

    def occupancy_on(self, day: date) -> int:
        return sum(1 for stay in self.stays if stay.dates.contains(day))

    def day_status(self, day: date) -> str:
        if self.units <= 0 or self.occupancy_on(day) >= self.units:
            return DayStatus.OCCUPIED
        if any(stay.exclusive and stay.dates.contains(day) for stay in self.stays):
            return DayStatus.OCCUPIED
        if day in self.maintenance_days:
            return DayStatus.MAINTENANCE
        return DayStatus.AVAILABLE

    def conflicting_stays(self, dates: DateRange) -> List[Stay]:
        return [stay for stay in self.stays if stay.dates.overlaps_with(dates)]

    def blocked_days(self, dates: DateRange) -> List[date]:
        return [day for day in dates.days() if self.day_status(day) != DayStatus.AVAILABLE]

    def can_allocate(self, dates: DateRange) -> bool:
        return not self.blocked_days(dates)

    def allocate(self, booking_id, dates: DateRange) -> Stay:
        """
        Record a new stay, refusing it when any of its nights is taken.

        Raises:
            Overlap: a night is fully occupied or under maintenance
        """
        blocked = self.blocked_days(dates)
        if blocked:
            raise Overlap(
                f"{self.target} is not available for {dates}",
                first_unavailable_day=blocked[0].isoformat(),
                conflicting_bookings=[str(stay.booking_id) for stay in self.conflicting_stays(dates)],
            )
        stay = Stay(booking_id=booking_id, dates=dates)
        self.stays.append(stay)
        return stay

    @classmethod
    def from_ranges(
        cls,
        target: BookingTarget,
        ranges: Iterable[tuple],
        maintenance_days=(),
        units: int = 1,
        exclusive_ranges: Iterable[tuple] = (),
    ):
        """
        Build from ``(booking_id, check_in, check_out)`` rows

        ``ranges`` are the target's own stays, each taking one unit;
        ``exclusive_ranges`` are stays that take the whole target.
        """
        stays = [Stay(booking_id, DateRange(check_in, check_out)) for booking_id, check_in, check_out in ranges]
        stays += [
            Stay(booking_id, DateRange(check_in, check_out), exclusive=True)
            for booking_id, check_in, check_out in exclusive_ranges
        ]
        return cls(target=target, stays=stays, maintenance_days=set(maintenance_days), units=units)

    def __str__(self):
        return f"Inventory({self.target}, stays={len(self.stays)}, units={self.units})"
