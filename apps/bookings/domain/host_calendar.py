"""
Calendar aggregation for host views

Read-side projection over a host's bookings. Works on any objects with
``check_in`` and ``check_out`` dates; stays are half-open, so a booking
touches a day D when ``check_in <= D < check_out``.

Views (non-exclusive):
- week:       touches [today, today + 7 days)
- month:      touches the current calendar month
- two_months: touches the two calendar months after the current one
- history:    checked out on or before today
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List

from shared.domain.value_objects import DateRange

OVERVIEW_VIEWS = ('week', 'month', 'two_months', 'history')


def first_of_month(day: date, months_ahead: int = 0) -> date:
    month_index = day.month - 1 + months_ahead
    return date(day.year + month_index // 12, month_index % 12 + 1, 1)


@dataclass(frozen=True)
class OverviewWindows:
    week: DateRange
    month: DateRange
    two_months: DateRange

    @classmethod
    def around(cls, today: date) -> 'OverviewWindows':
        return cls(
            week=DateRange(today, today + timedelta(days=7)),
            month=DateRange(first_of_month(today), first_of_month(today, 1)),
            two_months=DateRange(first_of_month(today, 1), first_of_month(today, 3)),
        )


def stay_of(booking) -> DateRange:
    return DateRange(booking.check_in, booking.check_out)


def by_check_in(bookings: Iterable) -> list:
    return sorted(bookings, key=lambda b: (b.check_in, b.check_out, getattr(b, 'pk', 0) or 0))


def partition_bookings(bookings: Iterable, today: date) -> Dict[str, list]:
    """Bucket bookings into the overview views, each ordered by check-in"""
    windows = OverviewWindows.around(today)
    views: Dict[str, list] = {name: [] for name in OVERVIEW_VIEWS}

    for booking in bookings:
        stay = stay_of(booking)
        if stay.overlaps_with(windows.week):
            views['week'].append(booking)
        if stay.overlaps_with(windows.month):
            views['month'].append(booking)
        if stay.overlaps_with(windows.two_months):
            views['two_months'].append(booking)
        if booking.check_out <= today:
            views['history'].append(booking)

    return {name: by_check_in(items) for name, items in views.items()}


def bookings_on_day(bookings: Iterable, day: date) -> list:
    """Bookings occupying ``day``, ordered by check-in"""
    return by_check_in(b for b in bookings if b.check_in <= day < b.check_out)


@dataclass
class GridDay:
    day: date
    in_month: bool
    bookings: List

    @property
    def count(self) -> int:
        return len(self.bookings)


def month_grid(bookings: Iterable, year: int, month: int) -> List[List[GridDay]]:
    """
    Monday-first weeks covering ``year-month``, padded with the adjacent
    months' days, each day carrying the bookings that occupy it.
    """
    bookings = list(bookings)
    weeks = calendar.Calendar(firstweekday=calendar.MONDAY).monthdatescalendar(year, month)
    return [
        [GridDay(day=day, in_month=day.month == month, bookings=bookings_on_day(bookings, day)) for day in week]
        for week in weeks
    ]
