"""Host overview partitioning and month grid."""

from datetime import date
from types import SimpleNamespace

from apps.bookings.domain.host_calendar import (
    OverviewWindows,
    bookings_on_day,
    first_of_month,
    month_grid,
    partition_bookings,
)

TODAY = date(2024, 6, 20)


def booking(pk, check_in, check_out):
    return SimpleNamespace(pk=pk, check_in=check_in, check_out=check_out)


def test_windows_around_today():
    windows = OverviewWindows.around(TODAY)

    assert windows.week.start_date == TODAY
    assert windows.week.end_date == date(2024, 6, 27)
    assert windows.month.start_date == date(2024, 6, 1)
    assert windows.two_months.start_date == date(2024, 7, 1)
    assert windows.two_months.end_date == date(2024, 9, 1)


def test_first_of_month_crosses_years():
    assert first_of_month(date(2024, 12, 5), 1) == date(2025, 1, 1)
    assert first_of_month(date(2024, 1, 5), -1) == date(2023, 12, 1)


def test_partition_is_not_exclusive():
    past = booking(1, date(2024, 6, 1), date(2024, 6, 5))
    this_week = booking(2, date(2024, 6, 22), date(2024, 6, 24))
    august = booking(3, date(2024, 8, 10), date(2024, 8, 12))
    spanning = booking(4, date(2024, 6, 28), date(2024, 7, 3))

    views = partition_bookings([august, spanning, this_week, past], TODAY)

    assert views["week"] == [this_week]
    assert views["month"] == [past, this_week, spanning]
    assert views["two_months"] == [spanning, august]
    assert views["history"] == [past]


def test_checkout_today_counts_as_history():
    leaving = booking(1, date(2024, 6, 18), TODAY)

    views = partition_bookings([leaving], TODAY)

    assert views["history"] == [leaving]
    assert views["week"] == []


def test_bookings_on_day_is_half_open_and_ordered():
    later = booking(1, date(2024, 6, 12), date(2024, 6, 14))
    earlier = booking(2, date(2024, 6, 10), date(2024, 6, 13))
    leaving = booking(3, date(2024, 6, 8), date(2024, 6, 12))

    assert bookings_on_day([later, earlier, leaving], date(2024, 6, 12)) == [earlier, later]


def test_month_grid_is_monday_first():
    stay = booking(1, date(2024, 6, 1), date(2024, 6, 3))

    weeks = month_grid([stay], 2024, 6)

    assert weeks[0][0].day == date(2024, 5, 27)
    assert not weeks[0][0].in_month
    june_first = weeks[0][5]
    assert june_first.day == date(2024, 6, 1)
    assert june_first.count == 1
    assert weeks[0][6].bookings == [stay]
    assert all(len(week) == 7 for week in weeks)
