"""
Date Range Generation

Friday-to-Friday stay pairs over a rolling window of months.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Iterator, Optional

from .schema import DatePair


FRIDAY = 4  # date.weekday()
WINDOW_MONTHS = 6
STAY_NIGHTS = 7


def add_months(d: date, months: int) -> date:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(d.day, last_day))


def next_weekday(d: date, weekday: int = FRIDAY) -> date:
    """Earliest date >= d falling on weekday (d itself if it matches)."""
    return d + timedelta(days=(weekday - d.weekday()) % 7)


def day_of_week(d: date) -> str:
    return d.strftime("%a")


class DateRangeGenerator:
    """
    Lazy, restartable sequence of DatePairs.

    The first check-in is the first `weekday` on or after `today`; each
    following check-in is 7 days later. Generation stops once a check-in
    would fall after today + `months`.
    """

    def __init__(
        self,
        today: Optional[date] = None,
        months: int = WINDOW_MONTHS,
        weekday: int = FRIDAY,
        nights: int = STAY_NIGHTS,
    ):
        self.today = today or date.today()
        self.months = months
        self.weekday = weekday
        self.nights = nights

    @property
    def window_end(self) -> date:
        return add_months(self.today, self.months)

    def __iter__(self) -> Iterator[DatePair]:
        check_in = next_weekday(self.today, self.weekday)
        end = self.window_end
        while check_in <= end:
            yield DatePair(check_in, check_in + timedelta(days=self.nights))
            check_in += timedelta(days=7)


def friday_to_friday_pairs(today: Optional[date] = None, months: int = WINDOW_MONTHS) -> list[DatePair]:
    """All Friday-to-Friday pairs for the next `months` months."""
    return list(DateRangeGenerator(today, months=months))


def group_by_month(pairs) -> dict[str, list[DatePair]]:
    """Group pairs by check-in month label, preserving order."""
    grouped: dict[str, list[DatePair]] = {}
    for pair in pairs:
        grouped.setdefault(pair.month_label, []).append(pair)
    return grouped
