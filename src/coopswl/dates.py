"""
Calendar helpers and month-by-month partitioning of date ranges.

The CO-OPS API caps 6-minute water level retrievals at 31 days per request, so
a long range is split into calendar-month windows and requested one at a time.
"""

import calendar
from datetime import date, datetime
from typing import List, Union

from .exceptions import ConfigurationError, InvalidRangeError
from .models import MonthWindow

DateLike = Union[date, datetime, str, int]


def first_day_of_month(d: date) -> date:
    """2001-12-31 returns 2001-12-01."""
    return d.replace(day=1)


def last_day_of_month(d: date) -> date:
    """2001-12-01 returns 2001-12-31."""
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def next_month(d: date) -> date:
    """First day of the month following ``d``."""
    if d.month == 12:
        return date(d.year + 1, 1, 1)
    return date(d.year, d.month + 1, 1)


def dashless_iso8601(d: date) -> str:
    """Return ``d`` formatted like '20011231'."""
    return d.strftime("%Y%m%d")


def parse_date(value: DateLike) -> date:
    """
    Coerce a configuration value to a date.

    Accepts date/datetime objects, 'YYYY-MM-DD' or 'YYYYMMDD' strings, and
    8-digit integers such as 20150701.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid date: {value!r}")

    text = str(value).strip()
    for fmt in ("%Y-%m-%d", "%Y%m%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ConfigurationError(
        f"Invalid date format: {value!r}. Use YYYY-MM-DD or YYYYMMDD"
    )


def partition_months(start: date, end: date) -> List[MonthWindow]:
    """
    Split ``[start, end]`` into consecutive windows of at most one calendar month.

    The first window begins at ``start`` and the last window ends at ``end``;
    every window in between spans a whole month. When both dates fall in the
    same month a single window ``[start, end]`` is returned.

    Example, for 2016-01-02 through 2016-09-22:
        [2016-01-02 → 2016-01-31, 2016-02-01 → 2016-02-29, ...,
         2016-09-01 → 2016-09-22]

    Raises:
        InvalidRangeError: If ``end`` is before ``start``
    """
    if end < start:
        raise InvalidRangeError(
            f"End date {end.isoformat()} is before start date {start.isoformat()}"
        )

    windows: List[MonthWindow] = []
    this_month = first_day_of_month(start)

    while this_month <= end:
        begin_date = start if not windows else this_month

        if (this_month.year, this_month.month) == (end.year, end.month):
            end_date = end
        else:
            end_date = last_day_of_month(this_month)

        windows.append(MonthWindow(begin_date, end_date, index=len(windows)))
        this_month = next_month(this_month)

    return windows
