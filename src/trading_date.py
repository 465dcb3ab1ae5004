"""
Trading date resolution

Turns an optional (year, month, day) into the canonical YYYY-MM-DD string used
to key snapshots. Omitted parts default from today. Weekends are rejected;
holiday calendars are not modeled.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""

from datetime import date

import constants as const
from errors import InvalidDate, NonTradingDay


def resolve_date(
    year: int | None = None,
    month: int | None = None,
    day: int | None = None,
    today: date | None = None,
) -> str:
    """
    Resolve a trading date.

    Args:
        year: Four digit year (2012 or later), defaults to the current year
        month: 1-12, defaults to the current month
        day: 1-31, defaults to the current day
        today: Reference date for defaults (date.today() when omitted)

    Returns:
        Date string in YYYY-MM-DD format

    Raises:
        InvalidDate: If the parts do not form a real calendar date
        NonTradingDay: If the date is a Saturday or Sunday
    """
    today = today or date.today()
    y = year if year is not None else today.year
    m = month if month is not None else today.month
    d = day if day is not None else today.day

    if y < const.MIN_YEAR:
        raise InvalidDate(f"Invalid date {y}-{m:02d}-{d:02d}: year must be {const.MIN_YEAR} or later")

    try:
        resolved = date(y, m, d)
    except ValueError as e:
        raise InvalidDate(f"Invalid date {y}-{m:02d}-{d:02d}: {e}") from e

    formatted = resolved.isoformat()
    if resolved.weekday() >= 5:
        raise NonTradingDay(formatted)

    return formatted


def snapshot_path(date_str: str) -> str:
    """YYYY-MM-DD -> YYYY/MM/DD, the layout the data repositories use"""
    return date_str.replace("-", "/")
