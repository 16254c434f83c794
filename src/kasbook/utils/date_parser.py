"""Date parsing utilities.

All timestamps in kasbook are naive local datetimes, so "today" always means
the calendar day of the kiosk's own clock.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

RELATIVE_DAYS = {
    "today": 0,
    "hari ini": 0,
    "yesterday": -1,
    "kemarin": -1,
}

PERIODS = ("today", "yesterday", "this-week", "last-week", "this-month", "last-month", "this-year")


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "15 Jan 2024") and the relative
    words "today"/"hari ini" and "yesterday"/"kemarin". Day-first parsing is
    used for ambiguous numeric dates, as is usual in Indonesia.

    Args:
        date_str: Date string
        today: Reference day for relative words; defaults to the local date

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    if date_str in RELATIVE_DAYS:
        return today + timedelta(days=RELATIVE_DAYS[date_str])

    try:
        # ISO strings are unambiguous; everything else is read day-first.
        if len(date_str) >= 8 and date_str[4] == "-":
            return date_parser.isoparse(date_str).date()
        return date_parser.parse(date_str, dayfirst=True).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def start_of_day(moment: datetime) -> datetime:
    """Local midnight at the start of the day containing ``moment``."""
    return datetime.combine(moment.date(), time.min)


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Half-open datetime bounds ``[midnight, next midnight)`` of one day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def range_bounds(
    start_date: Optional[date], end_date: Optional[date]
) -> tuple[Optional[datetime], Optional[datetime]]:
    """Convert an inclusive date range to half-open datetime bounds.

    Either side may be None for an open range.
    """
    start = datetime.combine(start_date, time.min) if start_date is not None else None
    end = None
    if end_date is not None:
        end = datetime.combine(end_date, time.min) + timedelta(days=1)
    return start, end


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get inclusive start and end dates for a named period.

    Args:
        period: One of today, yesterday, this-week, last-week, this-month,
            last-month, this-year
        today: Reference day; defaults to the local date

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = today or date.today()

    if period == "today":
        return today, today
    if period == "yesterday":
        yesterday = today - timedelta(days=1)
        return yesterday, yesterday
    if period == "this-week":
        return today - timedelta(days=today.weekday()), today
    if period == "last-week":
        monday = today - timedelta(days=today.weekday() + 7)
        return monday, monday + timedelta(days=6)
    if period == "this-month":
        return today.replace(day=1), today
    if period == "last-month":
        first_of_month = today.replace(day=1)
        return first_of_month - relativedelta(months=1), first_of_month - timedelta(days=1)
    if period == "this-year":
        return today.replace(month=1, day=1), today

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
