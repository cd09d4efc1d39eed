"""Date manipulation utilities"""

from datetime import date, datetime, time, timedelta
from typing import Tuple, Union
from zoneinfo import ZoneInfo

DateLike = Union[date, datetime]


def to_date(value: DateLike, tz: str | None = None) -> date:
    """
    Truncate a date or datetime to its calendar day.

    Aware datetimes are first converted to ``tz`` (when given) so that a UTC
    timestamp lands on the local calendar day it was recorded on.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None and tz:
            value = value.astimezone(ZoneInfo(tz))
        return value.date()
    return value


def parse_datetime(text: str) -> datetime:
    """Parse an ISO date or timestamp (trailing 'Z' accepted)"""
    text = text.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def parse_date(text: str, tz: str | None = None) -> date:
    """Parse an ISO date or timestamp down to a calendar day"""
    return to_date(parse_datetime(text), tz)


def week_start(value: DateLike) -> date:
    """Monday of the week containing the given day"""
    day = to_date(value)
    return day - timedelta(days=day.weekday())


def week_range(value: DateLike) -> Tuple[datetime, datetime]:
    """Monday 00:00:00 through Sunday 23:59:59.999999 of the containing week"""
    monday = week_start(value)
    sunday = monday + timedelta(days=6)
    return datetime.combine(monday, time.min), datetime.combine(sunday, time.max)


def week_label(start: date) -> str:
    """Short 'MM/DD-MM/DD' label for a Monday-start week"""
    end = start + timedelta(days=6)
    return f"{start:%m/%d}-{end:%m/%d}"

