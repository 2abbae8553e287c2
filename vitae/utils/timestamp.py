"""Timestamp and calendar-date utilities."""

import re
from datetime import date, datetime
from typing import Optional

_PARTIAL_DATE = re.compile(r"^(\d{4})(?:-(\d{1,2}))?(?:-(\d{1,2}))?")


def now_exact() -> str:
    """Current local time as an ISO 8601 string with microseconds."""
    return datetime.now().isoformat()


def now() -> str:
    """Current local time as an ISO 8601 string truncated to seconds."""
    return datetime.now().replace(microsecond=0).isoformat()


def today() -> str:
    """Current local date as YYYY-MM-DD."""
    return date.today().isoformat()


def parse_calendar_date(value: Optional[str], end_of_period: bool = False) -> Optional[date]:
    """
    Parse a resume-style date string into a date.

    Accepts "YYYY", "YYYY-MM", "YYYY-MM-DD" and full ISO timestamps. Partial
    dates resolve to the start of the period, or to its end when
    end_of_period is set (so "2020-03" as an upper bound covers all of March).

    Args:
        value: Date string (None or blank returns None)
        end_of_period: Resolve partial dates to the last day of the period

    Returns:
        date, or None if the value is empty or unparsable

    Examples:
        parse_calendar_date("2021-07")                      # date(2021, 7, 1)
        parse_calendar_date("2021-07", end_of_period=True)  # date(2021, 7, 31)
        parse_calendar_date("present")                      # None
    """
    if not value or not isinstance(value, str):
        return None

    match = _PARTIAL_DATE.match(value.strip())
    if not match:
        return None

    year = int(match.group(1))
    month = match.group(2)
    day = match.group(3)

    try:
        if month is None:
            return date(year, 12, 31) if end_of_period else date(year, 1, 1)
        month = int(month)
        if not 1 <= month <= 12:
            return None
        if day is None:
            if not end_of_period:
                return date(year, month, 1)
            next_month = date(year + month // 12, month % 12 + 1, 1)
            return date.fromordinal(next_month.toordinal() - 1)
        return date(year, month, int(day))
    except ValueError:
        return None


def format_timestamp(iso_timestamp: str) -> str:
    """
    Format ISO 8601 timestamp to readable format.

    Returns the original string if it cannot be parsed.

    Examples:
        format_timestamp("2025-11-13T18:45:40.572549")
        # "2025-11-13 18:45:40"
    """
    try:
        return datetime.fromisoformat(iso_timestamp).strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, TypeError):
        return iso_timestamp
