"""Unit tests for resume-style date parsing."""

from datetime import date

import pytest

from vitae.utils.timestamp import format_timestamp, parse_calendar_date


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        ("2021", date(2021, 1, 1)),
        ("2021-07", date(2021, 7, 1)),
        ("2021-07-15", date(2021, 7, 15)),
        ("2021-07-15T10:30:00", date(2021, 7, 15)),
    ],
)
def test_parse_start_of_period(value, expected):
    """Partial dates resolve to the first day of the period."""
    assert parse_calendar_date(value) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "value,expected",
    [
        ("2021", date(2021, 12, 31)),
        ("2021-02", date(2021, 2, 28)),
        ("2024-02", date(2024, 2, 29)),
        ("2021-12", date(2021, 12, 31)),
    ],
)
def test_parse_end_of_period(value, expected):
    """end_of_period resolves partial dates to the last day of the period."""
    assert parse_calendar_date(value, end_of_period=True) == expected


@pytest.mark.unit
@pytest.mark.parametrize("value", [None, "", "present", "2021-13", "2021-02-30", 2021])
def test_parse_invalid_returns_none(value):
    """Empty, non-string and impossible dates give None."""
    assert parse_calendar_date(value) is None
    assert parse_calendar_date(value, end_of_period=True) is None


@pytest.mark.unit
def test_format_timestamp():
    """ISO timestamps format to seconds; garbage is returned unchanged."""
    assert format_timestamp("2025-11-13T18:45:40.572549") == "2025-11-13 18:45:40"
    assert format_timestamp("not a time") == "not a time"
