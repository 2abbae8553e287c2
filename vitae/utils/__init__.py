"""
Shared utilities for vitae.

Common functionality used across contexts:
- Logger setup
- Timestamps and resume-style date parsing
- Markdown preview rendering
"""

from vitae.utils.timestamp import now, now_exact, parse_calendar_date, today

__all__ = ["now", "now_exact", "parse_calendar_date", "today"]
