"""Date parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_AGO_PATTERN = re.compile(r"^(\d+)\s+(day|week|month)s?\s+ago$")


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse an expense or settlement date.

    Supports:
    - Absolute dates: "2024-01-15", "January 15, 2024", "15 Jan 2024"
    - "today", "yesterday"
    - "last friday" (most recent Friday strictly before today)
    - "3 days ago", "2 weeks ago", "1 month ago"

    Args:
        date_str: Date string
        today: Reference date for relative forms (defaults to date.today())

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    if not date_str or not date_str.strip():
        raise ValueError("Empty date string")

    date_str = date_str.strip().lower()
    today = today or date.today()

    if date_str == "today":
        return today
    if date_str == "yesterday":
        return today - timedelta(days=1)

    if date_str.startswith("last "):
        day_name = date_str[5:].strip()
        if day_name in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(day_name)) % 7
            return today - timedelta(days=days_ago or 7)

    match = _AGO_PATTERN.match(date_str)
    if match:
        count, unit = int(match.group(1)), match.group(2)
        if unit == "day":
            return today - timedelta(days=count)
        if unit == "week":
            return today - timedelta(weeks=count)
        return today - relativedelta(months=count)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
