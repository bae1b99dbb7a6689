"""
Day normalization for calendar events.

Every comparison in the layout engine happens on plain `date` values so
time-of-day and timezone offsets never shift an event onto a neighbouring day.
"""

import warnings
from datetime import date, datetime, timezone


def today() -> date:
    """Current calendar day, taken from the UTC clock."""
    return datetime.now(timezone.utc).date()


def _parse_timestamp(value: str) -> datetime:
    # fromisoformat only accepts a trailing 'Z' from 3.11 on
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def normalize_day(value) -> date:
    """
    Convert a date, datetime or ISO string into a calendar day.

    Date-only strings map to that day. Timestamps are read through their UTC
    date fields (naive timestamps count as UTC). Anything unparsable falls
    back to today with a warning; this function never raises.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return normalize_day(_parse_timestamp(text))
        except ValueError:
            pass

    warnings.warn(f"Unparsable event date {value!r}, falling back to today")
    return today()
