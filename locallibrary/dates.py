from datetime import date, datetime
from typing import Any, Optional

from dateutil.parser import isoparse


def parse_date(value: Any) -> Optional[date]:
    """Return a date for an ISO 8601 string (or date), otherwise None."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return isoparse(str(value)).date()
    except (ValueError, OverflowError):
        return None


def format_date(value: Optional[date]) -> str:
    # e.g. "Jan 5, 1920"
    if value is None:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


def to_iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None
