"""Date parsing and SII date formatting.

Internally dates are ``date``/``datetime`` objects. Inputs may also arrive as
ISO strings or in the SII display formats ``DD/MM/YYYY`` and
``DD/MM/YYYY_HH:MM:SS``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

SII_DATETIME_FORMAT = "%d/%m/%Y_%H:%M:%S"
SII_DATE_FORMAT = "%d/%m/%Y"

_INPUT_FORMATS = (SII_DATETIME_FORMAT, SII_DATE_FORMAT)


def parse_date(value: Any) -> date | None:
    """Parse a date-like value, returning None when it cannot be understood."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    for fmt in _INPUT_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def as_date(value: Any) -> date | None:
    """Calendar day of a date-like value."""
    parsed = parse_date(value)
    if isinstance(parsed, datetime):
        return parsed.date()
    return parsed


def as_datetime(value: Any) -> datetime | None:
    """Naive datetime of a date-like value; plain dates start at midnight."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    if isinstance(parsed, datetime):
        return parsed.replace(tzinfo=None)
    return datetime(parsed.year, parsed.month, parsed.day)


def format_sii_datetime(value: Any) -> str:
    """Format as DD/MM/YYYY_HH:MM:SS (e.g. 01/02/2025_00:00:00)."""
    parsed = as_datetime(value)
    if parsed is None:
        return ""
    return parsed.strftime(SII_DATETIME_FORMAT)
