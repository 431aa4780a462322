"""
Calendar-date helpers.

Everything the booking engine stores or compares is a plain ``datetime.date``.
``parse_date`` turns whatever the caller sent into one, ``format_date`` gives
the ``YYYY-MM-DD`` form used for storage and queries, ``format_display_date``
the ``DD/MM/YYYY`` form shown to people.
"""

import re
from datetime import date, datetime

from errors import InvalidDateFormat

SQL_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DISPLAY_DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{4}$")

FALLBACK_FORMATS = (
    "%d.%m.%Y",
    "%Y/%m/%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
    "%a %b %d %Y",
)


def _build(year: int, month: int, day: int, raw) -> date:
    try:
        return date(year, month, day)
    except ValueError:
        raise InvalidDateFormat(f"Invalid date: {raw!r}")


def parse_date(value) -> date:
    """
    Normalize a date-like value to a calendar date.

    :param value: ``date``/``datetime``, ``YYYY-MM-DD``, ``DD/MM/YYYY`` or another
        common date string
    :return: ``datetime.date``
    :raises InvalidDateFormat: if the value cannot be read as a date
    """
    # datetime is a subclass of date, check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateFormat(f"Invalid date: {value!r}")

    s = value.strip()
    if SQL_DATE_RE.match(s):
        y, m, d = (int(part) for part in s.split("-"))
        return _build(y, m, d, value)

    if DISPLAY_DATE_RE.match(s):
        d, m, y = (int(part) for part in s.split("/"))
        return _build(y, m, d, value)

    try:
        # Offsets are kept as given, the calendar day is read in that zone.
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in FALLBACK_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue

    raise InvalidDateFormat(f"Invalid date: {value!r}")


def format_date(value) -> str:
    return parse_date(value).isoformat()


def format_display_date(value) -> str:
    d = parse_date(value)
    return f"{d.day:02d}/{d.month:02d}/{d.year:04d}"
