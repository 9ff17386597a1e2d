"""Date normalization for stored values and CSV text.

Every date the rest of the package sees is a timezone-aware UTC
``datetime`` or ``None``. Text from a CSV file goes through
``parse_csv_date``, which favours day-first input but still accepts
ISO and US-style dates.
"""

import re
from datetime import date, datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]

DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")

# Last-resort formats, tried in order after the patterns above
FALLBACK_FORMATS = [
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
    "%B %Y",
    "%b %Y",
    "%Y-%m",
    "%Y",
]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


def calendar_date(year: int, month: int, day: int) -> datetime | None:
    """Midnight UTC of a calendar date, or None if the date does not exist.

    31/04 is rejected rather than rolled over into May.
    """
    try:
        return datetime(year, month, day, tzinfo=timezone.utc)
    except ValueError:
        return None


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_fallback(text: str) -> datetime | None:
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass

    for fmt in FALLBACK_FORMATS:
        try:
            return as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    return None


def parse_csv_date(text: str | None) -> datetime | None:
    """Parse date text from a CSV cell.

    Precedence: D/M/YYYY, YYYY-MM-DD, M/D/YYYY, then generic formats.
    Blank or unparsable text yields None.
    """
    if not text or not text.strip():
        return None

    trimmed = text.strip()

    match = DAY_MONTH_YEAR.match(trimmed)
    if match:
        day, month, year = (int(g) for g in match.groups())
        parsed = calendar_date(year, month, day)
        if parsed is not None:
            return parsed

    match = ISO_DATE.match(trimmed)
    if match:
        year, month, day = (int(g) for g in match.groups())
        parsed = calendar_date(year, month, day)
        if parsed is not None:
            return parsed

    match = DAY_MONTH_YEAR.match(trimmed)
    if match:
        month, day, year = (int(g) for g in match.groups())
        parsed = calendar_date(year, month, day)
        if parsed is not None:
            return parsed

    return _parse_fallback(trimmed)


def to_instant(value: object) -> datetime | None:
    """Coerce a stored or user-supplied value into a UTC instant.

    Accepts datetimes, dates, ISO strings and anything ``parse_csv_date``
    understands. Anything else is treated as "no date".
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, date):
        return calendar_date(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return as_utc(datetime.fromisoformat(text))
        except ValueError:
            return parse_csv_date(text)
    return None


def format_csv_date(value: object) -> str:
    """Format a date as YYYY-MM-DD, or "" when there is none."""
    instant = to_instant(value)
    if instant is None:
        return ""
    return instant.date().isoformat()


def month_key(value: datetime) -> str:
    """Sortable YYYY-MM bucket key."""
    return f"{value.year:04d}-{value.month:02d}"


def month_label(value: datetime) -> str:
    """Display label such as "March 2024"."""
    return value.strftime("%B %Y")


def start_of_month(value: datetime) -> datetime:
    return value.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
