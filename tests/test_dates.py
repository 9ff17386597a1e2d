"""Date parsing and formatting."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from shelfline.core.dates import (
    format_csv_date,
    month_key,
    month_label,
    parse_csv_date,
    start_of_month,
    to_instant,
)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("15/03/2024", utc(2024, 3, 15)),
        ("5/3/2024", utc(2024, 3, 5)),
        ("2024-03-15", utc(2024, 3, 15)),
        ("03/15/2024", utc(2024, 3, 15)),  # not a valid D/M date, read as M/D
        ("  15/03/2024  ", utc(2024, 3, 15)),
        ("March 15, 2024", utc(2024, 3, 15)),
        ("15 March 2024", utc(2024, 3, 15)),
        ("2024/03/15", utc(2024, 3, 15)),
    ],
)
def test_parse_csv_date_formats(text: str, expected: datetime) -> None:
    assert parse_csv_date(text) == expected


def test_day_first_wins_when_ambiguous() -> None:
    assert parse_csv_date("05/03/2024") == utc(2024, 3, 5)


@pytest.mark.parametrize(
    "text",
    [None, "", "   ", "not a date", "31/04/2024", "2024-02-30", "32/13/2024"],
)
def test_parse_csv_date_rejects(text) -> None:
    assert parse_csv_date(text) is None


def test_parsed_dates_are_midnight_utc() -> None:
    parsed = parse_csv_date("1/1/2024")
    assert parsed.tzinfo is not None
    assert parsed.utcoffset().total_seconds() == 0
    assert (parsed.hour, parsed.minute) == (0, 0)


def test_to_instant_converts_offsets_to_utc() -> None:
    assert to_instant("2024-03-15T10:00:00+02:00") == utc(2024, 3, 15, 8)
    assert to_instant("2024-03-15T10:00:00Z") == utc(2024, 3, 15, 10)


def test_to_instant_accepts_dates_and_naive_datetimes() -> None:
    assert to_instant(date(2024, 3, 15)) == utc(2024, 3, 15)
    assert to_instant(datetime(2024, 3, 15, 9)) == utc(2024, 3, 15, 9)


def test_to_instant_unreadable_values_are_none() -> None:
    assert to_instant(None) is None
    assert to_instant("") is None
    assert to_instant("garbage") is None
    assert to_instant(42) is None


def test_format_and_month_helpers() -> None:
    value = utc(2024, 3, 15, 18, 30)
    assert format_csv_date(value) == "2024-03-15"
    assert format_csv_date(None) == ""
    assert month_key(value) == "2024-03"
    assert month_label(value) == "March 2024"
    assert start_of_month(value) == utc(2024, 3, 1)
