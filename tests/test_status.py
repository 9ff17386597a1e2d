"""Status synonyms and tag splitting."""

from __future__ import annotations

import pytest

from shelfline.core.status import join_tags, normalize_status, parse_tags
from shelfline.models.book import BookStatus


@pytest.mark.parametrize(
    "text, expected",
    [
        ("to read", BookStatus.TO_READ),
        ("To-Read", BookStatus.TO_READ),
        ("want to read", BookStatus.TO_READ),
        ("Currently Reading", BookStatus.READING),
        ("read", BookStatus.FINISHED),
        ("Completed", BookStatus.FINISHED),
        ("on-hold", BookStatus.ON_HOLD),
        ("paused", BookStatus.ON_HOLD),
        ("DNF", BookStatus.ABANDONED),
        ("  abandoned ", BookStatus.ABANDONED),
    ],
)
def test_normalize_status(text: str, expected: BookStatus) -> None:
    assert normalize_status(text) == expected


@pytest.mark.parametrize("text", [None, "", "   ", "someday maybe"])
def test_normalize_status_unknown(text) -> None:
    assert normalize_status(text) is None


def test_parse_tags_trims_and_drops_duplicates() -> None:
    assert parse_tags("fantasy; classic;;fantasy ; ") == ["fantasy", "classic"]
    assert parse_tags("") == []
    assert parse_tags(None) == []


def test_tags_are_case_sensitive() -> None:
    assert parse_tags("Sci-Fi;sci-fi") == ["Sci-Fi", "sci-fi"]


def test_join_tags() -> None:
    assert join_tags(["a", "b c"]) == "a;b c"
    assert join_tags([]) == ""
