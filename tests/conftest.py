"""Shared fixtures: a fixed clock, a book factory and a temporary store."""

from __future__ import annotations

import itertools
from datetime import datetime, timezone

import pytest

from shelfline.core.dates import to_instant
from shelfline.models.book import Book
from shelfline.store.manager import DocumentStore

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def make_book():
    """Build a stored Book; dates may be given as YYYY-MM-DD strings."""
    counter = itertools.count(1)

    def factory(title: str = "Dune", author: str = "Frank Herbert", **fields) -> Book:
        n = next(counter)
        fields.setdefault("id", f"book{n:04d}")
        fields.setdefault("added_date", datetime(2024, 1, n % 28 + 1, tzinfo=timezone.utc))
        for name in ("published_date", "reading_start_date", "reading_end_date"):
            if isinstance(fields.get(name), str):
                fields[name] = to_instant(fields[name])
        return Book(title=title, author=author, **fields)

    return factory


@pytest.fixture
def documents(tmp_path) -> DocumentStore:
    return DocumentStore(tmp_path / "data")
