"""Import orchestration: dedup, per-row failures and sequencing."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from shelfline.core import importer as importer_module
from shelfline.core.csv_codec import CsvImportError
from shelfline.core.importer import CsvImporter, import_csv
from shelfline.models.book import Book, NewBook


class FakeStore:
    """Records created books; titles in ``failing`` raise on create."""

    def __init__(self, failing: dict[str, Exception] | None = None):
        self.created: list[NewBook] = []
        self.failing = failing or {}

    def create(self, book: NewBook) -> Book:
        if book.title in self.failing:
            raise self.failing[book.title]
        self.created.append(book)
        return Book(
            **book.model_dump(),
            id=f"id{len(self.created)}",
            added_date=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

    async def create_async(self, book: NewBook) -> Book:
        await asyncio.sleep(0)
        return self.create(book)


def test_valid_and_invalid_rows() -> None:
    store = FakeStore()
    result = asyncio.run(import_csv("Title,Author\nDune,Frank Herbert\n,NoTitle\n", store.create))

    assert result.success == 1
    assert result.errors == [
        'Row 3: Title and Author are required (found: Title="", Author="NoTitle")'
    ]
    assert [b.title for b in store.created] == ["Dune"]


@pytest.mark.parametrize(
    ("rows", "skipped", "created"),
    [
        (
            ["dune , FRANK HERBERT", "Emma,Jane Austen", "emma ,JANE AUSTEN"],
            [
                'Row 2: Book "dune" by FRANK HERBERT already exists and was skipped',
                'Row 4: Book "emma" by JANE AUSTEN already exists and was skipped',
            ],
            ["Emma"],
        ),
        (
            ["emma ,JANE AUSTEN", "Emma,Jane Austen", "dune , FRANK HERBERT"],
            [
                'Row 3: Book "Emma" by Jane Austen already exists and was skipped',
                'Row 4: Book "dune" by FRANK HERBERT already exists and was skipped',
            ],
            ["emma"],
        ),
    ],
    ids=["file-order", "reversed"],
)
def test_skips_existing_and_repeated_rows(make_book, rows, skipped, created) -> None:
    store = FakeStore()
    existing = [make_book("Dune", "Frank Herbert")]
    text = "Title,Author\n" + "\n".join(rows) + "\n"
    result = asyncio.run(CsvImporter(store.create, existing).run(text))

    assert result.success == 1
    assert result.errors == skipped
    assert [b.title for b in store.created] == created


def test_failed_write_is_recorded_and_import_continues() -> None:
    store = FakeStore(failing={"Bad": RuntimeError("disk full"), "Worse": RuntimeError()})
    text = "Title,Author\nGood,A\nBad,B\nWorse,C\nAlso Good,D\n"
    result = asyncio.run(CsvImporter(store.create).run(text))

    assert result.success == 2
    assert result.errors == [
        'Row 3: Failed to add "Bad" - disk full',
        'Row 4: Failed to add "Worse" - Unknown error',
    ]
    assert [b.title for b in store.created] == ["Good", "Also Good"]


def test_accepts_async_create() -> None:
    store = FakeStore()
    result = asyncio.run(CsvImporter(store.create_async).run("Title,Author\nA,B\nC,D\n"))
    assert result.success == 2
    assert result.errors == []


def test_writes_in_file_order_with_delay_between(monkeypatch) -> None:
    store = FakeStore()
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    monkeypatch.setattr(importer_module.asyncio, "sleep", fake_sleep)
    text = "Title,Author\nOne,A\nTwo,B\nThree,C\n"
    asyncio.run(CsvImporter(store.create, delay=0.05).run(text))

    assert [b.title for b in store.created] == ["One", "Two", "Three"]
    assert sleeps == [0.05, 0.05]


def test_structural_errors_raise() -> None:
    store = FakeStore()
    with pytest.raises(CsvImportError):
        asyncio.run(import_csv("Title,Author\n", store.create))
    with pytest.raises(CsvImportError):
        asyncio.run(import_csv("Name,Writer\nDune,Frank Herbert\n", store.create))
    assert store.created == []
