"""Import parsed CSV rows through an injected "create book" operation."""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Iterable

from shelfline.core.csv_codec import CsvRow, parse_csv
from shelfline.models.book import Book, NewBook, book_key
from shelfline.models.views import ImportResult

log = logging.getLogger(__name__)

CreateBook = Callable[[NewBook], "Awaitable[Book] | Book"]


class CsvImporter:
    """Sequence CSV rows into a record store, one write at a time.

    Rows whose title|author key matches an existing book, or a row
    accepted earlier in the same file, are skipped. A failed write is
    recorded against its row and the import moves on to the next one.
    """

    def __init__(
        self,
        create: CreateBook,
        existing: Iterable[Book] = (),
        delay: float = 0.0,
    ):
        """Initialize the importer.

        Args:
            create: Persists one new book; may be sync or async
            existing: Books already stored, used for duplicate detection
            delay: Seconds to wait between writes
        """
        self.create = create
        self.existing_keys = {book_key(b.title, b.author) for b in existing}
        self.delay = delay

    def select_rows(self, rows: list[CsvRow], errors: list[str]) -> list[CsvRow]:
        """Drop invalid and duplicate rows, recording why."""
        seen = set(self.existing_keys)
        accepted: list[CsvRow] = []

        for row in rows:
            if row.error:
                errors.append(row.error)
                continue

            book = row.book
            key = book_key(book.title, book.author)
            if key in seen:
                errors.append(
                    f'Row {row.row_number}: Book "{book.title}" by {book.author} '
                    "already exists and was skipped"
                )
                log.info("Skipping duplicate row %d: %s", row.row_number, key)
                continue

            seen.add(key)
            accepted.append(row)

        return accepted

    async def _create(self, book: NewBook) -> Book:
        result = self.create(book)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def run(self, text: str) -> ImportResult:
        """Import CSV text.

        Raises:
            CsvImportError: If the file has no data rows or lacks Title/Author headers
        """
        errors: list[str] = []
        accepted = self.select_rows(parse_csv(text), errors)
        success = 0

        for index, row in enumerate(accepted):
            if index and self.delay:
                await asyncio.sleep(self.delay)
            try:
                await self._create(row.book)
            except Exception as e:
                reason = str(e) or "Unknown error"
                log.warning("Import failed for row %d: %s", row.row_number, reason)
                errors.append(
                    f'Row {row.row_number}: Failed to add "{row.book.title}" - {reason}'
                )
                continue
            success += 1
            log.debug("Imported row %d: %s", row.row_number, row.book.title)

        return ImportResult(success=success, errors=errors)


async def import_csv(
    text: str,
    create: CreateBook,
    existing: Iterable[Book] = (),
) -> ImportResult:
    """Convenience wrapper around ``CsvImporter.run``."""
    return await CsvImporter(create, existing).run(text)
