"""Sortable book table widget."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import DataTable

from shelfline.commands.table import COLUMNS, RATING_LABELS, STATUS_STYLES, format_date
from shelfline.core.table import TableSort
from shelfline.models.book import Book


class BookTable(DataTable):
    """DataTable whose column keys are sort fields; headers carry sort icons."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.cursor_type = "row"
        self.zebra_stripes = True

    def show_books(self, books: list[Book], table_sort: TableSort) -> None:
        """Rebuild columns and rows; row keys are book ids."""
        self.clear(columns=True)
        for label, sort_field in COLUMNS:
            self.add_column(f"{label} {table_sort.icon(sort_field)}", key=sort_field.value)
        self.add_column("Tags", key="tags")

        for book in books:
            self.add_row(
                Text(book.title),
                Text(book.author),
                Text(book.status.value, style=STATUS_STYLES.get(book.status, "")),
                format_date(book.added_date),
                format_date(book.reading_start_date),
                format_date(book.reading_end_date),
                RATING_LABELS.get(book.rating, ""),
                Text(", ".join(book.tags)),
                key=book.id,
            )
