"""Table view command implementation."""

from datetime import date

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from shelfline.config import AppConfig
from shelfline.core.dates import parse_csv_date
from shelfline.core.table import (
    FilterState,
    SortDirection,
    SortField,
    TableSort,
    build_table,
)
from shelfline.models.book import Book, BookRating, BookStatus
from shelfline.store.books import BookStore
from shelfline.store.manager import DocumentStore

RATING_LABELS = {
    BookRating.POSITIVE: "Thumbs Up",
    BookRating.NEGATIVE: "Thumbs Down",
    BookRating.FAVOURITE: "Favourite",
}

STATUS_STYLES = {
    BookStatus.TO_READ: "dim",
    BookStatus.READING: "cyan",
    BookStatus.FINISHED: "green",
    BookStatus.ON_HOLD: "yellow",
    BookStatus.ABANDONED: "red",
}

COLUMNS = [
    ("Title", SortField.TITLE),
    ("Author", SortField.AUTHOR),
    ("Status", SortField.STATUS),
    ("Added", SortField.ADDED_DATE),
    ("Started", SortField.READING_START_DATE),
    ("Finished", SortField.READING_END_DATE),
    ("Rating", SortField.RATING),
]


def parse_date_option(value: str | None, name: str) -> date | None:
    """Parse a --from/--to style option.

    Raises:
        ValueError: If text was given but is not a recognisable date
    """
    if value is None or not value.strip():
        return None
    parsed = parse_csv_date(value)
    if parsed is None:
        raise ValueError(f"Invalid {name} date: {value}")
    return parsed.date()


def build_filter_state(
    title: str | None = None,
    author: str | None = None,
    statuses: list[BookStatus] | None = None,
    tags: list[str] | None = None,
    year: int | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
) -> FilterState:
    """Build filter state from command-line options.

    Raises:
        ValueError: If both a year and a date range are given
    """
    filters = FilterState()
    filters.set_title(title or "")
    filters.set_author(author or "")
    for status in statuses or []:
        filters.toggle_status(status)
    for tag in tags or []:
        filters.toggle_tag(tag)

    range_start = parse_date_option(date_from, "--from")
    range_end = parse_date_option(date_to, "--to")
    if year is not None and (range_start or range_end):
        raise ValueError("Use either --year or --from/--to, not both")

    if year is not None:
        filters.set_year(year)
    else:
        filters.set_date_range(range_start, range_end)
    return filters


def build_sort(sort: SortField | None, order: SortDirection | None) -> TableSort:
    """Start from the default (author, ascending); a new column starts descending."""
    table_sort = TableSort()
    if sort is not None and sort != table_sort.column:
        table_sort.select(sort)
    if order is not None:
        table_sort.direction = order
    return table_sort


def format_date(value) -> str:
    return value.date().isoformat() if value else "—"


def display_table(
    books: list[Book],
    table_sort: TableSort,
    filters: FilterState,
    console: Console,
) -> None:
    """Display books as a sortable table."""
    console.print()
    table = Table(title="Reading List", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", width=8, no_wrap=True)
    for label, sort_field in COLUMNS:
        table.add_column(f"{label} {table_sort.icon(sort_field)}")
    table.add_column("Tags", style="magenta")

    for book in books:
        style = STATUS_STYLES.get(book.status, "white")
        table.add_row(
            book.id[:8],
            Text(book.title),
            Text(book.author),
            Text(book.status.value, style=style),
            format_date(book.added_date),
            format_date(book.reading_start_date),
            format_date(book.reading_end_date),
            RATING_LABELS.get(book.rating, ""),
            Text(", ".join(book.tags)),
        )

    console.print(table)

    active = filters.active_filters()
    if active:
        labels = "  ".join(f"[reverse] {escape(f.label)} [/]" for f in active)
        console.print(f"[dim]Filters:[/] {labels}")
    console.print(f"[dim]{len(books)} book(s)[/]")
    console.print()


def execute_table(
    config: AppConfig,
    console: Console,
    filters: FilterState,
    table_sort: TableSort,
) -> None:
    """Execute the books list command."""
    store = BookStore(DocumentStore(config.data_dir))
    books = store.list_books(config.user)

    if not books:
        console.print(f"[dim]No books for {escape(config.user)} yet[/]")
        return

    display_table(build_table(books, filters, table_sort), table_sort, filters, console)
