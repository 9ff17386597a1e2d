"""Filtering and sorting for the table and graph views."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Callable, Iterable

from shelfline.core.dates import Clock, calendar_date, utc_now
from shelfline.models.book import Book, BookRating, BookStatus
from shelfline.models.views import ActiveFilter, FilterType


class SortField(str, Enum):
    """Columns the table can be sorted by."""

    TITLE = "title"
    AUTHOR = "author"
    STATUS = "status"
    ADDED_DATE = "addedDate"
    PUBLISHED_DATE = "publishedDate"
    READING_START_DATE = "readingStartDate"
    READING_END_DATE = "readingEndDate"
    RATING = "rating"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


RATING_PRIORITY = MappingProxyType(
    {
        BookRating.FAVOURITE: 3,
        BookRating.POSITIVE: 2,
        BookRating.NEGATIVE: 1,
        BookRating.NONE: 0,
    }
)


# ============================================================================
# Reading intervals
# ============================================================================


def effective_end(book: Book, now: datetime) -> datetime | None:
    """End of a book's reading interval.

    The recorded end date if there is one; otherwise "now" for a book
    being read, or one day after the start for anything else.
    """
    if book.reading_end_date:
        return book.reading_end_date
    if book.reading_start_date is None:
        return None
    if book.status == BookStatus.READING:
        return now
    return book.reading_start_date + timedelta(days=1)


def reading_interval(book: Book, now: datetime) -> tuple[datetime, datetime] | None:
    """(start, effective end), or None for a book never started."""
    if book.reading_start_date is None:
        return None
    return book.reading_start_date, effective_end(book, now)


def year_bounds(year: int) -> tuple[datetime, datetime]:
    start = datetime(year, 1, 1, tzinfo=timezone.utc)
    end = datetime(year, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)
    return start, end


def matches_year(book: Book, year: int, now: datetime) -> bool:
    """True if the reading interval overlaps the calendar year."""
    interval = reading_interval(book, now)
    if interval is None:
        return False
    start, end = interval
    year_start, year_end = year_bounds(year)
    return start <= year_end and end >= year_start


def matches_date_range(
    book: Book,
    range_start: date | None,
    range_end: date | None,
    now: datetime,
) -> bool:
    """True if the reading interval overlaps the range.

    Either bound may be None (unbounded on that side); the end bound covers
    its whole day. A book with only an end date is treated as a single
    instant; a book with neither date never matches.
    """
    interval = reading_interval(book, now)
    if interval is None:
        if book.reading_end_date is None:
            return False
        interval = (book.reading_end_date, book.reading_end_date)

    start, end = interval
    if range_start is not None:
        lower = calendar_date(range_start.year, range_start.month, range_start.day)
        if end < lower:
            return False
    if range_end is not None:
        upper = calendar_date(range_end.year, range_end.month, range_end.day)
        if start > upper + timedelta(days=1) - timedelta(microseconds=1):
            return False
    return True


# ============================================================================
# Filter state
# ============================================================================


@dataclass
class FilterState:
    """Filters applied to the table or graph.

    Year and date range are mutually exclusive: setting one clears the other.
    """

    title: str = ""
    author: str = ""
    statuses: set[BookStatus] = field(default_factory=set)
    tags: set[str] = field(default_factory=set)
    year: int | None = None
    range_start: date | None = None
    range_end: date | None = None

    @property
    def has_date_range(self) -> bool:
        return self.range_start is not None or self.range_end is not None

    @property
    def has_date_filter(self) -> bool:
        return self.year is not None or self.has_date_range

    def set_year(self, year: int | None) -> None:
        """Select a year, or deselect it if it is already selected."""
        if year is None or self.year == year:
            self.year = None
            return
        self.year = year
        self.range_start = None
        self.range_end = None

    def set_date_range(self, start: date | None, end: date | None) -> None:
        self.range_start = start
        self.range_end = end
        if self.has_date_range:
            self.year = None

    def set_title(self, text: str) -> None:
        self.title = text.strip()

    def set_author(self, text: str) -> None:
        self.author = text.strip()

    def toggle_status(self, status: BookStatus) -> None:
        if status in self.statuses:
            self.statuses.discard(status)
        else:
            self.statuses.add(status)

    def toggle_tag(self, tag: str) -> None:
        if tag in self.tags:
            self.tags.discard(tag)
        else:
            self.tags.add(tag)

    def clear(self) -> None:
        self.title = ""
        self.author = ""
        self.statuses.clear()
        self.tags.clear()
        self.year = None
        self.range_start = None
        self.range_end = None

    def active_filters(self) -> list[ActiveFilter]:
        """Current filters as display chips."""
        filters: list[ActiveFilter] = []
        if self.title:
            filters.append(
                ActiveFilter(type=FilterType.TITLE, value=self.title, label=f"Title: {self.title}")
            )
        if self.author:
            filters.append(
                ActiveFilter(type=FilterType.AUTHOR, value=self.author, label=f"Author: {self.author}")
            )
        if self.year is not None:
            filters.append(
                ActiveFilter(type=FilterType.YEAR, value=self.year, label=str(self.year))
            )
        if self.has_date_range:
            start = self.range_start.isoformat() if self.range_start else ""
            end = self.range_end.isoformat() if self.range_end else ""
            filters.append(
                ActiveFilter(
                    type=FilterType.DATE_RANGE,
                    value=f"{start}|{end}",
                    label=f"Date: {start or '...'} - {end or '...'}",
                )
            )
        for status in sorted(self.statuses, key=lambda s: s.value):
            filters.append(
                ActiveFilter(type=FilterType.STATUS, value=status.value, label=f"Status: {status.value}")
            )
        for tag in sorted(self.tags):
            filters.append(ActiveFilter(type=FilterType.TAG, value=tag, label=f"Tag: {tag}"))
        return filters

    def remove(self, active: ActiveFilter) -> None:
        """Clear the state behind one active filter."""
        if active.type == FilterType.TITLE:
            self.title = ""
        elif active.type == FilterType.AUTHOR:
            self.author = ""
        elif active.type == FilterType.YEAR:
            self.year = None
        elif active.type == FilterType.DATE_RANGE:
            self.range_start = None
            self.range_end = None
        elif active.type == FilterType.STATUS:
            self.statuses.discard(BookStatus(active.value))
        elif active.type == FilterType.TAG:
            self.tags.discard(str(active.value))

    def matches_dates(self, book: Book, now: datetime) -> bool:
        if self.year is not None:
            return matches_year(book, self.year, now)
        if self.has_date_range:
            return matches_date_range(book, self.range_start, self.range_end, now)
        return True

    def matches(self, book: Book, now: datetime) -> bool:
        if self.title and self.title.lower() not in book.title.lower():
            return False
        if self.author and self.author.lower() not in book.author.lower():
            return False
        if self.statuses and book.status not in self.statuses:
            return False
        if self.tags and not self.tags.issubset(book.tags):
            return False
        return self.matches_dates(book, now)

    def apply(self, books: Iterable[Book], clock: Clock = utc_now) -> list[Book]:
        now = clock()
        return [book for book in books if self.matches(book, now)]


# ============================================================================
# Sorting
# ============================================================================


def author_surname(author: str | None) -> str:
    """Last whitespace-delimited token of the name, case-folded."""
    if not author or not author.strip():
        return ""
    return author.split()[-1].casefold()


SORT_KEYS: dict[SortField, Callable[[Book], object]] = {
    SortField.TITLE: lambda b: b.title.casefold(),
    SortField.AUTHOR: lambda b: author_surname(b.author),
    SortField.STATUS: lambda b: b.status.value,
    SortField.ADDED_DATE: lambda b: b.added_date,
    SortField.PUBLISHED_DATE: lambda b: b.published_date,
    SortField.READING_START_DATE: lambda b: b.reading_start_date,
    SortField.READING_END_DATE: lambda b: b.reading_end_date,
    SortField.RATING: lambda b: RATING_PRIORITY.get(b.rating, 0),
}


def sort_books(
    books: Iterable[Book],
    sort_field: SortField,
    direction: SortDirection = SortDirection.ASC,
) -> list[Book]:
    """Sort by one column; books with no value for it always come last."""
    key = SORT_KEYS[sort_field]
    keyed: list[tuple[object, Book]] = []
    missing: list[Book] = []

    for book in books:
        value = key(book)
        if value is None:
            missing.append(book)
        else:
            keyed.append((value, book))

    keyed.sort(key=lambda pair: pair[0], reverse=direction == SortDirection.DESC)
    return [book for _, book in keyed] + missing


@dataclass
class TableSort:
    """Active sort column and direction."""

    column: SortField = SortField.AUTHOR
    direction: SortDirection = SortDirection.ASC

    def select(self, sort_field: SortField) -> None:
        """Flip direction on the active column; a new column starts descending."""
        if self.column == sort_field:
            self.direction = (
                SortDirection.DESC
                if self.direction == SortDirection.ASC
                else SortDirection.ASC
            )
        else:
            self.column = sort_field
            self.direction = SortDirection.DESC

    def apply(self, books: Iterable[Book]) -> list[Book]:
        return sort_books(books, self.column, self.direction)

    def icon(self, sort_field: SortField) -> str:
        if self.column != sort_field:
            return "⇅"
        return "↑" if self.direction == SortDirection.ASC else "↓"


def build_table(
    books: Iterable[Book],
    filters: FilterState,
    table_sort: TableSort,
    clock: Clock = utc_now,
) -> list[Book]:
    """Filtered and sorted rows for the table view."""
    return table_sort.apply(filters.apply(books, clock))


# ============================================================================
# Filter facets
# ============================================================================


def available_years(books: Iterable[Book]) -> list[int]:
    """Years touched by any start or end date, most recent first."""
    years: set[int] = set()
    for book in books:
        for value in (book.reading_start_date, book.reading_end_date):
            if value:
                years.add(value.year)
    return sorted(years, reverse=True)


def available_statuses(books: Iterable[Book]) -> list[BookStatus]:
    return sorted({book.status for book in books}, key=lambda s: s.value)


def available_tags(books: Iterable[Book]) -> list[str]:
    return sorted({tag for book in books for tag in book.tags})


def default_year(books: Iterable[Book], now: datetime) -> int | None:
    """The current year, if any book was read in it."""
    return now.year if now.year in available_years(books) else None
