"""Interval filters, filter state and table sorting."""

from __future__ import annotations

from datetime import date, datetime, timezone

from shelfline.core.table import (
    FilterState,
    SortDirection,
    SortField,
    TableSort,
    author_surname,
    available_statuses,
    available_tags,
    available_years,
    build_table,
    default_year,
    effective_end,
    matches_date_range,
    matches_year,
    sort_books,
)
from shelfline.models.book import BookRating, BookStatus
from shelfline.models.views import FilterType


def titles(books) -> list[str]:
    return [b.title for b in books]


# ----------------------------------------------------------------------------
# Intervals
# ----------------------------------------------------------------------------


def test_book_being_read_extends_to_now(make_book, now) -> None:
    book = make_book(status=BookStatus.READING, reading_start_date="2024-03-01")

    assert effective_end(book, now) == now
    assert matches_year(book, 2024, now)
    assert not matches_year(book, 2023, now)
    assert matches_date_range(book, date(2024, 5, 1), date(2024, 5, 31), now)


def test_unfinished_book_not_being_read_lasts_one_day(make_book, now) -> None:
    book = make_book(status=BookStatus.ON_HOLD, reading_start_date="2024-03-01")

    assert effective_end(book, now) == datetime(2024, 3, 2, tzinfo=timezone.utc)
    assert matches_date_range(book, date(2024, 3, 2), None, now)
    assert not matches_date_range(book, date(2024, 3, 3), None, now)


def test_year_overlap_across_new_year(make_book, now) -> None:
    book = make_book(reading_start_date="2023-12-20", reading_end_date="2024-01-05")
    assert matches_year(book, 2023, now)
    assert matches_year(book, 2024, now)
    assert not matches_year(book, 2022, now)


def test_range_end_covers_whole_day(make_book, now) -> None:
    book = make_book(reading_start_date="2024-04-10T18:00:00", reading_end_date="2024-04-12")
    assert matches_date_range(book, None, date(2024, 4, 10), now)
    assert not matches_date_range(book, None, date(2024, 4, 9), now)


def test_end_date_only_is_a_single_day(make_book, now) -> None:
    book = make_book(reading_end_date="2024-04-10")
    assert matches_date_range(book, date(2024, 4, 10), date(2024, 4, 10), now)
    assert not matches_date_range(book, date(2024, 4, 11), None, now)


def test_book_without_dates_never_matches_dates(make_book, now) -> None:
    book = make_book()
    assert not matches_year(book, 2024, now)
    assert not matches_date_range(book, date(2024, 1, 1), None, now)


def test_end_before_start_is_accepted(make_book, now) -> None:
    # No ordering is enforced between the two dates
    book = make_book(reading_start_date="2024-05-01", reading_end_date="2024-04-01")
    assert book.reading_end_date < book.reading_start_date
    assert effective_end(book, now) == book.reading_end_date


# ----------------------------------------------------------------------------
# Filter state
# ----------------------------------------------------------------------------


def test_year_and_date_range_are_exclusive() -> None:
    filters = FilterState()
    filters.set_year(2024)
    filters.set_date_range(date(2024, 1, 1), None)
    assert filters.year is None
    assert filters.range_start == date(2024, 1, 1)

    filters.set_year(2023)
    assert filters.year == 2023
    assert not filters.has_date_range


def test_selecting_same_year_toggles_it_off() -> None:
    filters = FilterState()
    filters.set_year(2024)
    filters.set_year(2024)
    assert filters.year is None


def test_active_filter_labels_and_removal() -> None:
    filters = FilterState()
    filters.set_title(" dune ")
    filters.set_date_range(date(2024, 1, 1), None)
    filters.toggle_status(BookStatus.READING)
    filters.toggle_tag("sci-fi")

    active = filters.active_filters()
    assert [f.label for f in active] == [
        "Title: dune",
        "Date: 2024-01-01 - ...",
        "Status: reading",
        "Tag: sci-fi",
    ]
    assert active[1].type == FilterType.DATE_RANGE
    assert active[1].value == "2024-01-01|"

    for chip in active:
        filters.remove(chip)
    assert filters.active_filters() == []


def test_text_filters_are_case_insensitive(make_book, clock) -> None:
    books = [make_book("Dune Messiah", "Frank Herbert"), make_book("Emma", "Jane Austen")]
    filters = FilterState(title="MESSIAH")
    assert titles(filters.apply(books, clock)) == ["Dune Messiah"]

    filters = FilterState(author="austen")
    assert titles(filters.apply(books, clock)) == ["Emma"]


def test_statuses_match_any_and_tags_match_all(make_book, clock) -> None:
    books = [
        make_book("A", "X", status=BookStatus.READING, tags=["sci-fi", "classic"]),
        make_book("B", "X", status=BookStatus.FINISHED, tags=["sci-fi"]),
        make_book("C", "X", status=BookStatus.ABANDONED, tags=["classic"]),
    ]

    filters = FilterState(statuses={BookStatus.READING, BookStatus.FINISHED})
    assert titles(filters.apply(books, clock)) == ["A", "B"]

    filters = FilterState(tags={"sci-fi", "classic"})
    assert titles(filters.apply(books, clock)) == ["A"]


def test_year_filter_takes_precedence_over_stale_range(make_book, clock) -> None:
    book = make_book(reading_start_date="2024-03-01", reading_end_date="2024-03-10")
    filters = FilterState(year=2024, range_start=date(2020, 1, 1), range_end=date(2020, 12, 31))
    assert titles(filters.apply([book], clock)) == ["Dune"]


# ----------------------------------------------------------------------------
# Sorting
# ----------------------------------------------------------------------------


def test_author_surname() -> None:
    assert author_surname("Ursula K. Le Guin") == "guin"
    assert author_surname("Plato") == "plato"
    assert author_surname("  ") == ""
    assert author_surname("Johann Strauß") == author_surname("JOHANN STRAUSS") == "strauss"


def test_default_sort_is_author_surname_ascending(make_book) -> None:
    books = [
        make_book("Dune", "Frank Herbert"),
        make_book("Emma", "Jane Austen"),
        make_book("Excession", "Iain M. Banks"),
    ]
    assert titles(TableSort().apply(books)) == ["Emma", "Excession", "Dune"]


def test_missing_values_sort_last_in_both_directions(make_book) -> None:
    books = [
        make_book("None1", "X"),
        make_book("Early", "X", reading_start_date="2024-01-01"),
        make_book("None2", "X"),
        make_book("Late", "X", reading_start_date="2024-05-01"),
    ]
    asc = sort_books(books, SortField.READING_START_DATE, SortDirection.ASC)
    desc = sort_books(books, SortField.READING_START_DATE, SortDirection.DESC)
    assert titles(asc) == ["Early", "Late", "None1", "None2"]
    assert titles(desc) == ["Late", "Early", "None1", "None2"]


def test_descending_reverses_ascending_for_distinct_keys(make_book) -> None:
    books = [make_book(t, "X") for t in ("b", "D", "a", "c")]
    asc = sort_books(books, SortField.TITLE, SortDirection.ASC)
    desc = sort_books(books, SortField.TITLE, SortDirection.DESC)
    assert titles(asc) == ["a", "b", "c", "D"]
    assert titles(desc) == list(reversed(titles(asc)))


def test_rating_sorts_by_priority(make_book) -> None:
    books = [
        make_book("none", "X"),
        make_book("down", "X", rating=BookRating.NEGATIVE),
        make_book("fav", "X", rating=BookRating.FAVOURITE),
        make_book("up", "X", rating=BookRating.POSITIVE),
    ]
    desc = sort_books(books, SortField.RATING, SortDirection.DESC)
    assert titles(desc) == ["fav", "up", "down", "none"]


def test_table_sort_selection() -> None:
    table_sort = TableSort()
    assert (table_sort.column, table_sort.direction) == (SortField.AUTHOR, SortDirection.ASC)
    assert table_sort.icon(SortField.AUTHOR) == "↑"
    assert table_sort.icon(SortField.TITLE) == "⇅"

    table_sort.select(SortField.AUTHOR)
    assert table_sort.direction == SortDirection.DESC
    assert table_sort.icon(SortField.AUTHOR) == "↓"

    table_sort.select(SortField.TITLE)
    assert (table_sort.column, table_sort.direction) == (SortField.TITLE, SortDirection.DESC)


def test_build_table_filters_then_sorts(make_book, clock) -> None:
    books = [
        make_book("B", "X", status=BookStatus.FINISHED),
        make_book("A", "X", status=BookStatus.FINISHED),
        make_book("C", "X", status=BookStatus.READING),
    ]
    filters = FilterState(statuses={BookStatus.FINISHED})
    rows = build_table(books, filters, TableSort(SortField.TITLE, SortDirection.ASC), clock)
    assert titles(rows) == ["A", "B"]


# ----------------------------------------------------------------------------
# Facets
# ----------------------------------------------------------------------------


def test_facets(make_book, now) -> None:
    books = [
        make_book("A", "X", tags=["b", "a"], reading_start_date="2023-12-20", reading_end_date="2024-01-05"),
        make_book("B", "X", status=BookStatus.READING, tags=["a"], reading_start_date="2022-02-01"),
    ]
    assert available_years(books) == [2024, 2023, 2022]
    assert available_statuses(books) == [BookStatus.READING, BookStatus.TO_READ]
    assert available_tags(books) == ["a", "b"]
    assert default_year(books, now) == 2024
    assert default_year(books[1:], now) is None
