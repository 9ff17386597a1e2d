"""Group books into month buckets for the timeline view."""

from datetime import datetime
from functools import cmp_to_key
from typing import Iterable

from shelfline.core.dates import Clock, month_key, month_label, start_of_month, utc_now
from shelfline.models.book import Book
from shelfline.models.views import TimelineGroup


def _compare_for_timeline(a: Book, b: Book) -> int:
    """Most recently started first; ties go to the most recently finished.

    A book with an end date sorts before a tied book without one.
    """
    if a.reading_start_date != b.reading_start_date:
        return -1 if a.reading_start_date > b.reading_start_date else 1

    end_a, end_b = a.reading_end_date, b.reading_end_date
    if end_a and end_b:
        if end_a == end_b:
            return 0
        return -1 if end_a > end_b else 1
    if end_a:
        return -1
    if end_b:
        return 1
    return 0


def sort_for_timeline(books: Iterable[Book]) -> list[Book]:
    return sorted(books, key=cmp_to_key(_compare_for_timeline))


def most_recent_month(books: Iterable[Book], now: datetime) -> datetime:
    """Latest month across the books, preferring end dates over start dates."""
    latest: datetime | None = None
    for book in books:
        considered = book.reading_end_date or book.reading_start_date
        if considered is None:
            continue
        month = start_of_month(considered)
        if latest is None or month > latest:
            latest = month
    return latest or now


def build_timeline(books: Iterable[Book], clock: Clock = utc_now) -> list[TimelineGroup]:
    """Build timeline groups, most recent month first.

    Only books with a reading start date appear. Each lands in the month of
    its end date; books still open land in the most recent month seen.
    """
    eligible = sort_for_timeline(b for b in books if b.reading_start_date)
    fallback = most_recent_month(eligible, clock())

    groups: dict[str, TimelineGroup] = {}
    for book in eligible:
        when = book.reading_end_date or fallback
        key = month_key(when)
        if key not in groups:
            groups[key] = TimelineGroup(month_key=key, month_label=month_label(when))
        groups[key].books.append(book)

    return sorted(groups.values(), key=lambda g: g.month_key, reverse=True)
