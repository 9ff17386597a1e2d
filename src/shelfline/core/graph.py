"""Lay out reading intervals on a time axis for the graph view."""

import math
from datetime import datetime, timedelta
from types import MappingProxyType
from typing import Iterable

from shelfline.core.dates import Clock, start_of_month, utc_now
from shelfline.core.table import FilterState, reading_interval
from shelfline.models.book import Book, BookStatus
from shelfline.models.views import GraphBar, GraphLayout

STATUS_COLORS = MappingProxyType(
    {
        BookStatus.FINISHED: "#6b8e23",
        BookStatus.READING: "#8b6f47",
        BookStatus.ON_HOLD: "#b8945f",
        BookStatus.ABANDONED: "#6c757d",
        BookStatus.TO_READ: "#8b7355",
    }
)
DEFAULT_COLOR = "#8b7355"

DOMAIN_PADDING = 0.1
SECONDS_PER_DAY = 24 * 60 * 60


def status_color(status: BookStatus) -> str:
    return STATUS_COLORS.get(status, DEFAULT_COLOR)


def duration_days(start: datetime, end: datetime) -> int:
    """Whole days between two instants, rounded up."""
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


def select_graph_books(
    books: Iterable[Book],
    filters: FilterState | None = None,
    clock: Clock = utc_now,
) -> list[Book]:
    """Books with a start date, date-filtered, most recently started first."""
    now = clock()
    started = [b for b in books if b.reading_start_date]
    if filters is not None:
        started = [b for b in started if filters.matches_dates(b, now)]
    return sorted(started, key=lambda b: b.reading_start_date, reverse=True)


def compute_domain(bars: list[GraphBar]) -> tuple[datetime, datetime]:
    """Span of all bar endpoints, padded by 10% on each side.

    A zero-width span is padded by one day instead.
    """
    endpoints = [d for bar in bars for d in (bar.start, bar.end)]
    low, high = min(endpoints), max(endpoints)
    padding = (high - low) * DOMAIN_PADDING
    if not padding:
        padding = timedelta(days=1)
    return low - padding, high + padding


def layout_graph(books: Iterable[Book], clock: Clock = utc_now) -> GraphLayout | None:
    """One bar per book, rows in the given order.

    Returns None when no book has a start date.
    """
    now = clock()
    bars: list[GraphBar] = []

    for book in books:
        interval = reading_interval(book, now)
        if interval is None:
            continue
        start, end = interval
        bars.append(
            GraphBar(
                book=book,
                start=start,
                end=end,
                row=len(bars),
                color=status_color(book.status),
                label=f" - {book.title}",
                duration_days=duration_days(start, end),
            )
        )

    if not bars:
        return None

    domain_start, domain_end = compute_domain(bars)
    return GraphLayout(domain_start=domain_start, domain_end=domain_end, bars=bars)


def month_ticks(layout: GraphLayout) -> list[datetime]:
    """First day of every month inside the domain."""
    ticks: list[datetime] = []
    tick = start_of_month(layout.domain_start)
    if tick < layout.domain_start:
        tick = _next_month(tick)
    while tick <= layout.domain_end:
        ticks.append(tick)
        tick = _next_month(tick)
    return ticks


def _next_month(value: datetime) -> datetime:
    if value.month == 12:
        return value.replace(year=value.year + 1, month=1)
    return value.replace(month=value.month + 1)


def tooltip_text(bar: GraphBar) -> str:
    """Title, author, dates and duration for a hovered bar."""
    plural = "" if bar.duration_days == 1 else "s"
    return (
        f"{bar.book.title}\n"
        f"{bar.book.author}\n"
        f"{bar.start.date().isoformat()} - {bar.end.date().isoformat()}\n"
        f"{bar.duration_days} day{plural}"
    )
