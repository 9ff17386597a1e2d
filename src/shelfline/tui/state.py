"""State management for the browser TUI."""

from __future__ import annotations

from dataclasses import dataclass, field

from shelfline.config import AppConfig
from shelfline.core.dates import Clock, utc_now
from shelfline.core.graph import layout_graph, select_graph_books, tooltip_text
from shelfline.core.table import (
    FilterState,
    SortField,
    TableSort,
    available_statuses,
    available_tags,
    available_years,
    build_table,
    default_year,
)
from shelfline.core.timeline import build_timeline
from shelfline.models.book import Book
from shelfline.models.views import GraphBar, GraphLayout, TimelineGroup
from shelfline.store.books import BookStore
from shelfline.store.manager import DocumentStore


def cycle_value(values: list, current, step: int = 1):
    """Next (or previous) entry after ``current``; None sits before the first.

    Cycling past either end returns to None ("no filter").
    """
    if not values:
        return None
    options = [None, *values]
    index = options.index(current) if current in options else 0
    return options[(index + step) % len(options)]


@dataclass
class BrowseState:
    """Shared state across all screens."""

    config: AppConfig = field(default_factory=AppConfig)
    clock: Clock = utc_now
    books: list[Book] = field(default_factory=list)

    # Table screen
    filters: FilterState = field(default_factory=FilterState)
    table_sort: TableSort = field(default_factory=TableSort)

    # Graph screen has its own date filter
    graph_filters: FilterState = field(default_factory=FilterState)
    graph_defaulted: bool = False
    graph_selected: int = 0

    def reload(self) -> None:
        """Re-read the user's books from disk.

        Raises:
            StoreError: If the user document cannot be read
        """
        store = BookStore(DocumentStore(self.config.data_dir))
        self.books = store.list_books(self.config.user)
        if not self.graph_defaulted:
            self.graph_defaulted = True
            year = default_year(self.books, self.clock())
            if year is not None:
                self.graph_filters.set_year(year)

    # ------------------------------------------------------------------
    # Timeline
    # ------------------------------------------------------------------

    def timeline(self) -> list[TimelineGroup]:
        return build_timeline(self.books, self.clock)

    # ------------------------------------------------------------------
    # Table
    # ------------------------------------------------------------------

    def table_rows(self) -> list[Book]:
        return build_table(self.books, self.filters, self.table_sort, self.clock)

    def sort_by(self, key: str) -> None:
        self.table_sort.select(SortField(key))

    def cycle_table_year(self, step: int = 1) -> None:
        year = cycle_value(available_years(self.books), self.filters.year, step)
        if year is None:
            if self.filters.year is not None:
                self.filters.set_year(self.filters.year)  # toggles off
        else:
            self.filters.set_year(year)

    def cycle_status(self) -> None:
        """Step a single status filter through the statuses present."""
        statuses = available_statuses(self.books)
        current = next(iter(self.filters.statuses)) if len(self.filters.statuses) == 1 else None
        self.filters.statuses.clear()
        status = cycle_value(statuses, current)
        if status is not None:
            self.filters.toggle_status(status)

    def cycle_tag(self) -> None:
        """Step a single tag filter through the tags present."""
        tags = available_tags(self.books)
        current = next(iter(self.filters.tags)) if len(self.filters.tags) == 1 else None
        self.filters.tags.clear()
        tag = cycle_value(tags, current)
        if tag is not None:
            self.filters.toggle_tag(tag)

    # ------------------------------------------------------------------
    # Graph
    # ------------------------------------------------------------------

    def graph_layout(self) -> GraphLayout | None:
        return layout_graph(
            select_graph_books(self.books, self.graph_filters, self.clock), self.clock
        )

    def cycle_graph_year(self, step: int) -> None:
        # Years are listed newest first; "right" moves forward in time
        years = available_years(self.books)
        year = cycle_value(years, self.graph_filters.year, -step)
        if year is None:
            self.graph_filters.clear()
        else:
            self.graph_filters.set_year(year)
        self.graph_selected = 0

    def show_all_years(self) -> None:
        self.graph_filters.clear()
        self.graph_selected = 0

    def select_bar(self, step: int) -> None:
        """Move the highlighted bar up or down, stopping at either end."""
        layout = self.graph_layout()
        if layout is None or not layout.bars:
            self.graph_selected = 0
            return
        last = len(layout.bars) - 1
        self.graph_selected = min(max(self.graph_selected + step, 0), last)

    def selected_bar(self, layout: GraphLayout | None) -> GraphBar | None:
        if layout is None or not layout.bars:
            return None
        return layout.bars[min(self.graph_selected, len(layout.bars) - 1)]

    def bar_detail(self, layout: GraphLayout | None) -> str:
        bar = self.selected_bar(layout)
        return tooltip_text(bar) if bar else ""
