"""Table screen: filter and sort every book."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import DataTable, Footer, Header, Input, Static

from shelfline.core.table import SortField
from shelfline.tui.screens.base import ViewScreen
from shelfline.tui.widgets import BookTable


class TableScreen(ViewScreen):
    """Sortable table with title search and year/status/tag filters."""

    AUTO_FOCUS = "#book-table"

    BINDINGS = [
        Binding("y", "cycle_year", "Year", show=True),
        Binding("s", "cycle_status", "Status", show=True),
        Binding("t", "cycle_tag", "Tag", show=True),
        Binding("c", "clear_filters", "Clear", show=True),
        Binding("slash", "focus_search", "Search", show=True),
        Binding("escape", "focus_table", "Table", show=False),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="main"):
            yield Input(placeholder="Filter by title...", id="title-filter")
            yield Static(id="filter-chips")
            yield BookTable(id="book-table")
            yield Static(id="book-count")
        yield Footer()

    def refresh_view(self) -> None:
        state = self.app.state
        books = state.table_rows()

        self.query_one("#book-table", BookTable).show_books(books, state.table_sort)

        chips = "  ".join(f"[reverse] {escape(f.label)} [/]" for f in state.filters.active_filters())
        self.query_one("#filter-chips", Static).update(chips or "[dim]No filters[/]")
        self.query_one("#book-count", Static).update(
            f"[dim]{len(books)} of {len(state.books)} book(s)[/]"
        )

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "title-filter":
            self.app.state.filters.set_title(event.value)
            self.refresh_view()

    def on_data_table_header_selected(self, event: DataTable.HeaderSelected) -> None:
        key = event.column_key.value
        if key not in {f.value for f in SortField}:
            return
        self.app.state.sort_by(key)
        self.refresh_view()

    def action_cycle_year(self) -> None:
        self.app.state.cycle_table_year()
        self.refresh_view()

    def action_cycle_status(self) -> None:
        self.app.state.cycle_status()
        self.refresh_view()

    def action_cycle_tag(self) -> None:
        self.app.state.cycle_tag()
        self.refresh_view()

    def action_clear_filters(self) -> None:
        self.app.state.filters.clear()
        self.query_one("#title-filter", Input).value = ""
        self.refresh_view()

    def action_focus_search(self) -> None:
        self.query_one("#title-filter", Input).focus()

    def action_focus_table(self) -> None:
        self.query_one("#book-table", BookTable).focus()
