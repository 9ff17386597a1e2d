"""Graph screen: reading periods as bars over time."""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Static

from shelfline.commands.graph import render_graph
from shelfline.tui.screens.base import ViewScreen

# Room for the title label and duration after the bars
LABEL_SPACE = 40
MIN_WIDTH = 20


class GraphScreen(ViewScreen):
    """One bar per book; left/right step through years, up/down pick a bar."""

    BINDINGS = [
        Binding("left", "year(-1)", "Earlier", show=True),
        Binding("right", "year(1)", "Later", show=True),
        Binding("a", "all_years", "All", show=True),
        Binding("up", "select(-1)", "Previous", show=False, priority=True),
        Binding("down", "select(1)", "Next", show=False, priority=True),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="main"):
            yield Static(id="graph-title")
            yield Static(id="graph")
            yield Static(id="graph-detail", markup=False)
        yield Footer()

    def on_resize(self) -> None:
        if self.is_current:
            self.refresh_view()

    def refresh_view(self) -> None:
        state = self.app.state
        active = state.graph_filters.active_filters()
        self.query_one("#graph-title", Static).update(
            f"[bold]{escape(active[0].label) if active else 'All years'}[/]"
        )

        layout = state.graph_layout()
        view = self.query_one("#graph", Static)
        detail = self.query_one("#graph-detail", Static)
        detail.update(state.bar_detail(layout))
        if layout is None:
            view.update("[dim]No books with a reading start date in this period[/]")
            return

        width = max(MIN_WIDTH, self.size.width - LABEL_SPACE)
        view.update(render_graph(layout, width, selected=state.graph_selected))

    def action_year(self, step: int) -> None:
        self.app.state.cycle_graph_year(step)
        self.refresh_view()

    def action_all_years(self) -> None:
        self.app.state.show_all_years()
        self.refresh_view()

    def action_select(self, step: int) -> None:
        self.app.state.select_bar(step)
        self.refresh_view()
