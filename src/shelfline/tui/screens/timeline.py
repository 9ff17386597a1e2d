"""Timeline screen: books grouped by the month they were finished."""

from __future__ import annotations

from rich.console import Group
from rich.panel import Panel
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Static

from shelfline.commands.timeline import format_book_line
from shelfline.tui.screens.base import ViewScreen


class TimelineScreen(ViewScreen):
    """Month panels, most recent first."""

    def compose(self) -> ComposeResult:
        yield Header()
        with VerticalScroll(id="main"):
            yield Static(id="timeline")
        yield Footer()

    def refresh_view(self) -> None:
        groups = self.app.state.timeline()
        view = self.query_one("#timeline", Static)

        if not groups:
            view.update("[dim]No books with a reading start date yet[/]")
            return

        view.update(
            Group(
                *(
                    Panel(
                        "\n".join(format_book_line(book) for book in group.books),
                        title=f"{group.month_label} ({len(group.books)})",
                        title_align="left",
                        border_style="green",
                    )
                    for group in groups
                )
            )
        )
