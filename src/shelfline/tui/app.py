"""Main Textual application for browsing a reading list."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header

from shelfline.config import AppConfig
from shelfline.store.manager import StoreError
from shelfline.tui.state import BrowseState

log = logging.getLogger(__name__)


class BrowseApp(App):
    """Timeline, table and graph views over one user's books."""

    CSS_PATH = "styles.tcss"
    TITLE = "shelfline"

    BINDINGS = [
        Binding("1", "show('timeline')", "Timeline", show=True),
        Binding("2", "show('table')", "Table", show=True),
        Binding("3", "show('graph')", "Graph", show=True),
        Binding("ctrl+r", "reload", "Reload", show=True),
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(self, config: AppConfig | None = None, **kwargs):
        super().__init__(**kwargs)
        self.theme = "monokai"
        self.state = BrowseState(config=config or AppConfig())
        self.sub_title = self.state.config.user

    def compose(self) -> ComposeResult:
        yield Header()
        yield Footer()

    def on_mount(self) -> None:
        """Load the reading list, then open the timeline."""
        from shelfline.tui.screens import GraphScreen, TableScreen, TimelineScreen

        self.install_screen(TimelineScreen(), name="timeline")
        self.install_screen(TableScreen(), name="table")
        self.install_screen(GraphScreen(), name="graph")

        if self._load():
            self.push_screen("timeline")

    def _load(self) -> bool:
        from shelfline.tui.widgets import ErrorDialog

        try:
            self.state.reload()
        except StoreError as e:
            log.error("Cannot load reading list: %s", e)
            self.push_screen(
                ErrorDialog("Cannot load reading list", str(e)),
                self._on_error_choice,
            )
            return False
        return True

    def _on_error_choice(self, choice: str | None) -> None:
        if choice == "r":
            if self._load():
                self.push_screen("timeline")
        else:
            self.exit(1)

    def action_show(self, name: str) -> None:
        if self.screen_stack and self.screen_stack[-1] is not self.get_screen(name):
            if len(self.screen_stack) > 1:
                self.switch_screen(name)
            else:
                self.push_screen(name)

    def action_reload(self) -> None:
        from shelfline.tui.screens.base import ViewScreen

        if self._load():
            if isinstance(self.screen, ViewScreen):
                self.screen.refresh_view()
            self.notify(f"Loaded {len(self.state.books)} book(s)")

    def action_quit(self) -> None:
        self.exit(0)


def run_browser(config: AppConfig) -> None:
    """Run the browser until the user quits."""
    BrowseApp(config).run()
