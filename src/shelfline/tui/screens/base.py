"""Shared behaviour for the browser's view screens."""

from __future__ import annotations

from textual.screen import Screen


class ViewScreen(Screen):
    """A screen that redraws itself from ``app.state``."""

    def on_screen_resume(self) -> None:
        self.refresh_view()

    def refresh_view(self) -> None:
        """Redraw from the current state."""
