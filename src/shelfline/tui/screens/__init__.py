"""TUI screens for the browser."""

from shelfline.tui.screens.timeline import TimelineScreen
from shelfline.tui.screens.table import TableScreen
from shelfline.tui.screens.graph import GraphScreen

__all__ = [
    "TimelineScreen",
    "TableScreen",
    "GraphScreen",
]
