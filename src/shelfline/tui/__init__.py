"""Textual TUI for browsing a reading list."""

from shelfline.tui.app import BrowseApp, run_browser
from shelfline.tui.state import BrowseState

__all__ = ["BrowseApp", "BrowseState", "run_browser"]
