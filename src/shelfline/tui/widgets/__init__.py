"""Custom widgets for the browser TUI."""

from shelfline.tui.widgets.book_table import BookTable
from shelfline.tui.widgets.error_dialog import ErrorDialog

__all__ = ["BookTable", "ErrorDialog"]
