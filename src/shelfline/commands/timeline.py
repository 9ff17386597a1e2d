"""Timeline command implementation."""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from shelfline.config import AppConfig
from shelfline.core.timeline import build_timeline
from shelfline.models.book import Book
from shelfline.models.views import TimelineGroup
from shelfline.store.books import BookStore
from shelfline.store.manager import DocumentStore


def format_book_line(book: Book) -> str:
    started = book.reading_start_date.date().isoformat()
    if book.reading_end_date:
        period = f"{started} → {book.reading_end_date.date().isoformat()}"
    else:
        period = f"{started} → [italic]{book.status.value}[/]"
    return f"[bold]{escape(book.title)}[/] [dim]by[/] {escape(book.author)}  [dim]{period}[/]"


def display_timeline(groups: list[TimelineGroup], console: Console) -> None:
    """Display timeline groups, one panel per month."""
    for group in groups:
        console.print()
        console.print(
            Panel(
                "\n".join(format_book_line(book) for book in group.books),
                title=f"{group.month_label} ({len(group.books)})",
                title_align="left",
                border_style="green",
            )
        )
    console.print()


def execute_timeline(config: AppConfig, console: Console) -> None:
    """Execute the timeline command."""
    store = BookStore(DocumentStore(config.data_dir))
    groups = build_timeline(store.list_books(config.user))

    if not groups:
        console.print("[dim]No books with a reading start date yet[/]")
        console.print("[dim]Set one with 'shelfline books update ID --start YYYY-MM-DD'[/]")
        return

    display_timeline(groups, console)
