"""Book record commands: add, update, remove and show."""

from typing import Any

import questionary
from questionary import Style
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from shelfline.config import AppConfig
from shelfline.core.status import normalize_status, parse_tags
from shelfline.commands.table import RATING_LABELS, format_date, parse_date_option
from shelfline.models.book import Book, BookOwned, BookRating, BookStatus, NewBook
from shelfline.store.books import BookStore
from shelfline.store.manager import DocumentStore

# Custom questionary style
PROMPT_STYLE = Style([
    ("qmark", "fg:cyan bold"),
    ("question", "bold"),
    ("answer", "fg:cyan bold"),
    ("pointer", "fg:cyan bold"),
    ("highlighted", "fg:cyan bold"),
    ("selected", "fg:green"),
    ("separator", "fg:gray"),
    ("instruction", "fg:gray"),
])


def resolve_book_id(books: list[Book], prefix: str) -> str:
    """Expand an id prefix (as shown in tables) to a full book id.

    Raises:
        ValueError: If no book, or more than one, matches
    """
    prefix = prefix.strip()
    matches = [book.id for book in books if book.id.startswith(prefix)] if prefix else []
    if not matches:
        raise ValueError(f"No book with id {prefix!r}")
    if len(matches) > 1 and prefix not in matches:
        raise ValueError(f"Id {prefix!r} is ambiguous ({len(matches)} books match)")
    return prefix if prefix in matches else matches[0]


def build_updates(
    title: str | None = None,
    author: str | None = None,
    status: str | None = None,
    published: str | None = None,
    start: str | None = None,
    end: str | None = None,
    tags: list[str] | None = None,
    notes: str | None = None,
    rating: BookRating | None = None,
    owned: BookOwned | None = None,
) -> dict[str, Any]:
    """Collect only the fields that were given on the command line.

    An empty string for a date clears it.

    Raises:
        ValueError: If a status or date cannot be understood
    """
    updates: dict[str, Any] = {}
    if title is not None:
        updates["title"] = title
    if author is not None:
        updates["author"] = author
    if status is not None:
        normalized = normalize_status(status)
        if normalized is None:
            raise ValueError(f"Unknown status: {status}")
        updates["status"] = normalized
    for name, value, option in (
        ("published_date", published, "--published"),
        ("reading_start_date", start, "--start"),
        ("reading_end_date", end, "--end"),
    ):
        if value is not None:
            updates[name] = parse_date_option(value, option)
    if tags is not None:
        updates["tags"] = [t for raw in tags for t in parse_tags(raw)]
    if notes is not None:
        updates["notes"] = notes
    if rating is not None:
        updates["rating"] = rating
    if owned is not None:
        updates["owned"] = owned
    return updates


def prompt_new_book() -> NewBook | None:
    """Ask for a new book's fields; None if the user cancels."""
    title = questionary.text("Title:", style=PROMPT_STYLE).ask()
    if not title:
        return None
    author = questionary.text("Author:", style=PROMPT_STYLE).ask()
    if not author:
        return None

    status = questionary.select(
        "Status:",
        choices=[questionary.Choice(title=s.value, value=s) for s in BookStatus],
        style=PROMPT_STYLE,
    ).ask()
    if status is None:
        return None

    start = end = None
    if status != BookStatus.TO_READ:
        start = questionary.text(
            "Started (YYYY-MM-DD, leave empty if unknown):",
            style=PROMPT_STYLE,
        ).ask()
    if status == BookStatus.FINISHED:
        end = questionary.text(
            "Finished (YYYY-MM-DD, leave empty if unknown):",
            style=PROMPT_STYLE,
        ).ask()

    tags = questionary.text("Tags (semicolon-separated):", style=PROMPT_STYLE).ask()

    return NewBook(
        title=title,
        author=author,
        status=status,
        reading_start_date=parse_date_option(start, "start"),
        reading_end_date=parse_date_option(end, "end"),
        tags=parse_tags(tags),
    )


def display_book(book: Book, console: Console) -> None:
    lines = [
        f"[bold]{escape(book.title)}[/]",
        f"[dim]by[/] {escape(book.author)}",
        "",
        f"[dim]Id:[/] {book.id}",
        f"[dim]Status:[/] {book.status.value}",
        f"[dim]Added:[/] {format_date(book.added_date)}",
        f"[dim]Published:[/] {format_date(book.published_date)}",
        f"[dim]Started:[/] {format_date(book.reading_start_date)}",
        f"[dim]Finished:[/] {format_date(book.reading_end_date)}",
    ]
    if book.rating in RATING_LABELS:
        lines.append(f"[dim]Rating:[/] {RATING_LABELS[book.rating]}")
    if book.owned:
        lines.append(f"[dim]Owned:[/] {book.owned.value}")
    if book.tags:
        lines.append(f"[dim]Tags:[/] {escape(', '.join(book.tags))}")
    if book.notes:
        lines.extend(["", escape(book.notes)])

    console.print()
    console.print(Panel("\n".join(lines), title="Book", border_style="green"))
    console.print()


def execute_add(
    config: AppConfig,
    book: NewBook | None,
    interactive: bool,
    console: Console,
) -> Book | None:
    """Add a book given on the command line, or prompt for one."""
    if interactive:
        book = prompt_new_book()
        if book is None:
            console.print("[dim]Cancelled[/]")
            return None
    if book is None:
        raise ValueError("Title and author are required (or use --interactive)")

    store = BookStore(DocumentStore(config.data_dir))
    stored = store.create(config.user, book)
    console.print(f"[green]Added[/] {escape(stored.title)} [dim]({stored.id[:8]})[/]")
    return stored


def execute_update(
    config: AppConfig,
    book_id: str,
    updates: dict[str, Any],
    console: Console,
) -> Book:
    """Apply field updates to one book."""
    store = BookStore(DocumentStore(config.data_dir))
    full_id = resolve_book_id(store.list_books(config.user), book_id)
    if not updates:
        raise ValueError("Nothing to update")

    updated = store.update(config.user, full_id, updates)
    if updated is None:
        raise ValueError(f"No book with id {book_id!r}")
    console.print(f"[green]Updated[/] {escape(updated.title)}")
    return updated


def execute_remove(config: AppConfig, book_id: str, console: Console) -> None:
    store = BookStore(DocumentStore(config.data_dir))
    full_id = resolve_book_id(store.list_books(config.user), book_id)
    store.delete(config.user, full_id)
    console.print(f"[green]Removed[/] {full_id[:8]}")


def execute_show(config: AppConfig, book_id: str, console: Console) -> None:
    store = BookStore(DocumentStore(config.data_dir))
    books = store.list_books(config.user)
    full_id = resolve_book_id(books, book_id)
    display_book(store.get(config.user, full_id), console)
