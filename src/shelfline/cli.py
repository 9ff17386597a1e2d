"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from shelfline.config import DATA_DIR_ENV, USER_ENV, AppConfig
from shelfline.core.status import normalize_status
from shelfline.core.table import SortDirection, SortField
from shelfline.log import setup_logging
from shelfline.models.book import BookOwned, BookRating, BookStatus
from shelfline.store.manager import DEFAULT_USER, DocumentStore

log = logging.getLogger(__name__)

app = typer.Typer(
    name="shelfline",
    help="Track what you read: timeline, table and graph views with CSV import/export.",
    add_completion=False,
)

console = Console()

# Subcommand groups
users_app = typer.Typer(help="User management commands")
books_app = typer.Typer(help="Book record commands")
collections_app = typer.Typer(help="Collection commands")
app.add_typer(users_app, name="users")
app.add_typer(books_app, name="books")
app.add_typer(collections_app, name="collections")


def get_config(ctx: typer.Context) -> AppConfig:
    return ctx.find_root().obj


def parse_statuses(values: Optional[list[str]]) -> list[BookStatus]:
    statuses = []
    for value in values or []:
        status = normalize_status(value)
        if status is None:
            raise ValueError(f"Unknown status: {value}")
        statuses.append(status)
    return statuses


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    data_dir: Annotated[
        Path,
        typer.Option(
            "--data-dir",
            envvar=DATA_DIR_ENV,
            help="Directory holding one JSON document per user",
        ),
    ] = Path("data"),
    user: Annotated[
        str,
        typer.Option(
            "--user",
            "-u",
            envvar=USER_ENV,
            help="Whose reading list to use",
        ),
    ] = DEFAULT_USER,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug logging",
        ),
    ] = False,
) -> None:
    """Track what you read.

    Run without arguments to open the interactive browser.
    """
    setup_logging(verbose)
    ctx.obj = AppConfig(data_dir=data_dir, user=user, verbose=verbose)
    log.debug("Using data dir %s as %s", data_dir, user)

    if ctx.invoked_subcommand is None:
        from shelfline.tui.app import run_browser

        run_browser(ctx.obj)


# ============================================================================
# Users
# ============================================================================


@users_app.command("list")
def users_list(ctx: typer.Context) -> None:
    """List users that have a reading list on disk."""
    config = get_config(ctx)
    try:
        users = DocumentStore(config.data_dir).list_users()
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)

    table = Table(title="Users", show_header=True, header_style="bold cyan")
    table.add_column("", width=2)
    table.add_column("Username", style="white")
    for user in users:
        marker = "*" if user.username == config.user else ""
        table.add_row(Text(user.icon), Text(f"{user.username} {marker}".strip()))
    console.print(table)


@users_app.command("create")
def users_create(
    ctx: typer.Context,
    username: Annotated[str, typer.Argument(help="Name of the new user")],
    icon: Annotated[
        Optional[str],
        typer.Option("--icon", help="Emoji shown next to the user"),
    ] = None,
) -> None:
    """Create a user (or change an existing user's icon)."""
    config = get_config(ctx)
    try:
        metadata = DocumentStore(config.data_dir).create_user(username, icon)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)
    console.print(f"[green]Created user[/] {escape(metadata.icon)} {escape(metadata.username)}")


# ============================================================================
# Books
# ============================================================================


@books_app.command("list")
def books_list(
    ctx: typer.Context,
    sort: Annotated[
        Optional[SortField],
        typer.Option("--sort", "-s", help="Column to sort by (default: author)"),
    ] = None,
    order: Annotated[
        Optional[SortDirection],
        typer.Option("--order", help="Sort direction"),
    ] = None,
    title: Annotated[
        Optional[str],
        typer.Option("--title", help="Only titles containing this text"),
    ] = None,
    author: Annotated[
        Optional[str],
        typer.Option("--author", help="Only authors containing this text"),
    ] = None,
    status: Annotated[
        Optional[list[str]],
        typer.Option("--status", help="Only these statuses (can be used multiple times)"),
    ] = None,
    tag: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="Only books with all these tags (repeatable)"),
    ] = None,
    year: Annotated[
        Optional[int],
        typer.Option("--year", "-y", help="Only books read during this year"),
    ] = None,
    date_from: Annotated[
        Optional[str],
        typer.Option("--from", help="Only books read on or after this date"),
    ] = None,
    date_to: Annotated[
        Optional[str],
        typer.Option("--to", help="Only books read on or before this date"),
    ] = None,
) -> None:
    """Show books as a filterable, sortable table."""
    from shelfline.commands.table import build_filter_state, build_sort, execute_table

    try:
        filters = build_filter_state(
            title=title,
            author=author,
            statuses=parse_statuses(status),
            tags=tag,
            year=year,
            date_from=date_from,
            date_to=date_to,
        )
        execute_table(get_config(ctx), console, filters, build_sort(sort, order))
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@books_app.command("show")
def books_show(
    ctx: typer.Context,
    book_id: Annotated[str, typer.Argument(help="Book id (a unique prefix is enough)")],
) -> None:
    """Show every field of one book."""
    from shelfline.commands.books import execute_show

    try:
        execute_show(get_config(ctx), book_id, console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@books_app.command("add")
def books_add(
    ctx: typer.Context,
    title: Annotated[Optional[str], typer.Option("--title", help="Book title")] = None,
    author: Annotated[Optional[str], typer.Option("--author", help="Book author")] = None,
    status: Annotated[
        Optional[str],
        typer.Option("--status", help="to read, reading, finished, on hold or abandoned"),
    ] = None,
    published: Annotated[
        Optional[str], typer.Option("--published", help="Publication date")
    ] = None,
    start: Annotated[Optional[str], typer.Option("--start", help="Date started")] = None,
    end: Annotated[Optional[str], typer.Option("--end", help="Date finished")] = None,
    tags: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="Tag (repeatable, or semicolon-separated)"),
    ] = None,
    notes: Annotated[Optional[str], typer.Option("--notes", help="Free-form notes")] = None,
    rating: Annotated[Optional[BookRating], typer.Option("--rating")] = None,
    owned: Annotated[Optional[BookOwned], typer.Option("--owned")] = None,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", "-i", help="Prompt for the book's fields"),
    ] = False,
) -> None:
    """Add a book to the reading list."""
    from shelfline.commands.books import build_updates, execute_add
    from shelfline.models.book import NewBook

    try:
        book = None
        if not interactive:
            fields = build_updates(
                title=title,
                author=author,
                status=status,
                published=published,
                start=start,
                end=end,
                tags=tags,
                notes=notes,
                rating=rating,
                owned=owned,
            )
            if "title" in fields and "author" in fields:
                book = NewBook(**fields)
        execute_add(get_config(ctx), book, interactive, console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@books_app.command("update")
def books_update(
    ctx: typer.Context,
    book_id: Annotated[str, typer.Argument(help="Book id (a unique prefix is enough)")],
    title: Annotated[Optional[str], typer.Option("--title")] = None,
    author: Annotated[Optional[str], typer.Option("--author")] = None,
    status: Annotated[Optional[str], typer.Option("--status")] = None,
    published: Annotated[
        Optional[str], typer.Option("--published", help="Publication date ('' clears)")
    ] = None,
    start: Annotated[
        Optional[str], typer.Option("--start", help="Date started ('' clears)")
    ] = None,
    end: Annotated[
        Optional[str], typer.Option("--end", help="Date finished ('' clears)")
    ] = None,
    tags: Annotated[
        Optional[list[str]],
        typer.Option("--tag", "-t", help="Replace tags (repeatable)"),
    ] = None,
    notes: Annotated[Optional[str], typer.Option("--notes")] = None,
    rating: Annotated[Optional[BookRating], typer.Option("--rating")] = None,
    owned: Annotated[Optional[BookOwned], typer.Option("--owned")] = None,
) -> None:
    """Change fields of an existing book."""
    from shelfline.commands.books import build_updates, execute_update

    try:
        updates = build_updates(
            title=title,
            author=author,
            status=status,
            published=published,
            start=start,
            end=end,
            tags=tags,
            notes=notes,
            rating=rating,
            owned=owned,
        )
        execute_update(get_config(ctx), book_id, updates, console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@books_app.command("remove")
def books_remove(
    ctx: typer.Context,
    book_id: Annotated[str, typer.Argument(help="Book id (a unique prefix is enough)")],
) -> None:
    """Delete a book."""
    from shelfline.commands.books import execute_remove

    try:
        execute_remove(get_config(ctx), book_id, console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


# ============================================================================
# Views
# ============================================================================


@app.command()
def timeline(ctx: typer.Context) -> None:
    """Show books grouped by the month they were finished."""
    from shelfline.commands.timeline import execute_timeline

    try:
        execute_timeline(get_config(ctx), console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def graph(
    ctx: typer.Context,
    year: Annotated[
        Optional[int],
        typer.Option("--year", "-y", help="Year to show (default: current year)"),
    ] = None,
    date_from: Annotated[
        Optional[str], typer.Option("--from", help="Show books read on or after this date")
    ] = None,
    date_to: Annotated[
        Optional[str], typer.Option("--to", help="Show books read on or before this date")
    ] = None,
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Show every book with a start date"),
    ] = False,
    width: Annotated[
        int,
        typer.Option("--width", "-w", help="Chart width in characters", min=20),
    ] = 60,
) -> None:
    """Draw reading periods as horizontal bars over time."""
    from shelfline.commands.graph import execute_graph
    from shelfline.commands.table import build_filter_state

    try:
        filters = build_filter_state(year=year, date_from=date_from, date_to=date_to)
        execute_graph(get_config(ctx), console, filters, show_all=show_all, width=width)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def browse(ctx: typer.Context) -> None:
    """Open the interactive browser (timeline, table and graph screens)."""
    from shelfline.tui.app import run_browser

    run_browser(get_config(ctx))


# ============================================================================
# CSV
# ============================================================================


@app.command("import")
def import_csv(
    ctx: typer.Context,
    csv_path: Annotated[
        Path,
        typer.Argument(
            help="CSV file to import",
            exists=True,
            file_okay=True,
            dir_okay=False,
            resolve_path=True,
        ),
    ],
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
) -> None:
    """Import books from a CSV file, skipping duplicates and invalid rows."""
    from shelfline.commands.csv_io import execute_import

    try:
        execute_import(get_config(ctx), csv_path, console, quiet=quiet)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def export(
    ctx: typer.Context,
    output: Annotated[
        Optional[Path],
        typer.Argument(help="Output file (default: reading-list.csv)"),
    ] = None,
    template: Annotated[
        bool,
        typer.Option("--template", help="Write only the header row"),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress progress output"),
    ] = False,
) -> None:
    """Export the reading list (or an empty template) as CSV."""
    from shelfline.commands.csv_io import execute_export

    try:
        execute_export(get_config(ctx), output, template, console, quiet=quiet)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


# ============================================================================
# Collections
# ============================================================================


@collections_app.command("list")
def collections_list(ctx: typer.Context) -> None:
    """List collections and the books in them."""
    from shelfline.commands.collections import execute_list

    try:
        execute_list(get_config(ctx), console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@collections_app.command("create")
def collections_create(
    ctx: typer.Context,
    name: Annotated[str, typer.Argument(help="Collection name")],
) -> None:
    """Create an empty collection."""
    from shelfline.commands.collections import execute_create

    try:
        execute_create(get_config(ctx), name, console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@collections_app.command("rename")
def collections_rename(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name or id")],
    name: Annotated[str, typer.Argument(help="New name")],
) -> None:
    """Rename a collection."""
    from shelfline.commands.collections import execute_rename

    try:
        execute_rename(get_config(ctx), collection, name, console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@collections_app.command("delete")
def collections_delete(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name or id")],
) -> None:
    """Delete a collection (its books are kept)."""
    from shelfline.commands.collections import execute_delete

    try:
        execute_delete(get_config(ctx), collection, console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@collections_app.command("add")
def collections_add(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name or id")],
    book_id: Annotated[str, typer.Argument(help="Book id (a unique prefix is enough)")],
) -> None:
    """Add a book to a collection."""
    from shelfline.commands.collections import execute_add_book

    try:
        execute_add_book(get_config(ctx), collection, book_id, console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@collections_app.command("remove")
def collections_remove(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name or id")],
    book_id: Annotated[str, typer.Argument(help="Book id (a unique prefix is enough)")],
) -> None:
    """Remove a book from a collection."""
    from shelfline.commands.collections import execute_remove_book

    try:
        execute_remove_book(get_config(ctx), collection, book_id, console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@collections_app.command("available")
def collections_available(
    ctx: typer.Context,
    collection: Annotated[str, typer.Argument(help="Collection name or id")],
    search: Annotated[str, typer.Argument(help="Only books whose title or author contains this")] = "",
) -> None:
    """List books that are not yet in a collection."""
    from shelfline.commands.collections import execute_available

    try:
        execute_available(get_config(ctx), collection, search, console)
    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
