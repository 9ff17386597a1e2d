"""CSV import and export command implementations."""

import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from shelfline.config import AppConfig
from shelfline.core.csv_codec import EXPORT_FILENAME, TEMPLATE_FILENAME, build_csv
from shelfline.core.importer import CsvImporter
from shelfline.models.book import NewBook
from shelfline.models.views import ImportResult
from shelfline.store.books import BookStore
from shelfline.store.manager import DocumentStore


def get_default_export_path(template: bool) -> Path:
    return Path(TEMPLATE_FILENAME if template else EXPORT_FILENAME)


def execute_export(
    config: AppConfig,
    output_file: Path | None,
    template: bool,
    console: Console,
    quiet: bool = False,
) -> Path:
    """Write the user's books (or just the header row) to a CSV file."""
    store = BookStore(DocumentStore(config.data_dir))
    books = [] if template else store.list_books(config.user)

    output_file = output_file or get_default_export_path(template)
    output_file.write_text(build_csv(books, include_data=not template), encoding="utf-8")

    if not quiet:
        if template:
            console.print(f"[green]Wrote CSV template to[/] {escape(str(output_file))}")
        else:
            console.print(f"[green]Exported {len(books)} book(s) to[/] {escape(str(output_file))}")
    return output_file


def display_import_result(result: ImportResult, console: Console) -> None:
    """Summarise an import: count added plus one line per skipped row."""
    lines = [f"[dim]Added:[/] [green]{result.success}[/] book(s)"]
    if result.errors:
        lines.append(f"[dim]Skipped:[/] [yellow]{len(result.errors)}[/] row(s)")
        lines.append("")
        lines.extend(f"[yellow]⚠ {escape(error)}[/]" for error in result.errors)

    console.print()
    console.print(
        Panel(
            "\n".join(lines),
            title="Import Complete",
            border_style="green" if not result.errors else "yellow",
        )
    )
    console.print()


def execute_import(
    config: AppConfig,
    csv_path: Path,
    console: Console,
    quiet: bool = False,
) -> ImportResult:
    """Import a CSV file into the user's reading list.

    Raises:
        CsvImportError: If the file has no data rows or lacks required headers
    """
    store = BookStore(DocumentStore(config.data_dir))
    text = csv_path.read_text(encoding="utf-8")

    def create(book: NewBook):
        return store.create(config.user, book)

    importer = CsvImporter(create, existing=store.list_books(config.user))

    if quiet:
        result = asyncio.run(importer.run(text))
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            progress.add_task(f"Importing {escape(csv_path.name)}...", total=None)
            result = asyncio.run(importer.run(text))
        display_import_result(result, console)

    return result
