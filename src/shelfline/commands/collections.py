"""Collection commands."""

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from shelfline.commands.books import resolve_book_id
from shelfline.config import AppConfig
from shelfline.models.collection import Collection
from shelfline.store.collections import CollectionStore, books_not_in, resolve_books
from shelfline.store.manager import DocumentStore


def resolve_collection_id(collections: list[Collection], ref: str) -> str:
    """Find a collection by id prefix or exact (case-insensitive) name.

    Raises:
        ValueError: If nothing, or more than one collection, matches
    """
    ref = ref.strip()
    by_name = [c.id for c in collections if c.name.lower() == ref.lower()]
    by_prefix = [c.id for c in collections if ref and c.id.startswith(ref)]
    matches = by_name or by_prefix
    if not matches:
        raise ValueError(f"No collection {ref!r}")
    if len(matches) > 1:
        raise ValueError(f"Collection {ref!r} is ambiguous ({len(matches)} match)")
    return matches[0]


def execute_list(config: AppConfig, console: Console) -> None:
    """List collections with their member books."""
    documents = DocumentStore(config.data_dir)
    document = documents.load(config.user)

    if not document.collections:
        console.print("[dim]No collections yet[/]")
        return

    table = Table(title="Collections", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", width=8, no_wrap=True)
    table.add_column("Name", style="white")
    table.add_column("Books", justify="right", style="green")
    table.add_column("Titles", style="dim")

    for collection in document.collections:
        members = resolve_books(collection, document.books)
        table.add_row(
            collection.id[:8],
            Text(collection.name),
            str(len(members)),
            Text(", ".join(book.title for book in members)),
        )

    console.print()
    console.print(table)
    console.print()


def execute_create(config: AppConfig, name: str, console: Console) -> Collection:
    store = CollectionStore(DocumentStore(config.data_dir))
    collection = store.create(config.user, name)
    console.print(f"[green]Created collection[/] {escape(collection.name)} [dim]({collection.id[:8]})[/]")
    return collection


def execute_rename(config: AppConfig, ref: str, name: str, console: Console) -> None:
    store = CollectionStore(DocumentStore(config.data_dir))
    collection_id = resolve_collection_id(store.list_collections(config.user), ref)
    collection = store.rename(config.user, collection_id, name)
    console.print(f"[green]Renamed collection to[/] {escape(collection.name)}")


def execute_delete(config: AppConfig, ref: str, console: Console) -> None:
    store = CollectionStore(DocumentStore(config.data_dir))
    collection_id = resolve_collection_id(store.list_collections(config.user), ref)
    store.delete(config.user, collection_id)
    console.print("[green]Deleted collection[/]")


def execute_add_book(config: AppConfig, ref: str, book_id: str, console: Console) -> None:
    """Add a book to a collection.

    Raises:
        AlreadyPresentError: If the book is already a member
    """
    documents = DocumentStore(config.data_dir)
    document = documents.load(config.user)
    store = CollectionStore(documents)

    collection_id = resolve_collection_id(document.collections, ref)
    full_id = resolve_book_id(document.books, book_id)
    collection = store.add_book(config.user, collection_id, full_id)
    console.print(f"[green]Added to[/] {escape(collection.name)}")


def execute_remove_book(config: AppConfig, ref: str, book_id: str, console: Console) -> None:
    documents = DocumentStore(config.data_dir)
    document = documents.load(config.user)
    store = CollectionStore(documents)

    collection_id = resolve_collection_id(document.collections, ref)
    collection = store.get(config.user, collection_id)
    # Members may point at deleted books
    prefix = book_id.strip()
    member_ids = [i for i in collection.book_ids if prefix and i.startswith(prefix)]
    if len(member_ids) == 1:
        full_id = member_ids[0]
    else:
        full_id = resolve_book_id(document.books, book_id)
    store.remove_book(config.user, collection_id, full_id)
    console.print(f"[green]Removed from[/] {escape(collection.name)}")


def execute_available(config: AppConfig, ref: str, search: str, console: Console) -> None:
    """List books not yet in a collection, optionally narrowed by title/author."""
    documents = DocumentStore(config.data_dir)
    document = documents.load(config.user)

    collection_id = resolve_collection_id(document.collections, ref)
    collection = next(c for c in document.collections if c.id == collection_id)
    candidates = books_not_in(collection, document.books, search)

    if not candidates:
        console.print(f"[dim]No books to add to {escape(collection.name)}[/]")
        return

    table = Table(title=f"Not in {escape(collection.name)}", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim", width=8, no_wrap=True)
    table.add_column("Title", style="white")
    table.add_column("Author")
    for book in candidates:
        table.add_row(book.id[:8], Text(book.title), Text(book.author))

    console.print()
    console.print(table)
    console.print()
