"""Record store for books inside user documents."""

import logging
import uuid
from typing import Any

from shelfline.core.dates import Clock, utc_now
from shelfline.models.book import Book, NewBook
from shelfline.store.manager import DocumentStore

log = logging.getLogger(__name__)

# Assigned by the store, never changed by an update
IMMUTABLE_FIELDS = {"id", "added_date"}


def new_id() -> str:
    return uuid.uuid4().hex


def _field_names(updates: dict[str, Any]) -> dict[str, Any]:
    """Accept both python names and camelCase aliases for book fields."""
    by_alias = {
        (info.alias or name): name for name, info in Book.model_fields.items()
    }
    normalized = {}
    for key, value in updates.items():
        name = by_alias.get(key, key)
        if name in Book.model_fields and name not in IMMUTABLE_FIELDS:
            normalized[name] = value
    return normalized


class BookStore:
    """CRUD over the books of one user document at a time."""

    def __init__(self, documents: DocumentStore, clock: Clock = utc_now):
        self.documents = documents
        self.clock = clock

    def list_books(self, user: str) -> list[Book]:
        return self.documents.load(user).books

    def get(self, user: str, book_id: str) -> Book | None:
        return self.documents.load(user).find_book(book_id)

    def create(self, user: str, book: NewBook) -> Book:
        """Store a new book, assigning its id and added date."""
        document = self.documents.load(user)
        stored = Book(
            **book.model_dump(),
            id=new_id(),
            added_date=self.clock(),
        )
        document.books.append(stored)
        self.documents.save(user, document)
        log.info("Added book %s (%s)", stored.id, stored.title)
        return stored

    def update(self, user: str, book_id: str, updates: dict[str, Any]) -> Book | None:
        """Apply a partial update; returns None if the book does not exist.

        Raises:
            pydantic.ValidationError: If the merged record is invalid
        """
        document = self.documents.load(user)
        for index, book in enumerate(document.books):
            if book.id != book_id:
                continue
            merged = book.model_dump()
            merged.update(_field_names(updates))
            updated = Book.model_validate(merged)
            document.books[index] = updated
            self.documents.save(user, document)
            log.info("Updated book %s", book_id)
            return updated
        return None

    def delete(self, user: str, book_id: str) -> bool:
        """Remove a book. Collections keep the dangling id."""
        document = self.documents.load(user)
        remaining = [b for b in document.books if b.id != book_id]
        if len(remaining) == len(document.books):
            return False
        document.books = remaining
        self.documents.save(user, document)
        log.info("Deleted book %s", book_id)
        return True
