"""Collection store: named, ordered views over a user's books."""

import logging

from shelfline.core.dates import Clock, utc_now
from shelfline.models.book import Book
from shelfline.models.collection import Collection
from shelfline.store.books import new_id
from shelfline.store.manager import AlreadyPresentError, DocumentStore

log = logging.getLogger(__name__)


class CollectionStore:
    """CRUD over collections plus adding and removing member books.

    "Not found" is reported as a None return.
    """

    def __init__(self, documents: DocumentStore, clock: Clock = utc_now):
        self.documents = documents
        self.clock = clock

    def list_collections(self, user: str) -> list[Collection]:
        return self.documents.load(user).collections

    def get(self, user: str, collection_id: str) -> Collection | None:
        return self.documents.load(user).find_collection(collection_id)

    def create(self, user: str, name: str) -> Collection:
        document = self.documents.load(user)
        collection = Collection(id=new_id(), name=name, created_date=self.clock())
        document.collections.append(collection)
        self.documents.save(user, document)
        log.info("Created collection %s (%s)", collection.id, collection.name)
        return collection

    def rename(self, user: str, collection_id: str, name: str) -> Collection | None:
        document = self.documents.load(user)
        collection = document.find_collection(collection_id)
        if collection is None:
            return None
        if not name.strip():
            raise ValueError("Collection name is required")
        collection.name = name.strip()
        self.documents.save(user, document)
        return collection

    def delete(self, user: str, collection_id: str) -> bool:
        document = self.documents.load(user)
        remaining = [c for c in document.collections if c.id != collection_id]
        if len(remaining) == len(document.collections):
            return False
        document.collections = remaining
        self.documents.save(user, document)
        log.info("Deleted collection %s", collection_id)
        return True

    def add_book(self, user: str, collection_id: str, book_id: str) -> Collection | None:
        """Append a book to a collection.

        Raises:
            AlreadyPresentError: If the book is already in the collection
        """
        document = self.documents.load(user)
        collection = document.find_collection(collection_id)
        if collection is None:
            return None
        if book_id in collection.book_ids:
            raise AlreadyPresentError(
                f"Book {book_id} is already in collection '{collection.name}'"
            )
        collection.book_ids.append(book_id)
        self.documents.save(user, document)
        return collection

    def remove_book(self, user: str, collection_id: str, book_id: str) -> Collection | None:
        """Remove a book from a collection; absent ids are a no-op."""
        document = self.documents.load(user)
        collection = document.find_collection(collection_id)
        if collection is None:
            return None
        if book_id in collection.book_ids:
            collection.book_ids.remove(book_id)
            self.documents.save(user, document)
        return collection


def resolve_books(collection: Collection, books: list[Book]) -> list[Book]:
    """Member books in collection order, skipping ids that no longer exist."""
    by_id = {book.id: book for book in books}
    return [by_id[book_id] for book_id in collection.book_ids if book_id in by_id]


def books_not_in(collection: Collection, books: list[Book], search: str = "") -> list[Book]:
    """Books that could be added, optionally narrowed by title/author text."""
    term = search.strip().lower()
    candidates = [b for b in books if b.id not in collection.book_ids]
    if not term:
        return candidates
    return [
        b for b in candidates if term in b.title.lower() or term in b.author.lower()
    ]
