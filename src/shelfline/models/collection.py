"""Data models for collections and user documents."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shelfline.core.dates import to_instant
from shelfline.models.book import Book

DEFAULT_ICON = "📚"


class Collection(BaseModel):
    """A named, ordered view over existing books."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    book_ids: list[str] = Field(default_factory=list)
    created_date: datetime

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("created_date", mode="before")
    @classmethod
    def _coerce_created(cls, value: object) -> object:
        return to_instant(value) or value


class UserMetadata(BaseModel):
    """Display metadata stored with each user document."""

    username: str
    icon: str = DEFAULT_ICON


class UserDocument(BaseModel):
    """Everything stored for one user: metadata, books and collections."""

    metadata: UserMetadata
    books: list[Book] = Field(default_factory=list)
    collections: list[Collection] = Field(default_factory=list)

    def find_book(self, book_id: str) -> Book | None:
        return next((b for b in self.books if b.id == book_id), None)

    def find_collection(self, collection_id: str) -> Collection | None:
        return next((c for c in self.collections if c.id == collection_id), None)
