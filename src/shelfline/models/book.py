"""Data models for books in a reading list."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shelfline.core.dates import to_instant


class BookStatus(str, Enum):
    """Reading status of a book."""

    TO_READ = "to read"
    READING = "reading"
    FINISHED = "finished"
    ON_HOLD = "on hold"
    ABANDONED = "abandoned"


class BookRating(str, Enum):
    """Rating a reader can give to a book."""

    NONE = "none"
    POSITIVE = "positive"  # Thumbs up
    NEGATIVE = "negative"  # Thumbs down
    FAVOURITE = "favourite"  # Heart


class BookOwned(str, Enum):
    """Whether and how the reader owns a copy."""

    NOT_OWNED = "not owned"
    PHYSICAL = "physical"
    DIGITAL = "digital"
    LOANED = "loaned"


class BookFields(BaseModel):
    """User-editable fields shared by new and stored books."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

    title: str
    author: str
    status: BookStatus = BookStatus.TO_READ
    published_date: datetime | None = None
    reading_start_date: datetime | None = None
    reading_end_date: datetime | None = None
    notes: str | None = None
    tags: list[str] = Field(default_factory=list)
    image_url: str | None = None
    rating: BookRating = BookRating.NONE
    owned: BookOwned | None = None

    @field_validator("title", "author")
    @classmethod
    def _require_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator(
        "published_date", "reading_start_date", "reading_end_date", mode="before"
    )
    @classmethod
    def _coerce_date(cls, value: object) -> datetime | None:
        # Unreadable stored dates degrade to "no date"
        return to_instant(value)

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, value: object) -> object:
        return value or BookStatus.TO_READ

    @field_validator("rating", mode="before")
    @classmethod
    def _default_rating(cls, value: object) -> object:
        return value or BookRating.NONE

    @field_validator("tags", mode="before")
    @classmethod
    def _clean_tags(cls, value: object) -> list[str]:
        if not value:
            return []
        tags: list[str] = []
        for tag in value:
            tag = str(tag).strip()
            if tag and tag not in tags:
                tags.append(tag)
        return tags

    @field_validator("notes", "image_url", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class NewBook(BookFields):
    """A book as submitted for creation (no id or added date yet)."""


class Book(BookFields):
    """A stored book record."""

    id: str
    added_date: datetime

    @field_validator("added_date", mode="before")
    @classmethod
    def _coerce_added(cls, value: object) -> object:
        return to_instant(value) or value


def book_key(title: str | None, author: str | None) -> str:
    """Identity used for duplicate detection: lowercased, trimmed title|author."""
    return (title or "").strip().lower() + "|" + (author or "").strip().lower()
