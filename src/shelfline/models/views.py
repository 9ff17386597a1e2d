"""Data models for derived views and import results."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from shelfline.models.book import Book


class TimelineGroup(BaseModel):
    """Books finished (or still open) in one calendar month."""

    month_key: str  # YYYY-MM
    month_label: str
    books: list[Book] = Field(default_factory=list)


class FilterType(str, Enum):
    """Kinds of filter the table and graph views can apply."""

    YEAR = "year"
    DATE_RANGE = "dateRange"
    TITLE = "title"
    AUTHOR = "author"
    STATUS = "status"
    TAG = "tag"


class ActiveFilter(BaseModel):
    """One applied filter, as shown in a filter chip."""

    type: FilterType
    value: str | int
    label: str


class ImportResult(BaseModel):
    """Outcome of a CSV import: rows added plus one message per skipped row."""

    success: int = 0
    errors: list[str] = Field(default_factory=list)


@dataclass
class GraphBar:
    """A single bar in the interval chart."""

    book: Book
    start: datetime
    end: datetime
    row: int
    color: str
    label: str
    duration_days: int


@dataclass
class GraphLayout:
    """Bars placed on a padded time domain, one row per book."""

    domain_start: datetime
    domain_end: datetime
    bars: list[GraphBar] = field(default_factory=list)

    def scale(self, instant: datetime, width: float) -> float:
        """Map an instant onto [0, width]."""
        span = (self.domain_end - self.domain_start).total_seconds()
        offset = (instant - self.domain_start).total_seconds()
        return offset / span * width
