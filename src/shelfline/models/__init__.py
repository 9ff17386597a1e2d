"""Data models."""

from shelfline.models.book import (
    Book,
    BookFields,
    BookOwned,
    BookRating,
    BookStatus,
    NewBook,
    book_key,
)
from shelfline.models.collection import (
    DEFAULT_ICON,
    Collection,
    UserDocument,
    UserMetadata,
)
from shelfline.models.views import (
    ActiveFilter,
    FilterType,
    GraphBar,
    GraphLayout,
    ImportResult,
    TimelineGroup,
)

__all__ = [
    # Book models
    "Book",
    "BookFields",
    "NewBook",
    "BookStatus",
    "BookRating",
    "BookOwned",
    "book_key",
    # Document models
    "Collection",
    "UserDocument",
    "UserMetadata",
    "DEFAULT_ICON",
    # View models
    "TimelineGroup",
    "FilterType",
    "ActiveFilter",
    "ImportResult",
    "GraphBar",
    "GraphLayout",
]
