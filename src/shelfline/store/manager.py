"""File-backed storage: one JSON document per user."""

import logging
import re
from pathlib import Path

from pydantic import ValidationError

from shelfline.models.collection import DEFAULT_ICON, UserDocument, UserMetadata

log = logging.getLogger(__name__)

DEFAULT_USER = "Test"


class StoreError(Exception):
    """A user document exists but cannot be read."""


class AlreadyPresentError(Exception):
    """The item is already part of the target collection."""


def sanitize_username(username: str | None) -> str:
    """Storage key for a user: anything outside [A-Za-z0-9_-] becomes "_"."""
    return re.sub(r"[^A-Za-z0-9_-]", "_", (username or "").strip() or DEFAULT_USER)


class DocumentStore:
    """Reads and rewrites whole user documents.

    Every mutation is read-modify-write of the full document; the last
    writer wins.
    """

    SUFFIX = ".json"

    def __init__(self, data_dir: Path):
        self.data_dir = data_dir

    def _ensure_data_dir(self) -> None:
        """Create data directory if it doesn't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, user: str) -> Path:
        return self.data_dir / f"{sanitize_username(user)}{self.SUFFIX}"

    def default_document(self, user: str) -> UserDocument:
        return UserDocument(
            metadata=UserMetadata(username=sanitize_username(user), icon=DEFAULT_ICON)
        )

    def load(self, user: str) -> UserDocument:
        """Load a user's document, or an empty one if none exists yet.

        Raises:
            StoreError: If the file exists but is not a valid document
        """
        path = self.path_for(user)
        if not path.exists():
            return self.default_document(user)

        try:
            return UserDocument.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            log.error("Unreadable user document %s: %s", path, e)
            raise StoreError(f"Cannot read {path}: {e.error_count()} invalid field(s)") from e

    def save(self, user: str, document: UserDocument) -> None:
        """Write the full document to disk."""
        self._ensure_data_dir()
        path = self.path_for(user)
        path.write_text(
            document.model_dump_json(indent=2, by_alias=True), encoding="utf-8"
        )
        log.debug(
            "Saved %s (%d books, %d collections)",
            path,
            len(document.books),
            len(document.collections),
        )

    def list_users(self) -> list[UserMetadata]:
        """All users with a document on disk, sorted by name."""
        if not self.data_dir.exists():
            return [UserMetadata(username=DEFAULT_USER)]

        users = []
        for path in sorted(self.data_dir.glob(f"*{self.SUFFIX}")):
            try:
                users.append(self.load(path.stem).metadata)
            except StoreError:
                users.append(UserMetadata(username=path.stem))

        return users or [UserMetadata(username=DEFAULT_USER)]

    def create_user(self, username: str, icon: str | None = None) -> UserMetadata:
        """Create (or re-label) a user document.

        Raises:
            ValueError: If the username is blank
        """
        if not username or not username.strip():
            raise ValueError("Username is required")

        key = sanitize_username(username)
        document = self.load(key)
        document.metadata = UserMetadata(username=key, icon=icon or DEFAULT_ICON)
        self.save(key, document)
        log.info("Created user %s", key)
        return document.metadata
