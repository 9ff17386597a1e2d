"""Map free-text status tokens and tag lists onto the book model."""

from types import MappingProxyType

from shelfline.models.book import BookStatus

# Normalized lowercase text -> canonical status
STATUS_SYNONYMS = MappingProxyType(
    {
        "to read": BookStatus.TO_READ,
        "to-read": BookStatus.TO_READ,
        "toread": BookStatus.TO_READ,
        "want to read": BookStatus.TO_READ,
        "reading": BookStatus.READING,
        "currently reading": BookStatus.READING,
        "finished": BookStatus.FINISHED,
        "read": BookStatus.FINISHED,
        "completed": BookStatus.FINISHED,
        "done": BookStatus.FINISHED,
        "on hold": BookStatus.ON_HOLD,
        "on-hold": BookStatus.ON_HOLD,
        "onhold": BookStatus.ON_HOLD,
        "paused": BookStatus.ON_HOLD,
        "abandoned": BookStatus.ABANDONED,
        "dropped": BookStatus.ABANDONED,
        "did not finish": BookStatus.ABANDONED,
        "dnf": BookStatus.ABANDONED,
    }
)

TAG_SEPARATOR = ";"


def normalize_status(text: str | None) -> BookStatus | None:
    """Return the canonical status for ``text``, or None if unrecognized."""
    if not text:
        return None

    normalized = text.strip().lower()
    if not normalized:
        return None

    for status in BookStatus:
        if status.value == normalized:
            return status

    return STATUS_SYNONYMS.get(normalized)


def parse_tags(text: str | None) -> list[str]:
    """Split a ``;``-separated tag cell, trimming and dropping empties."""
    if not text:
        return []
    tags: list[str] = []
    for part in text.split(TAG_SEPARATOR):
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def join_tags(tags: list[str]) -> str:
    return TAG_SEPARATOR.join(tags)
