"""Convert books to and from CSV text.

Export writes a fixed header row followed by one row per book. Import is
tolerant: headers match case-insensitively, unknown columns are ignored,
dates are recognised in several formats and status synonyms are mapped
onto the closed status set. A bad row never aborts the rows after it;
only a structural problem (no data rows, missing Title/Author header)
fails the whole import.
"""

from dataclasses import dataclass
from typing import Iterable

from shelfline.core.dates import format_csv_date, parse_csv_date
from shelfline.core.status import join_tags, normalize_status, parse_tags
from shelfline.models.book import Book, BookStatus, NewBook

CSV_HEADERS = [
    "Title",
    "Author",
    "Status",
    "Published Date",
    "Reading Start Date",
    "Reading End Date",
    "Notes",
    "Tags",
]
REQUIRED_HEADERS = ["Title", "Author"]

EXPORT_FILENAME = "reading-list.csv"
TEMPLATE_FILENAME = "reading-list-template.csv"


class CsvImportError(Exception):
    """The CSV text cannot be imported at all."""


class CsvRowError(ValueError):
    """A single data row is invalid."""


@dataclass
class CsvRow:
    """A data row converted to a candidate book, or the reason it was not."""

    row_number: int
    book: NewBook | None = None
    error: str | None = None


# ============================================================================
# Export
# ============================================================================


def escape_csv(value: str | None) -> str:
    """Quote a value if it contains a comma, quote or line break."""
    if not value:
        return ""
    if any(ch in value for ch in (",", '"', "\n", "\r")):
        return '"' + value.replace('"', '""') + '"'
    return value


def build_csv_row(book: Book | NewBook) -> str:
    """Build a single CSV row from a book."""
    row = [
        escape_csv(book.title),
        escape_csv(book.author),
        escape_csv(book.status.value),
        format_csv_date(book.published_date),
        format_csv_date(book.reading_start_date),
        format_csv_date(book.reading_end_date),
        escape_csv(book.notes or ""),
        escape_csv(join_tags(book.tags)),
    ]
    return ",".join(row)


def build_csv(books: Iterable[Book | NewBook], include_data: bool = True) -> str:
    """Build CSV text; with ``include_data=False`` only the header row."""
    lines = [",".join(CSV_HEADERS)]
    if include_data:
        lines.extend(build_csv_row(book) for book in books)
    return "\n".join(lines) + "\n"


# ============================================================================
# Import
# ============================================================================


def split_records(text: str) -> list[str]:
    """Split CSV text into records on LF/CRLF, keeping quoted line breaks.

    Blank records are dropped.
    """
    text = text.lstrip("\ufeff")
    records: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in text:
        if char == '"':
            in_quotes = not in_quotes
        if char == "\n" and not in_quotes:
            records.append("".join(current).removesuffix("\r"))
            current = []
            continue
        current.append(char)
    records.append("".join(current).removesuffix("\r"))

    return [record for record in records if record.strip()]


def parse_csv_line(line: str) -> list[str]:
    """Tokenize one record into trimmed fields.

    A quote toggles quoting; a doubled quote inside a quoted field is a
    literal quote; commas inside quotes are not separators.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current))
    return [field.strip() for field in fields]


def map_headers(header_line: str) -> dict[int, str]:
    """Map column positions to known header names.

    Raises:
        CsvImportError: If Title or Author is missing
    """
    known = {header.lower(): header for header in CSV_HEADERS}
    header_map: dict[int, str] = {}

    for index, raw in enumerate(parse_csv_line(header_line)):
        matched = known.get(raw.strip().lower())
        if matched:
            header_map[index] = matched

    found = set(header_map.values())
    missing = [h for h in REQUIRED_HEADERS if h not in found]
    if missing:
        raise CsvImportError(f"Missing required headers: {', '.join(missing)}")

    return header_map


def parse_book_row(line: str, header_map: dict[int, str]) -> NewBook:
    """Convert one data record into a candidate book.

    Raises:
        CsvRowError: If Title or Author is empty
    """
    values = parse_csv_line(line)
    data = {
        header: values[index] if index < len(values) else ""
        for index, header in header_map.items()
    }

    title = data.get("Title", "").strip()
    author = data.get("Author", "").strip()
    if not title or not author:
        raise CsvRowError(
            f'Title and Author are required (found: Title="{title}", Author="{author}")'
        )

    fields: dict = {"title": title, "author": author}

    if "Status" in data:
        fields["status"] = normalize_status(data["Status"]) or BookStatus.TO_READ
    if "Published Date" in data:
        fields["published_date"] = parse_csv_date(data["Published Date"])
    if "Reading Start Date" in data:
        fields["reading_start_date"] = parse_csv_date(data["Reading Start Date"])
    if "Reading End Date" in data:
        fields["reading_end_date"] = parse_csv_date(data["Reading End Date"])
    if "Notes" in data:
        fields["notes"] = data["Notes"] or None
    if "Tags" in data:
        fields["tags"] = parse_tags(data["Tags"])

    return NewBook(**fields)


def parse_csv(text: str) -> list[CsvRow]:
    """Parse CSV text into per-row results.

    Row numbers are 1-based with the header as row 1.

    Raises:
        CsvImportError: If there is no data row or a required header is missing
    """
    records = split_records(text)
    if len(records) < 2:
        raise CsvImportError(
            "CSV file must have at least a header row and one data row"
        )

    header_map = map_headers(records[0])
    rows: list[CsvRow] = []

    for offset, record in enumerate(records[1:], start=2):
        try:
            rows.append(CsvRow(row_number=offset, book=parse_book_row(record, header_map)))
        except CsvRowError as e:
            rows.append(CsvRow(row_number=offset, error=f"Row {offset}: {e}"))

    return rows
