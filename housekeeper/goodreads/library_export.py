"""Read the Goodreads "Export Library" CSV."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import TypedDict

GOODREADS_HEADERS: tuple[str, ...] = (
    "Book Id",
    "Title",
    "Author",
    "Author l-f",
    "Additional Authors",
    "ISBN",
    "ISBN13",
    "My Rating",
    "Average Rating",
    "Publisher",
    "Binding",
    "Number of Pages",
    "Year Published",
    "Original Publication Year",
    "Date Read",
    "Date Added",
    "Bookshelves",
    "Bookshelves with positions",
    "Exclusive Shelf",
    "My Review",
    "Spoiler",
    "Private Notes",
    "Read Count",
    "Owned Copies",
)

# Column names contain spaces, so the functional TypedDict form is required.
GoodreadsBook = TypedDict(
    "GoodreadsBook",
    {header: str for header in GOODREADS_HEADERS},  # type: ignore[misc]
    total=False,
)


class LibraryExportError(Exception):
    """The export file is missing or unreadable."""


def _row_to_book(row: list[str]) -> GoodreadsBook:
    padded = list(row) + [""] * (len(GOODREADS_HEADERS) - len(row))
    return GoodreadsBook(**dict(zip(GOODREADS_HEADERS, padded)))  # type: ignore[misc]


def parse_library_export(content: str) -> list[GoodreadsBook]:
    """
    Parse export text into book rows.

    The header line is skipped and columns are assigned by position, so a
    renamed header in the file does not shift any field.
    """
    reader = csv.reader(io.StringIO(content.strip(), newline=""))
    next(reader, None)
    return [_row_to_book(row) for row in reader if any(cell.strip() for cell in row)]


def read_library_export(path: Path) -> list[GoodreadsBook]:
    try:
        content = path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise LibraryExportError(f"Cannot read Goodreads export {path}: {exc}") from exc
    try:
        return parse_library_export(content)
    except csv.Error as exc:
        raise LibraryExportError(f"Malformed Goodreads export {path}: {exc}") from exc
