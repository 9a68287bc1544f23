"""Goodreads library export to markdown note frontmatter."""

from .frontmatter import FIELD_STRATEGIES, build_fresh_record, merge_metadata
from .library_export import GOODREADS_HEADERS, GoodreadsBook, LibraryExportError, read_library_export
from .sync_service import SyncReport, sync_library
from .title_parser import ParsedTitle, parse_title
from .vault import VaultError, find_book_note

__all__ = [
    "FIELD_STRATEGIES",
    "GOODREADS_HEADERS",
    "GoodreadsBook",
    "LibraryExportError",
    "ParsedTitle",
    "SyncReport",
    "VaultError",
    "build_fresh_record",
    "find_book_note",
    "merge_metadata",
    "parse_title",
    "read_library_export",
    "sync_library",
]
