"""Build note frontmatter from a Goodreads row and merge it with what a note already holds."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from housekeeper.goodreads.library_export import GoodreadsBook
from housekeeper.goodreads.title_parser import parse_title

GOODREADS_BOOK_URL = "https://www.goodreads.com/book/show/{book_id}"

_MISSING = object()
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

MergeStrategy = Callable[[Any, Any], Any]


def parse_int(value: object) -> int | None:
    """Leading-integer parse: "4" -> 4, " 4.5 " -> 4, "" -> None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


def _is_sequence(value: object) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def is_empty(value: object) -> bool:
    """Missing, None, "" or a zero-length sequence. A list like [""] is not empty."""
    if value is _MISSING or value is None:
        return True
    if isinstance(value, str):
        return value == ""
    return _is_sequence(value) and len(value) == 0


def _copy(value: Any) -> Any:
    return list(value) if _is_sequence(value) else value


def _existing_unless_empty(fresh: Any, existing: Any) -> Any:
    if fresh is _MISSING:
        return existing
    return fresh if is_empty(existing) else existing


def _fresh_wins(fresh: Any, existing: Any) -> Any:
    return existing if fresh is _MISSING else fresh


def _union_tags(fresh: Any, existing: Any) -> Any:
    if isinstance(existing, str) and _is_sequence(fresh):
        return list(dict.fromkeys([*existing.split(), *fresh]))
    return _existing_unless_empty(fresh, existing)


def _integer_rating(fresh: Any, existing: Any) -> Any:
    selected = _existing_unless_empty(fresh, existing)
    other = fresh if selected is existing else existing
    rating = parse_int(selected)
    if rating is None:
        rating = parse_int(other)
    if rating is None:
        return _MISSING if is_empty(existing) else existing
    return rating


FIELD_STRATEGIES: dict[str, MergeStrategy] = {
    "shelf": _fresh_wins,
    "tags": _union_tags,
    "rating": _integer_rating,
}


def merge_metadata(fresh: Mapping[str, Any], existing: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge freshly computed frontmatter with a note's existing frontmatter.

    Existing values win unless they are empty, so manual edits survive
    repeated syncs. Keys listed in FIELD_STRATEGIES follow their own rule.
    Neither input is modified.
    """
    merged: dict[str, Any] = {}
    for key in [*fresh, *(key for key in existing if key not in fresh)]:
        strategy = FIELD_STRATEGIES.get(key, _existing_unless_empty)
        value = strategy(fresh.get(key, _MISSING), existing.get(key, _MISSING))
        if value is not _MISSING:
            merged[key] = _copy(value)
    return merged


def _wikilink(name: str) -> str:
    return f"[[{name.strip()}]]"


def build_fresh_record(book: GoodreadsBook) -> dict[str, Any]:
    """Frontmatter a note should carry for this export row, before any merge."""
    parsed = parse_title(book.get("Title", ""))

    authors = [_wikilink(book.get("Author", ""))] if book.get("Author", "").strip() else []
    for name in book.get("Additional Authors", "").split(","):
        if name.strip():
            authors.append(_wikilink(name))

    date_read = book.get("Date Read", "")
    record: dict[str, Any] = {
        "aliases": [],
        "tags": ["books"],
        "categories": ["[[Books]]"],
        "url": GOODREADS_BOOK_URL.format(book_id=book.get("Book Id", "").strip()),
        "title": parsed.title,
        "subtitle": parsed.subtitle,
        "series-name": parsed.series_name,
        "series-number": parsed.series_number,
        "author": authors,
        "shelf": book.get("Exclusive Shelf", ""),
        "rating": parse_int(book.get("My Rating", "")),
        "length": parse_int(book.get("Number of Pages", "")),
        "year": parse_int(book.get("Original Publication Year", "")),
        "read-last": date_read.replace("/", "-") if date_read else "",
        "read-count": parse_int(book.get("Read Count") or "0"),
        "topics": [],
    }
    return {key: value for key, value in record.items() if value is not None}
