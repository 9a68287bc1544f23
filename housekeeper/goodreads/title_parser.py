"""Split Goodreads book titles into title, subtitle and series fields."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Trailing "(Series Name, #3.5)" group. The number needs a marker: ", #N", ", N", " #N", " N" or "#N".
_SERIES_PATTERN = re.compile(
    r"\(\s*(?P<name>[^()#]+?)"
    r"(?:(?:\s*,\s*#?|\s+#?|#)\s*(?P<number>\d+(?:\.\d+)?))?"
    r"\s*\)\s*$"
)
_SUBTITLE_SEPARATOR = re.compile(r":(?:\s+|$)")


@dataclass(frozen=True)
class ParsedTitle:
    title: str
    full_title: str
    subtitle: str | None = None
    series_name: str | None = None
    series_number: str | None = None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_title(full_title: str) -> ParsedTitle:
    """
    Parse "Title: Subtitle (Series Name, #N)" into its parts.

    Every part except the title is optional. Input that cannot be split
    falls back to the trimmed input as the title.
    """
    head = full_title
    series_name = series_number = None

    series = _SERIES_PATTERN.search(full_title)
    if series is not None:
        head = full_title[: series.start()]
        series_name = _clean(series.group("name"))
        series_number = _clean(series.group("number"))

    title, subtitle = head, None
    parts = _SUBTITLE_SEPARATOR.split(head, maxsplit=1)
    if len(parts) == 2:
        title, subtitle = parts

    title = title.strip()
    if not title:
        return ParsedTitle(title=full_title.strip(), full_title=full_title)

    return ParsedTitle(
        title=title,
        full_title=full_title,
        subtitle=_clean(subtitle),
        series_name=series_name,
        series_number=series_number,
    )
