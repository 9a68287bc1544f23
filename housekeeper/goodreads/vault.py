"""Locate, read and rewrite markdown book notes in a notes vault."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from housekeeper import logger
from housekeeper.goodreads.title_parser import ParsedTitle

FENCE = "---"
NOTE_SUFFIX = ".md"
_FILENAME_UNSAFE = str.maketrans({char: "-" for char in '/\\:*?"<>|'})


class VaultError(Exception):
    """The vault directory is missing or a note cannot be written."""


def split_frontmatter(text: str, source: str = "note") -> tuple[dict[str, Any], str]:
    """
    Return (frontmatter, body) for a note.

    Unparseable or non-mapping frontmatter yields an empty mapping so a sync
    can still repopulate the note; the original body is always preserved.
    """
    text = text.removeprefix("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != FENCE:
        return {}, text

    for idx in range(1, len(lines)):
        if lines[idx].rstrip() == FENCE:
            raw = "".join(lines[1:idx])
            body = "".join(lines[idx + 1:])
            break
    else:
        return {}, text

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        logger.warning(f"Ignoring unparseable frontmatter in {source}: {exc}")
        return {}, body
    if data is None:
        return {}, body
    if not isinstance(data, dict):
        logger.warning(f"Ignoring frontmatter in {source}: expected a mapping, got {type(data).__name__}")
        return {}, body
    return data, body


def render_note(frontmatter: dict[str, Any], body: str) -> str:
    dumped = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True, width=1000)
    return f"{FENCE}\n{dumped}{FENCE}\n{body}"


def read_note(path: Path) -> tuple[dict[str, Any], str]:
    return split_frontmatter(path.read_text(encoding="utf-8"), source=str(path))


def write_note(path: Path, frontmatter: dict[str, Any], body: str = "") -> None:
    try:
        path.write_text(render_note(frontmatter, body), encoding="utf-8")
    except OSError as exc:
        raise VaultError(f"Cannot write note {path}: {exc}") from exc


def note_filename(parsed: ParsedTitle) -> str:
    return f"{parsed.title.translate(_FILENAME_UNSAFE).strip()}{NOTE_SUFFIX}"


def list_notes(vault_path: Path) -> list[Path]:
    if not vault_path.is_dir():
        raise VaultError(f"Vault directory not found: {vault_path}")
    return sorted(p for p in vault_path.iterdir() if p.is_file() and p.suffix == NOTE_SUFFIX)


def find_book_note(
    vault_path: Path,
    parsed: ParsedTitle,
    notes: list[Path] | None = None,
) -> Path | None:
    """Find the note for a book: exact stem match first, then any name containing the title."""
    if not parsed.title:
        return None
    candidates = list_notes(vault_path) if notes is None else notes
    stem = note_filename(parsed)[: -len(NOTE_SUFFIX)]
    for note in candidates:
        if note.stem in (parsed.title, stem):
            return note
    for note in candidates:
        if parsed.title in note.name or stem in note.name:
            return note
    return None
