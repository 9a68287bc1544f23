"""Sync a Goodreads library export into vault book notes."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

from housekeeper import logger
from housekeeper.goodreads.frontmatter import build_fresh_record, merge_metadata
from housekeeper.goodreads.library_export import GoodreadsBook
from housekeeper.goodreads.title_parser import parse_title
from housekeeper.goodreads.vault import find_book_note, list_notes, note_filename, read_note, write_note


@dataclass
class SyncReport:
    updated: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    created: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(
            len(bucket)
            for bucket in (self.updated, self.unchanged, self.created, self.missing, self.skipped)
        )

    def summary(self) -> str:
        return (
            f"{self.total} book(s): updated={len(self.updated)}, unchanged={len(self.unchanged)}, "
            f"created={len(self.created)}, not found={len(self.missing)}, skipped={len(self.skipped)}"
        )


def sync_library(
    books: Iterable[GoodreadsBook],
    vault_path: Path,
    *,
    dry_run: bool = False,
    create_missing: bool = False,
    shelves: Sequence[str] | None = None,
) -> SyncReport:
    """
    Merge each book's fresh frontmatter into its vault note.

    Notes are only rewritten when their frontmatter actually changes; the
    body text is never touched.
    """
    log = logger.get_logger()
    report = SyncReport()
    notes = list_notes(vault_path)
    wanted_shelves = {shelf.strip().lower() for shelf in shelves or () if shelf.strip()}
    mode = " (dry run)" if dry_run else ""

    books = list(books)
    for index, book in enumerate(books, start=1):
        full_title = book.get("Title", "")
        shelf = book.get("Exclusive Shelf", "")
        log.status(f"[{index}/{len(books)}] {full_title}")
        if wanted_shelves and shelf.strip().lower() not in wanted_shelves:
            log.debug(f"SKIPPED {full_title!r}: shelf '{shelf}' not selected")
            report.skipped.append(full_title)
            continue

        parsed = parse_title(full_title)
        fresh = build_fresh_record(book)
        note = find_book_note(vault_path, parsed, notes)

        if note is None:
            if not create_missing:
                log.info(f"NOT FOUND {full_title} -> shelf: {shelf}")
                report.missing.append(full_title)
                continue
            target = vault_path / note_filename(parsed)
            if not dry_run:
                write_note(target, fresh)
                notes.append(target)
            log.info(f"CREATED {target.name}{mode}")
            report.created.append(full_title)
            continue

        existing, body = read_note(note)
        merged = merge_metadata(fresh, existing)
        if merged == existing:
            log.debug(f"UNCHANGED {note.name}")
            report.unchanged.append(full_title)
            continue

        changed = sorted(key for key in merged if merged.get(key) != existing.get(key))
        log.debug(f"{note.name}: changed fields {', '.join(changed)}")
        if not dry_run:
            write_note(note, merged, body)
        log.info(f"UPDATED {note.name}{mode}")
        report.updated.append(full_title)

    log.clear_status()
    return report
