"""Reformat a pasted meeting summary into a nested markdown bullet list."""

from __future__ import annotations

SECTION_MARKER = "###"
RULE_MARKER = "---"
TRANSCRIPT_LINK_TEXT = "Chat with meeting transcript"
HEADER_LINES = 2


def format_meeting_notes(text: str) -> str:
    """
    Turn "### Section" headers into bold bullets and nest their list items.

    The first two non-empty lines (title and meta info) are dropped, as are
    horizontal rules, the transcript link and any non-list prose.
    """
    lines = [line for line in text.split("\n") if line]
    output: list[str] = []

    for line in lines[HEADER_LINES:]:
        if line.startswith(SECTION_MARKER):
            section = line[len(SECTION_MARKER):].strip()
            output.append(f"- **{section}**")
        elif line.startswith(RULE_MARKER) or TRANSCRIPT_LINK_TEXT in line:
            continue
        elif line.startswith("-"):
            output.append(f"  {line}")

    return "\n".join(output)
