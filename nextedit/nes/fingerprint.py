"""Capture the text a prospective edit would replace."""
from __future__ import annotations

from typing import Protocol

from nextedit.lang.protocol import EditOp, utf16_to_index


class LineSource(Protocol):
    def get_lines(self, start: int, end: int) -> list[str]:
        ...


def _read_lines(document: LineSource, start: int, end: int) -> list[str] | None:
    try:
        lines = document.get_lines(start, end)
    except IndexError:
        return None
    if lines is None or len(lines) != end - start:
        return None
    return list(lines)


def capture_original_text(edit: EditOp, document: LineSource) -> str | None:
    """Return the document text currently covered by ``edit.range``.

    A zero-width edit at the start of a line (an insertion above that line)
    covers no text, so it is fingerprinted by the full line above it instead,
    or ``""`` on line 0. ``None`` means the lines could not be read and must
    never be treated as a match.
    """

    start, end = edit.range.start, edit.range.end
    lines = _read_lines(document, start.line, end.line + 1)
    if lines is None and end.character == 0:
        # A range may end at (line_count, 0), just past the last line.
        head = _read_lines(document, start.line, end.line)
        if head is not None:
            lines = head + [""]
    if lines is None:
        return None

    if start.line == end.line:
        line = lines[0]
        original = line[utf16_to_index(line, start.character) : utf16_to_index(line, end.character)]
    else:
        first = lines[0][utf16_to_index(lines[0], start.character) :]
        last = lines[-1][: utf16_to_index(lines[-1], end.character)]
        original = "\n".join([first, *lines[1:-1], last])

    if original == "" and edit.range.is_zero_width and start.character == 0:
        if start.line == 0:
            return ""
        above = _read_lines(document, start.line - 1, start.line)
        return above[0] if above else ""
    return original
