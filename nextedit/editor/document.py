"""In-memory text document used as the next-edit document collaborator."""
from __future__ import annotations

import logging

from PySide6.QtCore import QObject, Signal

from nextedit.lang.protocol import Location, Position, Range, index_to_utf16, utf16_to_index

logger = logging.getLogger(__name__)


class TextDocument(QObject):
    """Line-based document with an LSP-style cursor and edit version stamp."""

    changed = Signal(int)
    cursor_moved = Signal(object)
    closed = Signal()

    def __init__(self, doc_id: int, uri: str, text: str = "", parent=None) -> None:
        super().__init__(parent)
        self.doc_id = doc_id
        self.uri = uri
        self.version = 0
        self.focused = False
        self._lines = text.split("\n")
        self._cursor = Position(0, 0)
        self._closed = False

    # Content -----------------------------------------------------------
    @property
    def line_count(self) -> int:
        return len(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def is_valid(self) -> bool:
        return not self._closed

    def line(self, index: int) -> str:
        return self._lines[index]

    def get_lines(self, start: int, end: int) -> list[str]:
        """Return lines ``start`` up to, not including, ``end``.

        Raises ``IndexError`` when the document cannot supply every line.
        """

        if start < 0 or end < start or end > len(self._lines):
            raise IndexError(f"lines {start}..{end} outside document of {len(self._lines)} lines")
        return list(self._lines[start:end])

    def replace_range(self, range_: Range, text: str) -> None:
        start, end = range_.start, range_.end
        if end.line == len(self._lines) and end.character == 0:
            # Position just past the final line; the virtual line is empty.
            tail = ""
        else:
            self._check_position(end)
            tail = self._lines[end.line][utf16_to_index(self._lines[end.line], end.character) :]
        self._check_position(start)
        if (end.line, end.character) < (start.line, start.character):
            raise ValueError(f"range end {end} precedes start {start}")

        head_line = self._lines[start.line]
        head = head_line[: utf16_to_index(head_line, start.character)]
        self._lines[start.line : end.line + 1] = (head + text + tail).split("\n")
        self.version += 1
        logger.debug("Document %s edited to version %d", self.uri, self.version)
        self.changed.emit(self.version)

    def set_text(self, text: str) -> None:
        self._lines = text.split("\n")
        self.version += 1
        self.changed.emit(self.version)

    # Cursor ------------------------------------------------------------
    def cursor_position(self) -> Position:
        return self._cursor

    def set_cursor(self, position: Position) -> None:
        self._check_position(position)
        self._cursor = position
        self.cursor_moved.emit(position)

    def move_cursor_and_focus(self, location: Location) -> bool:
        """Move the cursor to ``location`` and focus the document.

        Returns False for a location in another document; raises ``IndexError``
        when the position lies outside this one.
        """

        if location.uri != self.uri:
            return False
        self.set_cursor(location.range.start)
        self.focused = True
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.closed.emit()

    def _check_position(self, position: Position) -> None:
        if position.line < 0 or position.line >= len(self._lines):
            raise IndexError(f"line {position.line} outside document of {len(self._lines)} lines")
        width = index_to_utf16(self._lines[position.line], len(self._lines[position.line]))
        if position.character < 0 or position.character > width:
            raise IndexError(f"character {position.character} outside line {position.line} of width {width}")
