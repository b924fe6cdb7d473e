"""Per-document lifecycle of the currently displayed suggestion."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Protocol, Sequence

from PySide6.QtCore import QTimer

from nextedit.lang.protocol import EditOp, Location, Position, Range

logger = logging.getLogger(__name__)

Scheduler = Callable[[Callable[[], None]], None]


def qt_schedule(callback: Callable[[], None]) -> None:
    """Run ``callback`` on a later turn of the Qt event loop."""

    QTimer.singleShot(0, callback)


class EditableDocument(Protocol):
    doc_id: Any
    uri: str

    def get_lines(self, start: int, end: int) -> list[str]:
        ...

    def cursor_position(self) -> Position:
        ...

    def move_cursor_and_focus(self, location: Location) -> bool:
        ...

    def replace_range(self, range_: Range, text: str) -> None:
        ...


class SuggestionDisplay(Protocol):
    def display_suggestion(self, document_id: Any, edits: Sequence[EditOp]) -> None:
        ...

    def clear_suggestion(self, document_id: Any) -> None:
        ...


class NavigationOutcome(str, Enum):
    NO_SUGGESTION = "no-op"
    ALREADY_THERE = "already-there"
    WALKED = "walked"
    APPLIED = "applied"


@dataclass
class PendingState:
    edits: tuple[EditOp, ...]
    range: Range
    document_uri: str
    navigated_to_start: bool = field(default=False)

    @classmethod
    def for_edits(cls, edits: Sequence[EditOp], document_uri: str) -> "PendingState":
        edits = tuple(edits)
        return cls(edits=edits, range=edits[0].range, document_uri=document_uri)


class PendingSuggestionController:
    """Holds at most one pending suggestion per document.

    Navigation to the end of an edit and applying it both mutate the document,
    so they run on a later event-loop turn via ``scheduler``.
    """

    def __init__(self, display: SuggestionDisplay, scheduler: Scheduler | None = None) -> None:
        self.display = display
        self._schedule = scheduler or qt_schedule
        self._pending: dict[Any, PendingState] = {}

    def pending(self, document_id: Any) -> PendingState | None:
        return self._pending.get(document_id)

    def has_pending(self, document_id: Any) -> bool:
        return document_id in self._pending

    def show(self, document: EditableDocument, edits: Sequence[EditOp]) -> None:
        """Replace the document's pending suggestion, or drop it for no edits."""

        if not edits:
            self._discard(document.doc_id)
            return
        state = PendingState.for_edits(edits, document.uri)
        self._pending[document.doc_id] = state
        self.display.display_suggestion(document.doc_id, state.edits)

    def walk_to_start(self, document: EditableDocument) -> NavigationOutcome:
        state = self._pending.get(document.doc_id)
        if state is None:
            return NavigationOutcome.NO_SUGGESTION
        if document.cursor_position().line == state.range.start.line:
            return NavigationOutcome.ALREADY_THERE
        if not document.move_cursor_and_focus(Location.at(state.document_uri, state.range.start)):
            return NavigationOutcome.NO_SUGGESTION
        state.navigated_to_start = True
        return NavigationOutcome.WALKED

    def walk_to_end(self, document: EditableDocument) -> NavigationOutcome:
        state = self._pending.get(document.doc_id)
        if state is None:
            return NavigationOutcome.NO_SUGGESTION
        target = Location.at(state.document_uri, state.range.end)

        def _walk() -> None:
            # A deletion reaching past the last line leaves no valid end position.
            try:
                document.move_cursor_and_focus(target)
            except Exception:
                logger.debug("Could not move cursor to end of suggestion in %s", state.document_uri, exc_info=True)

        self._schedule(_walk)
        return NavigationOutcome.WALKED

    def apply(self, document: EditableDocument) -> NavigationOutcome:
        """Apply every edit of the pending suggestion on a later turn.

        All ranges are relative to the document as it was when the
        suggestion arrived, so edits run from the bottom of the document up
        and an earlier edit never shifts a later one. Insertions at the same
        position end up in the text in their given order.
        """

        state = self._pending.pop(document.doc_id, None)
        if state is None:
            return NavigationOutcome.NO_SUGGESTION
        ordered = [
            edit
            for _, edit in sorted(
                enumerate(state.edits),
                key=lambda item: (item[1].range.start, item[0]),
                reverse=True,
            )
        ]

        def _apply() -> None:
            try:
                for edit in ordered:
                    document.replace_range(edit.range, edit.replacement_text)
            except (IndexError, ValueError):
                logger.exception("Failed to apply next-edit suggestion to %s", state.document_uri)
            if document.doc_id not in self._pending:
                self.display.clear_suggestion(document.doc_id)

        self._schedule(_apply)
        return NavigationOutcome.APPLIED

    def clear(self, document: EditableDocument | Any) -> bool:
        document_id = getattr(document, "doc_id", document)
        if document_id not in self._pending:
            return False
        self._discard(document_id)
        return True

    def forget(self, document_id: Any) -> None:
        """Drop state for a closed document without touching the display."""

        self._pending.pop(document_id, None)

    def _discard(self, document_id: Any) -> None:
        self._pending.pop(document_id, None)
        self.display.clear_suggestion(document_id)

    def reset(self) -> None:
        self._pending.clear()
