"""Tracks which suggestion highlights are visible in each document."""
from __future__ import annotations

from typing import Any, Sequence

from PySide6.QtCore import QObject, Signal

from nextedit.lang.protocol import EditOp


class SuggestionOverlay(QObject):
    """Display collaborator; a view layer renders from its signals."""

    suggestion_displayed = Signal(object, object)
    suggestion_cleared = Signal(object)

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._visible: dict[Any, list[EditOp]] = {}

    def display_suggestion(self, document_id: Any, edits: Sequence[EditOp]) -> None:
        if not edits:
            self.clear_suggestion(document_id)
            return
        self._visible[document_id] = list(edits)
        self.suggestion_displayed.emit(document_id, list(edits))

    def clear_suggestion(self, document_id: Any) -> None:
        if self._visible.pop(document_id, None) is not None:
            self.suggestion_cleared.emit(document_id)

    def visible_edits(self, document_id: Any) -> list[EditOp]:
        return list(self._visible.get(document_id, []))

    def is_visible(self, document_id: Any) -> bool:
        return document_id in self._visible
