"""Registry of open documents and the current editing focus."""
from __future__ import annotations

import itertools
import logging
from pathlib import Path

from PySide6.QtCore import QObject, Signal

from nextedit.editor.document import TextDocument

logger = logging.getLogger(__name__)


class DocumentWorkspace(QObject):
    """Track open documents by id and which one currently has focus."""

    document_opened = Signal(int)
    document_closed = Signal(int)
    current_changed = Signal(int)

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._documents: dict[int, TextDocument] = {}
        self._ids = itertools.count(1)
        self._current: int | None = None

    def open_document(self, uri: str, text: str = "") -> TextDocument:
        document = TextDocument(next(self._ids), uri, text, parent=self)
        self._documents[document.doc_id] = document
        logger.debug("Opened document %d (%s)", document.doc_id, uri)
        self.document_opened.emit(document.doc_id)
        self.set_current(document.doc_id)
        return document

    def open_path(self, path: str | Path) -> TextDocument:
        resolved = Path(path).resolve()
        return self.open_document(resolved.as_uri(), resolved.read_text(encoding="utf-8"))

    def close_document(self, doc_id: int) -> None:
        document = self._documents.pop(doc_id, None)
        if document is None:
            return
        document.close()
        if self._current == doc_id:
            self._current = next(iter(self._documents), None)
        logger.debug("Closed document %d (%s)", doc_id, document.uri)
        self.document_closed.emit(doc_id)

    def get(self, doc_id: int) -> TextDocument | None:
        return self._documents.get(doc_id)

    def is_valid(self, doc_id: int) -> bool:
        document = self._documents.get(doc_id)
        return document is not None and document.is_valid

    def documents(self) -> list[TextDocument]:
        return list(self._documents.values())

    def set_current(self, doc_id: int) -> None:
        if doc_id not in self._documents:
            raise KeyError(f"Unknown document: {doc_id}")
        self._current = doc_id
        self.current_changed.emit(doc_id)

    @property
    def current_document(self) -> TextDocument | None:
        if self._current is None:
            return None
        return self._documents.get(self._current)
