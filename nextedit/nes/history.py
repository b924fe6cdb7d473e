"""Bounded history of recently offered next-edit suggestions."""
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Sequence

from nextedit.lang.protocol import EditOp
from nextedit.nes.fingerprint import LineSource, capture_original_text

if TYPE_CHECKING:
    from nextedit.nes.ingestor import RequestContext

logger = logging.getLogger(__name__)

HISTORY_DEPTH = 5

NOTHING_TO_RECALL = "No next-edit suggestion to recall."
NOTHING_IN_DOCUMENT = "No next-edit suggestion to recall in this document."


@dataclass(frozen=True)
class SuggestionEntry:
    """Snapshot of one offered suggestion and the text it was offered against."""

    edits: tuple[EditOp, ...]
    document_id: Any
    original_text: str | None
    context: "RequestContext | None" = field(default=None, compare=False)

    @classmethod
    def snapshot(
        cls,
        edits: Sequence[EditOp],
        document_id: Any,
        original_text: str | None,
        context: "RequestContext | None" = None,
    ) -> "SuggestionEntry":
        """Build an entry from independent copies of ``edits`` and ``context``."""

        return cls(
            edits=tuple(copy.deepcopy(list(edits))),
            document_id=document_id,
            original_text=original_text,
            context=copy.deepcopy(context),
        )


class SuggestionHistory:
    """Most-recent-first cache of suggestions with circular, self-cleaning recall."""

    def __init__(self, capacity: int = HISTORY_DEPTH, notify: Callable[[str], None] | None = None) -> None:
        if capacity < 1:
            raise ValueError("history capacity must be positive")
        self.capacity = capacity
        self._notify = notify
        self._entries: list[SuggestionEntry] = []
        self.recall_cursor: int | None = None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def entries(self) -> list[SuggestionEntry]:
        return list(self._entries)

    def push(self, entry: SuggestionEntry) -> None:
        self._entries.insert(0, entry)
        del self._entries[self.capacity :]
        self.recall_cursor = None

    def clear(self) -> None:
        self._entries.clear()
        self.recall_cursor = None

    def recall(self, document_id: Any, document: LineSource) -> SuggestionEntry | None:
        """Return the next still-valid suggestion for ``document_id``.

        The scan starts at the recall cursor and walks the history circularly.
        Entries of other documents are skipped untouched. Entries of this
        document whose fingerprint no longer matches are removed on the spot.
        """

        if not self._entries:
            self._report(NOTHING_TO_RECALL)
            return None

        idx = self.recall_cursor if self.recall_cursor is not None and self.recall_cursor < len(self._entries) else 0
        checked = 0
        while self._entries and checked < len(self._entries):
            entry = self._entries[idx]
            if entry.document_id != document_id:
                idx = (idx + 1) % len(self._entries)
                checked += 1
                continue

            current_text = capture_original_text(entry.edits[0], document)
            if current_text is not None and current_text == entry.original_text:
                self.recall_cursor = (idx + 1) % len(self._entries)
                return entry

            logger.debug("Dropping stale suggestion for document %s at slot %d", document_id, idx)
            self._remove(idx)
            if idx >= len(self._entries):
                idx = 0

        self._report(NOTHING_IN_DOCUMENT)
        return None

    def _remove(self, idx: int) -> None:
        del self._entries[idx]
        if self.recall_cursor is None:
            return
        if not self._entries:
            self.recall_cursor = None
            return
        if idx < self.recall_cursor:
            self.recall_cursor -= 1
        if self.recall_cursor >= len(self._entries):
            self.recall_cursor = 0

    def _report(self, message: str) -> None:
        logger.info(message)
        if self._notify is not None:
            self._notify(message)
