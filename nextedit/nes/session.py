"""Per-session store wiring history, pending state and ingestion together."""
from __future__ import annotations

import copy
import logging
from typing import Any

from nextedit.core.events import CommandDescriptor, CommandRegistry
from nextedit.editor.workspace import DocumentWorkspace
from nextedit.lang.client_registry import ClientRegistry, RequestClient
from nextedit.nes.history import HISTORY_DEPTH, SuggestionEntry, SuggestionHistory
from nextedit.nes.ingestor import RequestContext, ResponseIngestor
from nextedit.nes.pending import NavigationOutcome, PendingSuggestionController, Scheduler, SuggestionDisplay
from nextedit.ui.notifier import Notifier

logger = logging.getLogger(__name__)


class NextEditSession:
    """Owns the suggestion history and pending map for one editing session.

    User commands act on the workspace's current document unless a document
    is passed explicitly.
    """

    def __init__(
        self,
        workspace: DocumentWorkspace,
        display: SuggestionDisplay,
        notifier: Notifier | None = None,
        clients: ClientRegistry | None = None,
        capacity: int = HISTORY_DEPTH,
        default_client: str | None = None,
        scheduler: Scheduler | None = None,
        commands: CommandRegistry | None = None,
    ) -> None:
        self.workspace = workspace
        self.display = display
        self.notifier = notifier or Notifier(workspace)
        self.clients = clients or ClientRegistry()
        self.history = SuggestionHistory(capacity, notify=self.notifier.info)
        self.controller = PendingSuggestionController(display, scheduler)
        self.ingestor = ResponseIngestor(self.history, self.controller, workspace, self.clients, default_client)
        self.commands = commands or CommandRegistry()
        self._register_commands()

    def _register_commands(self) -> None:
        for command_id, description, callback in (
            ("nes.request", "Request next edit suggestion", self.request),
            ("nes.recall", "Recall previous next edit suggestion", self.recall),
            ("nes.walk_to_start", "Go to start of next edit suggestion", self.walk_to_start),
            ("nes.walk_to_end", "Go to end of next edit suggestion", self.walk_to_end),
            ("nes.apply", "Apply next edit suggestion", self.apply),
            ("nes.clear", "Dismiss next edit suggestion", self.clear),
        ):
            self.commands.register_command(CommandDescriptor(command_id, description, "Next Edit", callback))

    def _document(self, document=None):
        if document is not None:
            return document
        return self.workspace.current_document

    # Commands ----------------------------------------------------------
    def request(self, client: RequestClient | str | None = None, document=None) -> RequestContext | None:
        return self.ingestor.request_suggestion(client, self._document(document))

    def recall(self, document=None) -> SuggestionEntry | None:
        document = self._document(document)
        if document is None:
            return None
        entry = self.history.recall(document.doc_id, document)
        if entry is not None:
            logger.debug("Recalled suggestion for %s", document.uri)
            self.controller.show(document, copy.deepcopy(list(entry.edits)))
        return entry

    def walk_to_start(self, document=None) -> NavigationOutcome:
        document = self._document(document)
        if document is None:
            return NavigationOutcome.NO_SUGGESTION
        return self.controller.walk_to_start(document)

    def walk_to_end(self, document=None) -> NavigationOutcome:
        document = self._document(document)
        if document is None:
            return NavigationOutcome.NO_SUGGESTION
        return self.controller.walk_to_end(document)

    def apply(self, document=None) -> NavigationOutcome:
        document = self._document(document)
        if document is None:
            return NavigationOutcome.NO_SUGGESTION
        return self.controller.apply(document)

    def clear(self, document=None) -> bool:
        document = self._document(document)
        if document is None:
            return False
        return self.controller.clear(document)

    def pending(self, document=None) -> Any:
        document = self._document(document)
        return None if document is None else self.controller.pending(document.doc_id)

    def shutdown(self) -> None:
        """Detach from the workspace and drop all session state."""

        self.ingestor.shutdown()
        for client in self.clients.get_clients():
            stop = getattr(client, "stop", None)
            if stop is not None:
                stop()
        self.controller.reset()
        self.history.clear()
