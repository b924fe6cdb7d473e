"""Issue next-edit requests and turn their responses into suggestions."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from nextedit.core.errors import ResponseError
from nextedit.editor.workspace import DocumentWorkspace
from nextedit.lang.client_registry import ClientRegistry, RequestClient
from nextedit.lang.protocol import POSITION_ENCODING, EditOp, Position
from nextedit.nes.fingerprint import capture_original_text
from nextedit.nes.history import SuggestionEntry, SuggestionHistory
from nextedit.nes.pending import PendingSuggestionController

logger = logging.getLogger(__name__)

INLINE_EDIT_METHOD = "textDocument/copilotInlineEdit"


@dataclass
class RequestContext:
    """What a request was issued against; stored alongside its suggestion."""

    document_id: Any
    uri: str
    version: int
    position: Position
    client_name: str | None = None
    request_id: int | None = None

    def to_params(self) -> dict[str, Any]:
        return {
            "textDocument": {"uri": self.uri, "version": self.version},
            "position": self.position.to_lsp(),
        }


@dataclass
class RequestToken:
    """Cancellation token scoped to the requesting document's lifetime."""

    document_id: Any
    cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self.cancelled = True


class ResponseIngestor:
    """Validates inbound edit responses and feeds history and pending state.

    Each open document has one request token shared by all of its in-flight
    requests. Closing the document cancels it, so responses that arrive
    afterwards are dropped.
    """

    def __init__(
        self,
        history: SuggestionHistory,
        controller: PendingSuggestionController,
        workspace: DocumentWorkspace,
        clients: ClientRegistry | None = None,
        default_client: str | None = None,
    ) -> None:
        self.history = history
        self.controller = controller
        self.workspace = workspace
        self.clients = clients or ClientRegistry()
        self.default_client = default_client
        self._tokens: dict[Any, RequestToken] = {}
        workspace.document_closed.connect(self.document_closed)
        self._attached = True

    def request_suggestion(self, client: RequestClient | str | None = None, document=None) -> RequestContext | None:
        """Ask the backend for a next edit at the cursor of ``document``.

        Raises ``ClientUnavailable`` when no single client can be resolved.
        """

        resolved = self.clients.resolve(client if client is not None else self.default_client)
        if document is None:
            document = self.workspace.current_document
        if document is None or not document.is_valid:
            logger.debug("No open document to request a next edit for")
            return None

        context = RequestContext(
            document_id=document.doc_id,
            uri=document.uri,
            version=document.version,
            position=document.cursor_position(),
            client_name=getattr(resolved, "name", None),
        )
        token = self._tokens.setdefault(document.doc_id, RequestToken(document.doc_id))

        def _on_response(error: ResponseError | None, result: Any) -> None:
            self.handle_response(error, result, context, token)

        logger.debug("Requesting next edit for %s v%d at %s (%s)", context.uri, context.version, context.position, POSITION_ENCODING)
        context.request_id = resolved.request(INLINE_EDIT_METHOD, context.to_params(), _on_response)
        return context

    def handle_response(
        self,
        error: ResponseError | dict | None,
        result: dict | None,
        context: RequestContext,
        token: RequestToken | None = None,
    ) -> None:
        if error is not None:
            # Backend errors are dropped without a user-visible signal.
            logger.debug("Next-edit request for %s failed: %s", context.uri, ResponseError.from_lsp(error).message)
            return
        if token is not None and token.cancelled:
            logger.debug("Dropping next-edit response for closed document %s", context.uri)
            return
        document = self.workspace.get(context.document_id)
        if document is None or not document.is_valid:
            logger.debug("Dropping next-edit response for closed document %s", context.uri)
            return

        edits = [EditOp.from_lsp(raw) for raw in ((result or {}).get("edits") or [])]
        if edits:
            original_text = capture_original_text(edits[0], document)
            self.history.push(SuggestionEntry.snapshot(edits, context.document_id, original_text, context))
            logger.debug("Stored next-edit suggestion with %d edit(s) for %s", len(edits), context.uri)

        self.controller.show(document, edits)

    def document_closed(self, document_id: Any) -> None:
        token = self._tokens.pop(document_id, None)
        if token is not None:
            token.cancel()
        self.controller.forget(document_id)

    def shutdown(self) -> None:
        """Cancel outstanding requests and detach from the workspace."""

        for token in self._tokens.values():
            token.cancel()
        self._tokens.clear()
        if not self._attached:
            return
        self._attached = False
        try:
            self.workspace.document_closed.disconnect(self.document_closed)
        except (RuntimeError, TypeError):
            logger.debug("Workspace signal already disconnected", exc_info=True)
