"""Build a ready-to-use next-edit session from configuration."""
from __future__ import annotations

import logging

from nextedit.core.config import ConfigManager
from nextedit.core.logging import configure_logging
from nextedit.editor.workspace import DocumentWorkspace
from nextedit.lang.client_registry import ClientRegistry
from nextedit.lang.lsp_client import LSPClient
from nextedit.nes.pending import Scheduler
from nextedit.nes.session import NextEditSession
from nextedit.ui.notifier import Notifier
from nextedit.ui.overlay import SuggestionOverlay

logger = logging.getLogger(__name__)


def create_session(
    config: ConfigManager | None = None,
    scheduler: Scheduler | None = None,
    configure_logs: bool = True,
) -> NextEditSession:
    config = config or ConfigManager()
    if configure_logs:
        configure_logging(config.log_level())

    workspace = DocumentWorkspace()
    session = NextEditSession(
        workspace,
        SuggestionOverlay(workspace),
        notifier=Notifier(workspace),
        clients=ClientRegistry(),
        capacity=config.history_depth(),
        default_client=config.client_name(),
        scheduler=scheduler,
    )
    logger.info("Next-edit session ready (history depth %d)", config.history_depth())
    return session


def attach_server(session: NextEditSession, command: list[str], name: str | None = None, workdir: str | None = None) -> LSPClient:
    """Start a language server process and make it resolvable for requests."""

    client = LSPClient(name or session.ingestor.default_client or "nextedit", command, workdir=workdir, parent=session.workspace)
    session.clients.register(client)
    client.start()
    return client
