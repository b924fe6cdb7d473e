"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import gc
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QCoreApplication  # noqa: E402

from nextedit.editor.workspace import DocumentWorkspace  # noqa: E402
from nextedit.nes.session import NextEditSession  # noqa: E402
from nextedit.ui.notifier import Notifier  # noqa: E402
from nextedit.ui.overlay import SuggestionOverlay  # noqa: E402
from tests.helpers import FakeClient, QueuedScheduler  # noqa: E402

_qt_app = QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture(scope="session")
def qt_app():
    """Provide a shared Qt application for event-loop tests."""

    return _qt_app


@pytest.fixture(autouse=True)
def _collect_qt_garbage():
    """Finalise objects left by a test while the Qt application still exists."""

    yield
    gc.collect()


@pytest.fixture
def scheduler() -> QueuedScheduler:
    return QueuedScheduler()


@pytest.fixture
def workspace(qt_app):
    docs = DocumentWorkspace()
    yield docs
    for document in docs.documents():
        docs.close_document(document.doc_id)


@pytest.fixture
def make_document(workspace):
    """Open an in-memory document owned by the test workspace."""

    def _make(text: str = "", uri: str = "file:///demo.py"):
        return workspace.open_document(uri, text)

    return _make


@pytest.fixture
def overlay(workspace) -> SuggestionOverlay:
    return SuggestionOverlay(workspace)


@pytest.fixture
def notifier(workspace) -> Notifier:
    return Notifier(workspace)


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def session(workspace, overlay, notifier, scheduler, client) -> NextEditSession:
    nes = NextEditSession(workspace, overlay, notifier=notifier, scheduler=scheduler, default_client=client.name)
    nes.clients.register(client)
    yield nes
    nes.shutdown()
