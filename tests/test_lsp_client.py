from __future__ import annotations

import json

import pytest

from nextedit.core.errors import ResponseError
from nextedit.lang.lsp_client import LSPClient


def _frame(payload: dict) -> bytes:
    body = json.dumps(payload).encode("utf-8")
    return f"Content-Length: {len(body)}\r\n\r\n".encode("utf-8") + body


@pytest.fixture
def client(qt_app, monkeypatch) -> LSPClient:
    lsp = LSPClient("copilot_ls", ["copilot-language-server", "--stdio"])
    sent: list[dict] = []
    monkeypatch.setattr(lsp, "_send_payload", sent.append)
    lsp.sent = sent
    yield lsp
    lsp.stop()


def test_request_assigns_ids_and_params(client: LSPClient) -> None:
    first = client.request("textDocument/copilotInlineEdit", {"position": {"line": 0, "character": 0}})
    second = client.request("shutdown", None)

    assert (first, second) == (1, 2)
    assert client.sent[0] == {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "textDocument/copilotInlineEdit",
        "params": {"position": {"line": 0, "character": 0}},
    }
    assert "params" not in client.sent[1]


def test_response_is_routed_to_its_continuation(client: LSPClient) -> None:
    calls: list[tuple] = []
    request_id = client.request("textDocument/copilotInlineEdit", {}, lambda err, res: calls.append((err, res)))
    message = _frame({"jsonrpc": "2.0", "id": request_id, "result": {"edits": []}})

    # Deliver the frame in two chunks to exercise buffering.
    client.feed(message[:10])
    assert calls == []
    client.feed(message[10:])

    assert calls == [(None, {"edits": []})]


def test_error_response_is_wrapped(client: LSPClient) -> None:
    calls: list[tuple] = []
    request_id = client.request("textDocument/copilotInlineEdit", {}, lambda err, res: calls.append((err, res)))

    client.feed(_frame({"jsonrpc": "2.0", "id": request_id, "error": {"code": -32603, "message": "boom"}}))

    assert calls == [(ResponseError(-32603, "boom"), None)]


def test_continuation_runs_once(client: LSPClient) -> None:
    calls: list[object] = []
    unrouted: list[dict] = []
    client.response_received.connect(unrouted.append)
    request_id = client.request("x", {}, lambda err, res: calls.append(res))
    frame = _frame({"jsonrpc": "2.0", "id": request_id, "result": 1})

    client.feed(frame + frame)

    assert calls == [1]
    assert unrouted == [{"jsonrpc": "2.0", "id": request_id, "result": 1}]


def test_notifications_are_emitted(client: LSPClient) -> None:
    notifications: list[dict] = []
    client.notification_received.connect(notifications.append)
    note = {"jsonrpc": "2.0", "method": "window/logMessage", "params": {"message": "hi"}}

    client.feed(_frame(note))

    assert notifications == [note]


def test_malformed_body_is_skipped(client: LSPClient) -> None:
    calls: list[object] = []
    request_id = client.request("x", {}, lambda err, res: calls.append(res))
    garbage = b"Content-Length: 5\r\n\r\n{oops"

    client.feed(garbage + _frame({"jsonrpc": "2.0", "id": request_id, "result": "ok"}))

    assert calls == ["ok"]


def test_start_requires_command(qt_app) -> None:
    lsp = LSPClient("empty", [])
    with pytest.raises(RuntimeError):
        lsp.start()
    lsp.stop()


def test_stop_clears_handlers_and_can_repeat(client: LSPClient) -> None:
    client.request("textDocument/copilotInlineEdit", {}, lambda error, result: None)

    client.stop()
    client.stop()

    assert client._handlers == {}
    assert not client.is_running()
