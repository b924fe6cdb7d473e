"""Test doubles and builders shared across the suite."""
from __future__ import annotations

from typing import Any, Callable

from nextedit.lang.protocol import EditOp, Position, Range


class QueuedScheduler:
    """Collects deferred callbacks so tests decide when the next turn runs."""

    def __init__(self) -> None:
        self.queue: list[Callable[[], None]] = []

    def __call__(self, callback: Callable[[], None]) -> None:
        self.queue.append(callback)

    def flush(self) -> None:
        while self.queue:
            self.queue.pop(0)()


class FakeClient:
    """Records requests instead of talking to a language server."""

    def __init__(self, name: str = "copilot_ls") -> None:
        self.name = name
        self.requests: list[tuple[str, dict, Any]] = []

    def request(self, method: str, params: dict | None, handler=None) -> int:
        self.requests.append((method, params, handler))
        return len(self.requests)

    def respond(self, index: int = -1, error: Any = None, result: Any = None) -> None:
        _method, _params, handler = self.requests[index]
        handler(error, result)


def edit(line: int, start: int, end: int, text: str, end_line: int | None = None) -> EditOp:
    return EditOp(Range(Position(line, start), Position(line if end_line is None else end_line, end)), text)


def lsp_edit(line: int, start: int, end: int, text: str) -> dict:
    return {
        "range": {"start": {"line": line, "character": start}, "end": {"line": line, "character": end}},
        "text": text,
    }
