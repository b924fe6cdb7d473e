"""JSON-RPC client for talking to the next-edit language server."""
from __future__ import annotations

import json
import logging
from typing import Any, Callable

from PySide6.QtCore import QByteArray, QObject, QProcess, Signal
from shiboken6 import isValid

from nextedit.core.errors import ResponseError

logger = logging.getLogger(__name__)

ResponseHandler = Callable[[ResponseError | None, Any], None]


class LSPClient(QObject):
    """Starts a language server process and routes JSON-RPC responses.

    Every request may carry a single-shot continuation, called as
    ``handler(error, result)`` once the matching response arrives.
    """

    response_received = Signal(dict)
    notification_received = Signal(dict)
    started = Signal()

    def __init__(self, name: str, command: list[str], workdir: str | None = None, parent=None) -> None:
        super().__init__(parent)
        self.name = name
        self.command = command
        self.workdir = workdir
        self.process = QProcess(self)
        self._id_counter = 0
        self._buffer = b""
        self._handlers: dict[int, ResponseHandler] = {}

        self.process.readyReadStandardOutput.connect(self._on_ready_read)
        self.process.started.connect(self._on_started)
        self.process.errorOccurred.connect(self._on_error)
        self._connected = True

    def start(self) -> None:
        if not self.command:
            raise RuntimeError(f"No command configured for LSP client {self.name!r}")
        program, *args = self.command
        self.process.setWorkingDirectory(self.workdir or "")
        logger.info("Starting LSP client %s: %r %r", self.name, program, args)
        self.process.start(program, args)

    def stop(self) -> None:
        if not isValid(self.process):
            return
        if self.process.state() == QProcess.Running:
            try:
                self.send_request("shutdown", {})
                self.send_notification("exit", {})
            except Exception:
                logger.debug("Failed to send LSP shutdown sequence", exc_info=True)
            self.process.terminate()
            if not self.process.waitForFinished(2000):
                logger.warning("LSP client %s did not terminate gracefully; killing process", self.name)
                self.process.kill()
                self.process.waitForFinished(1000)
        self._handlers.clear()
        if not self._connected:
            return
        self._connected = False
        for signal, slot in (
            (self.process.readyReadStandardOutput, self._on_ready_read),
            (self.process.started, self._on_started),
            (self.process.errorOccurred, self._on_error),
        ):
            try:
                signal.disconnect(slot)
            except (RuntimeError, TypeError):
                logger.debug("LSP client %s signal already disconnected", self.name, exc_info=True)

    def is_running(self) -> bool:
        return isValid(self.process) and self.process.state() == QProcess.Running

    def request(self, method: str, params: dict[str, Any] | None, handler: ResponseHandler | None = None) -> int:
        """Send a request and register ``handler`` as its continuation."""

        request_id = self.send_request(method, params)
        if handler is not None:
            self._handlers[request_id] = handler
        return request_id

    def send_request(self, method: str, params: dict[str, Any] | None = None) -> int:
        self._id_counter += 1
        payload: dict[str, Any] = {"jsonrpc": "2.0", "id": self._id_counter, "method": method}
        if params is not None:
            payload["params"] = params
        self._send_payload(payload)
        return self._id_counter

    def send_notification(self, method: str, params: dict[str, Any] | None = None) -> None:
        payload: dict[str, Any] = {"jsonrpc": "2.0", "method": method}
        if params is not None:
            payload["params"] = params
        self._send_payload(payload)

    # JSON-RPC plumbing
    def _send_payload(self, payload: dict[str, Any]) -> None:
        data = json.dumps(payload).encode("utf-8")
        message = f"Content-Length: {len(data)}\r\n\r\n".encode("utf-8") + data
        self.process.write(QByteArray(message))
        logger.debug("LSP %s -> %s", self.name, payload)

    def _on_started(self) -> None:  # pragma: no cover - Qt started callback
        logger.info("LSP client %s started", self.name)
        self.started.emit()

    def _on_ready_read(self) -> None:
        if not self.is_running():
            logger.debug("Ignoring output from stopped LSP client %s", self.name)
            return
        self.feed(bytes(self.process.readAllStandardOutput()))

    def feed(self, data: bytes) -> None:
        """Append raw server output and dispatch every complete message."""

        self._buffer += data
        while True:
            message, rest = self._extract_message(self._buffer)
            if message is None:
                self._buffer = rest
                break
            self._buffer = rest
            self._handle_message(message)

    def _extract_message(self, data: bytes) -> tuple[dict[str, Any] | None, bytes]:
        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            return None, data
        headers = data[:header_end].decode("utf-8", errors="ignore")
        content_length = 0
        for line in headers.split("\r\n"):
            if line.lower().startswith("content-length"):
                try:
                    content_length = int(line.split(":")[1].strip())
                except (ValueError, IndexError):
                    pass
        body_start = header_end + 4
        if len(data) < body_start + content_length:
            return None, data
        body = data[body_start : body_start + content_length]
        try:
            return json.loads(body.decode("utf-8")), data[body_start + content_length :]
        except json.JSONDecodeError:
            logger.warning("Failed to decode LSP message: %s", body)
            # Skip the malformed body and keep reading what follows.
            return self._extract_message(data[body_start + content_length :])

    def _handle_message(self, message: dict[str, Any]) -> None:
        logger.debug("LSP %s <- %s", self.name, message)
        if "id" in message and "method" not in message:
            handler = self._handlers.pop(message["id"], None)
            if handler is None:
                self.response_received.emit(message)
                return
            error = message.get("error")
            handler(ResponseError.from_lsp(error) if error is not None else None, message.get("result"))
        elif "method" in message:
            self.notification_received.emit(message)

    def _on_error(self, error) -> None:  # pragma: no cover - Qt error callback
        if error == QProcess.ProcessError.FailedToStart:
            logger.error("LSP client %s failed to start: %r", self.name, self.command)
        else:
            logger.error("LSP client %s process error: %s", self.name, error)
