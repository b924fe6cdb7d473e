"""Informational messages surfaced to the user."""
from __future__ import annotations

from PySide6.QtCore import QObject, Signal


class Notifier(QObject):
    message = Signal(str, str)

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self.history: list[tuple[str, str]] = []

    def info(self, text: str) -> None:
        self.notify(text, "info")

    def notify(self, text: str, level: str = "info") -> None:
        self.history.append((level, text))
        self.message.emit(text, level)
