"""LSP value types shared by the next-edit pipeline.

Character offsets follow the LSP default encoding: UTF-16 code units. Python
strings index by code point, so the helpers at the bottom of this module
convert between the two when slicing line text.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

POSITION_ENCODING = "utf-16"


@dataclass(frozen=True, order=True)
class Position:
    line: int
    character: int

    @classmethod
    def from_lsp(cls, payload: Mapping[str, Any]) -> "Position":
        return cls(line=int(payload.get("line", 0)), character=int(payload.get("character", 0)))

    def to_lsp(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    """Half-open range between two positions."""

    start: Position
    end: Position

    @classmethod
    def from_lsp(cls, payload: Mapping[str, Any]) -> "Range":
        return cls(start=Position.from_lsp(payload.get("start", {})), end=Position.from_lsp(payload.get("end", {})))

    def to_lsp(self) -> dict[str, dict[str, int]]:
        return {"start": self.start.to_lsp(), "end": self.end.to_lsp()}

    @property
    def is_single_line(self) -> bool:
        return self.start.line == self.end.line

    @property
    def is_zero_width(self) -> bool:
        return self.start == self.end


@dataclass(frozen=True)
class Location:
    uri: str
    range: Range

    @classmethod
    def at(cls, uri: str, position: Position) -> "Location":
        return cls(uri=uri, range=Range(position, position))

    def to_lsp(self) -> dict[str, Any]:
        return {"uri": self.uri, "range": self.range.to_lsp()}


@dataclass(frozen=True)
class EditOp:
    """A single proposed replacement of ``range`` by ``replacement_text``."""

    range: Range
    replacement_text: str

    @classmethod
    def from_lsp(cls, payload: Mapping[str, Any]) -> "EditOp":
        # The inline-edit backend sends ``text``; standard TextEdits use ``newText``.
        text = payload.get("text")
        if text is None:
            text = payload.get("newText", "")
        return cls(range=Range.from_lsp(payload.get("range", {})), replacement_text=str(text))

    def to_lsp(self) -> dict[str, Any]:
        return {"range": self.range.to_lsp(), "newText": self.replacement_text}


def utf16_to_index(text: str, offset: int) -> int:
    """Return the string index matching a UTF-16 ``offset`` into ``text``.

    Offsets past the end clamp to ``len(text)``. An offset landing inside a
    surrogate pair rounds up to the following character.
    """

    if offset <= 0:
        return 0
    units = 0
    for index, char in enumerate(text):
        if units >= offset:
            return index
        units += 2 if ord(char) > 0xFFFF else 1
    return len(text)


def index_to_utf16(text: str, index: int) -> int:
    """Return the UTF-16 offset of string index ``index`` in ``text``."""

    prefix = text[: max(index, 0)]
    return sum(2 if ord(char) > 0xFFFF else 1 for char in prefix)
