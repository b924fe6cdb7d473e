"""Error types for the next-edit pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class NextEditError(Exception):
    """Base class for next-edit failures."""


class ClientUnavailable(NextEditError, RuntimeError):
    """Raised when no backend client can be resolved for a request."""

    def __init__(self, name: str | None = None, matches: int = 0) -> None:
        if matches > 1:
            detail = f"{matches} clients named {name!r}; expected exactly one"
        elif name:
            detail = f"no client named {name!r} is running"
        else:
            detail = "no client given"
        super().__init__(f"Next-edit client not started: {detail}")
        self.name = name
        self.matches = matches


@dataclass(frozen=True)
class ResponseError:
    """JSON-RPC error payload returned by the backend."""

    code: int
    message: str
    data: Any = None

    @classmethod
    def from_lsp(cls, payload: Any) -> "ResponseError":
        if isinstance(payload, ResponseError):
            return payload
        if isinstance(payload, dict):
            return cls(
                code=int(payload.get("code", 0)),
                message=str(payload.get("message", "")),
                data=payload.get("data"),
            )
        return cls(code=0, message=str(payload))
