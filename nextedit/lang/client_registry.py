"""Lookup of running backend clients by identity or name."""
from __future__ import annotations

import logging
from typing import Any, Protocol

from nextedit.core.errors import ClientUnavailable

logger = logging.getLogger(__name__)


class RequestClient(Protocol):
    """The slice of a language client the next-edit request path uses."""

    name: str

    def request(self, method: str, params: dict[str, Any] | None, handler=None) -> int:
        ...


class ClientRegistry:
    """Tracks attached clients so commands can resolve them by name."""

    def __init__(self) -> None:
        self._clients: list[RequestClient] = []

    def register(self, client: RequestClient) -> None:
        if client not in self._clients:
            self._clients.append(client)

    def unregister(self, client: RequestClient) -> None:
        if client in self._clients:
            self._clients.remove(client)

    def get_clients(self, name: str | None = None) -> list[RequestClient]:
        if name is None:
            return list(self._clients)
        return [client for client in self._clients if client.name == name]

    def resolve(self, client: RequestClient | str | None) -> RequestClient:
        """Return the client to use, failing hard when none can be found."""

        if client is None:
            raise ClientUnavailable()
        if not isinstance(client, str):
            return client
        matches = self.get_clients(client)
        if len(matches) != 1:
            logger.error("Cannot resolve next-edit client %r (%d matches)", client, len(matches))
            raise ClientUnavailable(client, len(matches))
        return matches[0]
