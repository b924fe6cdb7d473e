"""Lightweight command registry for user-invoked next-edit commands."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List


@dataclass
class CommandDescriptor:
    """Metadata for a command exposed to key bindings and palettes."""

    id: str
    description: str
    category: str
    callback: Callable[..., Any]


class CommandRegistry:
    def __init__(self) -> None:
        self._commands: list[CommandDescriptor] = []

    def register_command(self, command: CommandDescriptor) -> None:
        self._commands = [cmd for cmd in self._commands if cmd.id != command.id]
        self._commands.append(command)

    def get(self, command_id: str) -> CommandDescriptor | None:
        for cmd in self._commands:
            if cmd.id == command_id:
                return cmd
        return None

    def list_commands(self) -> List[CommandDescriptor]:
        return list(self._commands)

    def execute(self, command_id: str, **kwargs: Any) -> Any:
        descriptor = self.get(command_id)
        if descriptor is None:
            raise KeyError(f"Unknown command: {command_id}")
        return descriptor.callback(**kwargs)
