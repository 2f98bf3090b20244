# mocks.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

CommandHandler = Callable[[], Any]


@dataclass
class NoMockError(Exception):
    """A simulated command line matched no registered pattern."""
    command: str

    def __str__(self) -> str:
        return f"No mock found for command: {self.command}"


class CommandMocker:
    """
    Stand-in for a shell: maps command substrings to handlers and records
    step outputs.

    One instance per simulated session; nothing here is thread-safe.
    """

    def __init__(self) -> None:
        self._commands: Dict[str, CommandHandler] = {}
        self._outputs: Dict[str, str] = {}

    def mock_command(self, pattern: str, handler: CommandHandler) -> None:
        # re-registering a pattern replaces its handler but keeps its position
        self._commands[pattern] = handler

    def execute(self, command: str) -> Any:
        for pattern, handler in self._commands.items():
            if pattern in command:
                return handler()
        raise NoMockError(command)

    def set_output(self, key: str, value: str) -> None:
        self._outputs[key] = value

    def get_output(self, key: str) -> Optional[str]:
        return self._outputs.get(key)

    @property
    def outputs(self) -> Dict[str, str]:
        return dict(self._outputs)

    @property
    def patterns(self) -> list[str]:
        return list(self._commands)

    def reset(self) -> None:
        self._commands.clear()
        self._outputs.clear()


class StepAborted(Exception):
    """
    Raised by a handler to fail a simulated step with an arbitrary value.

    The step's error is the value itself when it is a string, else str(value).
    """

    def __init__(self, value: Any):
        super().__init__(value)
        self.value = value

    def __str__(self) -> str:
        return self.value if isinstance(self.value, str) else str(self.value)
