"""Base class definition for privileged command hooks."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from core.command.intents import Intent
from core.command.renderer import RenderedCommand


@dataclass
class HookResult:
    """Hook execution result."""

    allow: bool
    error_message: str = ""
    continue_chain: bool = True
    metadata: dict[str, Any] | None = None

    @classmethod
    def allow_command(cls, metadata: dict[str, Any] | None = None) -> "HookResult":
        return cls(allow=True, continue_chain=True, metadata=metadata)

    @classmethod
    def block_command(
        cls,
        error_message: str,
        continue_chain: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> "HookResult":
        return cls(allow=False, error_message=error_message, continue_chain=continue_chain, metadata=metadata)


class CommandHook(ABC):
    """Base class for command hook plugins. Hooks are executed by priority (lower numbers first)."""

    priority: int = 100
    name: str = "UnnamedHook"
    description: str = ""
    enabled: bool = True

    def __init__(self, root: str | None = None, **kwargs):
        self.root = root
        self.config = kwargs

    @abstractmethod
    def check_command(self, intent: Intent, command: RenderedCommand, context: dict[str, Any]) -> HookResult:
        """Check if command is allowed to execute."""
        pass

    def on_command_success(self, command: RenderedCommand, output: str, context: dict[str, Any]) -> None:
        """Optional callback after successful command execution."""
        pass

    def on_command_error(self, command: RenderedCommand, error: str, context: dict[str, Any]) -> None:
        """Optional callback after failed command execution."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name}, priority={self.priority}, enabled={self.enabled})>"
