"""Base executor class and result types for privileged command execution."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from core.command.renderer import RenderedCommand


@dataclass
class ExecuteResult:
    """Raw result of running one rendered command."""

    exit_code: int
    stdout: str
    stderr: str
    timed_out: bool = False


class BaseExecutor(ABC):
    """Base class for executors that run rendered commands."""

    name: str = "unknown"

    @abstractmethod
    async def execute(self, command: RenderedCommand) -> ExecuteResult:
        """
        Run a command to completion and capture its output.

        Args:
            command: Rendered command (argument vector) to run

        Returns:
            ExecuteResult with exit code, stdout, stderr
        """
        ...
