"""Privileged command execution: intents, rendering, execution, classification."""

from .base import BaseExecutor, ExecuteResult
from .dispatcher import get_executor
from .hooks import CommandHook, HookResult, load_hooks
from .intents import GatewayValidationError, Intent, IntentKind
from .outcome import ErrorKind, Outcome, classify
from .renderer import RenderedCommand, render_command

__all__ = [
    "BaseExecutor",
    "CommandHook",
    "ErrorKind",
    "ExecuteResult",
    "GatewayValidationError",
    "HookResult",
    "Intent",
    "IntentKind",
    "Outcome",
    "RenderedCommand",
    "classify",
    "get_executor",
    "load_hooks",
    "render_command",
]
