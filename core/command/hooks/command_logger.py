"""Command logger hook - audits every privileged command and its result."""

import logging
from typing import Any

from core.command.intents import Intent, IntentKind
from core.command.renderer import RenderedCommand

from .base import CommandHook, HookResult

audit_logger = logging.getLogger("fsgate.audit")

# Periodic log polling would flood the audit trail.
_QUIET_KINDS = frozenset({IntentKind.FETCH_LOGS, IntentKind.LIST_DIR})


class CommandLoggerHook(CommandHook):
    """Command logger hook - logs commands and outcomes to the audit logger."""

    priority = 50
    name = "CommandLogger"
    description = "Log all privileged commands to the audit logger"

    def __init__(self, root: str | None = None, audit: bool = True, **kwargs):
        super().__init__(root, **kwargs)
        self.enabled = audit

    def _level(self, command: RenderedCommand) -> int:
        return logging.DEBUG if command.kind in _QUIET_KINDS else logging.INFO

    def check_command(self, intent: Intent, command: RenderedCommand, context: dict[str, Any]) -> HookResult:
        audit_logger.log(
            self._level(command),
            "COMMAND session=%s kind=%s: %s",
            context.get("session_id"),
            command.kind,
            command.display,
        )
        return HookResult.allow_command()

    def on_command_success(self, command: RenderedCommand, output: str, context: dict[str, Any]) -> None:
        audit_logger.log(
            self._level(command),
            "SUCCESS session=%s kind=%s",
            context.get("session_id"),
            command.kind,
        )

    def on_command_error(self, command: RenderedCommand, error: str, context: dict[str, Any]) -> None:
        audit_logger.warning(
            "ERROR session=%s kind=%s: %s",
            context.get("session_id"),
            command.kind,
            error[:200].replace("\n", " "),
        )


__all__ = ["CommandLoggerHook"]
