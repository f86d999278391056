"""Path scope hook - flags client names that can leave the fixed root."""

import logging
from typing import Any

from core.command.intents import Intent
from core.command.renderer import RenderedCommand

from .base import CommandHook, HookResult

logger = logging.getLogger(__name__)


def escapes_root(name: str) -> bool:
    """True if ``name`` is absolute or has a ``..`` path segment."""
    if name.startswith("/"):
        return True
    return ".." in name.split("/")


class PathScopeHook(CommandHook):
    """Path scope hook.

    Names are joined under the root verbatim, so ``../`` segments reach
    outside it. By default such names are only logged; ``confine_to_root``
    turns the warning into a block.
    """

    priority = 10
    name = "PathScope"
    description = "Flag or block names that escape the fixed root"

    def __init__(self, root: str | None = None, confine_to_root: bool = False, **kwargs):
        super().__init__(root, **kwargs)
        self.confine_to_root = confine_to_root

    def check_command(self, intent: Intent, command: RenderedCommand, context: dict[str, Any]) -> HookResult:
        escaping = [n for n in intent.names() if escapes_root(n)]
        if not escaping:
            return HookResult.allow_command()

        if self.confine_to_root:
            return HookResult.block_command(
                error_message=f"Error: '{escaping[0]}' is outside {self.root}.",
                metadata={"names": escaping},
            )

        logger.warning(
            "Name(s) %s in %s intent escape root %s (session=%s)",
            escaping,
            intent.kind,
            self.root,
            context.get("session_id"),
        )
        return HookResult.allow_command(metadata={"names": escaping})


__all__ = ["PathScopeHook", "escapes_root"]
