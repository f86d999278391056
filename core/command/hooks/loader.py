"""Command hook loader - auto-discovers and loads all hook plugins."""

import importlib
import inspect
import logging
from pathlib import Path

from .base import CommandHook

logger = logging.getLogger(__name__)


def load_hooks(
    hooks_dir: Path | str | None = None,
    root: str | None = None,
    **hook_kwargs,
) -> list[CommandHook]:
    """Auto-load all command hook plugins, sorted by priority."""
    hooks_dir = Path(hooks_dir) if hooks_dir else Path(__file__).parent
    hooks: list[CommandHook] = []

    for py_file in sorted(hooks_dir.glob("*.py")):
        if py_file.name.startswith("_") or py_file.name in ["base.py", "loader.py"]:
            continue

        module_name = f"core.command.hooks.{py_file.stem}"
        module = importlib.import_module(module_name)

        for _, obj in inspect.getmembers(module, inspect.isclass):
            if obj is CommandHook or not issubclass(obj, CommandHook) or obj.__module__ != module.__name__:
                continue

            hook_instance = obj(root=root, **hook_kwargs)
            if hook_instance.enabled:
                hooks.append(hook_instance)
                logger.debug("Loaded hook %s (priority=%s)", hook_instance.name, hook_instance.priority)

    hooks.sort(key=lambda h: h.priority)
    logger.info("Loaded %d command hooks", len(hooks))
    return hooks
