"""Command Hooks Plugin System."""

from core.command.hooks.base import CommandHook, HookResult
from core.command.hooks.loader import load_hooks

__all__ = ["CommandHook", "HookResult", "load_hooks"]
