"""Filesystem intents a client can ask the gateway to carry out.

Intents carry only client-supplied strings. Construction rejects empty
required fields so no command is ever rendered from a blank name.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import StrEnum


class GatewayValidationError(Exception):
    """A request was malformed or missing a required field."""


class IntentKind(StrEnum):
    CREATE_FILE = "create_file"
    CREATE_DIR = "create_dir"
    CREATE_HARDLINK = "create_hardlink"
    CREATE_SYMLINK = "create_symlink"
    READ_FILE = "read_file"
    WRITE_FILE = "write_file"
    DELETE_FILE = "delete_file"
    DELETE_DIR = "delete_dir"
    LIST_DIR = "list_dir"
    CHECK_PERMISSIONS = "check_permissions"
    FETCH_LOGS = "fetch_logs"


# Intents that change directory contents and so require a listing refresh.
MUTATING_KINDS = frozenset(
    {
        IntentKind.CREATE_FILE,
        IntentKind.CREATE_DIR,
        IntentKind.CREATE_HARDLINK,
        IntentKind.CREATE_SYMLINK,
        IntentKind.DELETE_FILE,
        IntentKind.DELETE_DIR,
    }
)


@dataclass(frozen=True)
class Intent:
    """Base class for all intents."""

    kind = IntentKind.LIST_DIR
    # Fields that may legitimately be empty strings.
    optional_fields = ()

    def __post_init__(self) -> None:
        for f in fields(self):
            if f.name in self.optional_fields:
                continue
            value = getattr(self, f.name)
            if not isinstance(value, str):
                raise GatewayValidationError(f"{f.name} must be a string")
            if not value.strip():
                raise GatewayValidationError(f"{f.name} cannot be empty")

    @property
    def mutating(self) -> bool:
        return self.kind in MUTATING_KINDS

    def names(self) -> list[str]:
        """Client-supplied path names carried by this intent."""
        return []


@dataclass(frozen=True)
class _NamedIntent(Intent):
    name: str = ""

    def names(self) -> list[str]:
        return [self.name]


@dataclass(frozen=True)
class _LinkIntent(Intent):
    target: str = ""
    link: str = ""

    def names(self) -> list[str]:
        return [self.target, self.link]


@dataclass(frozen=True)
class CreateFile(_NamedIntent):
    kind = IntentKind.CREATE_FILE


@dataclass(frozen=True)
class CreateDir(_NamedIntent):
    kind = IntentKind.CREATE_DIR


@dataclass(frozen=True)
class CreateHardLink(_LinkIntent):
    kind = IntentKind.CREATE_HARDLINK


@dataclass(frozen=True)
class CreateSymlink(_LinkIntent):
    kind = IntentKind.CREATE_SYMLINK


@dataclass(frozen=True)
class ReadFile(_NamedIntent):
    kind = IntentKind.READ_FILE


@dataclass(frozen=True)
class WriteFile(_NamedIntent):
    kind = IntentKind.WRITE_FILE
    optional_fields = ("content",)

    content: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.content, str):
            raise GatewayValidationError("content must be a string")


@dataclass(frozen=True)
class DeleteFile(_NamedIntent):
    kind = IntentKind.DELETE_FILE


@dataclass(frozen=True)
class DeleteDir(_NamedIntent):
    kind = IntentKind.DELETE_DIR


@dataclass(frozen=True)
class ListDir(Intent):
    kind = IntentKind.LIST_DIR


@dataclass(frozen=True)
class CheckPermissions(_NamedIntent):
    kind = IntentKind.CHECK_PERMISSIONS


@dataclass(frozen=True)
class FetchLogs(Intent):
    kind = IntentKind.FETCH_LOGS
