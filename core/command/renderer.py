"""Render intents into privileged commands scoped under the fixed root.

Single-step operations become plain argument vectors. Guarded operations
need shell conditionals, so they run a constant ``bash -c`` script and pass
the client strings as positional parameters; client text is never spliced
into shell source.
"""

from __future__ import annotations

import shlex
from collections.abc import Callable
from dataclasses import dataclass

from core.command.intents import (
    CheckPermissions,
    CreateDir,
    CreateFile,
    CreateHardLink,
    CreateSymlink,
    DeleteDir,
    DeleteFile,
    FetchLogs,
    Intent,
    IntentKind,
    ListDir,
    ReadFile,
    WriteFile,
)

# $0 for guarded scripts, shows up in bash diagnostics.
SCRIPT_NAME = "fsgate"

# Exit statuses for the guarded scripts' own refusals. Tools they run
# (rm, rmdir, the redirect) exit 1 and are classified from their stderr.
EXIT_NOT_FOUND = 2
EXIT_WRONG_TYPE = 3
EXIT_NOT_EMPTY = 4

# $1 = path, $2 = name as given by the client, $3 = content
WRITE_FILE_SCRIPT = f"""\
if [ -f "$1" ]; then
  printf '%s' "$3" > "$1"
elif [ -d "$1" ]; then
  printf "'%s' is a directory.\\n" "$2" >&2
  exit {EXIT_WRONG_TYPE}
else
  printf "File '%s' does not exist.\\n" "$2" >&2
  exit {EXIT_NOT_FOUND}
fi
"""

DELETE_FILE_SCRIPT = f"""\
if [ ! -e "$1" ] && [ ! -L "$1" ]; then
  printf "'%s' does not exist.\\n" "$2" >&2
  exit {EXIT_NOT_FOUND}
elif [ -d "$1" ]; then
  printf "'%s' is a directory, not a file.\\n" "$2" >&2
  exit {EXIT_WRONG_TYPE}
else
  rm -- "$1"
fi
"""

DELETE_DIR_SCRIPT = f"""\
if [ ! -e "$1" ]; then
  printf "'%s' does not exist.\\n" "$2" >&2
  exit {EXIT_NOT_FOUND}
elif [ ! -d "$1" ]; then
  printf "'%s' is not a directory.\\n" "$2" >&2
  exit {EXIT_WRONG_TYPE}
elif [ -n "$(ls -A -- "$1")" ]; then
  printf "Directory '%s' is not empty.\\n" "$2" >&2
  exit {EXIT_NOT_EMPTY}
else
  rmdir -- "$1"
fi
"""

GUARDED_KINDS = frozenset({IntentKind.WRITE_FILE, IntentKind.DELETE_FILE, IntentKind.DELETE_DIR})


@dataclass(frozen=True)
class RenderedCommand:
    """An immutable argument vector ready to be run under elevation.

    ``paths`` holds the scoped paths built from client names, so failure
    text can be classified without matching inside them.
    """

    argv: tuple[str, ...]
    kind: IntentKind
    paths: tuple[str, ...] = ()

    @property
    def guarded(self) -> bool:
        return self.kind in GUARDED_KINDS

    @property
    def display(self) -> str:
        """Shell-quoted form, for logs only."""
        return shlex.join(self.argv)

    def __str__(self) -> str:
        return self.display


def scoped_path(root: str, name: str) -> str:
    """Join a client name under root exactly as given (no normalization)."""
    return f"{root.rstrip('/')}/{name}"


def _script(script: str, *params: str) -> tuple[str, ...]:
    return ("bash", "-c", script, SCRIPT_NAME, *params)


def _create_file(intent: CreateFile, root: str) -> tuple[str, ...]:
    return ("touch", "--", scoped_path(root, intent.name))


def _create_dir(intent: CreateDir, root: str) -> tuple[str, ...]:
    return ("mkdir", "--", scoped_path(root, intent.name))


def _create_hardlink(intent: CreateHardLink, root: str) -> tuple[str, ...]:
    return ("ln", "--", scoped_path(root, intent.target), scoped_path(root, intent.link))


def _create_symlink(intent: CreateSymlink, root: str) -> tuple[str, ...]:
    return ("ln", "-s", "--", scoped_path(root, intent.target), scoped_path(root, intent.link))


def _read_file(intent: ReadFile, root: str) -> tuple[str, ...]:
    return ("cat", "--", scoped_path(root, intent.name))


def _write_file(intent: WriteFile, root: str) -> tuple[str, ...]:
    return _script(WRITE_FILE_SCRIPT, scoped_path(root, intent.name), intent.name, intent.content)


def _delete_file(intent: DeleteFile, root: str) -> tuple[str, ...]:
    return _script(DELETE_FILE_SCRIPT, scoped_path(root, intent.name), intent.name)


def _delete_dir(intent: DeleteDir, root: str) -> tuple[str, ...]:
    return _script(DELETE_DIR_SCRIPT, scoped_path(root, intent.name), intent.name)


def _list_dir(intent: ListDir, root: str) -> tuple[str, ...]:
    return ("ls", "-li", "--", root)


def _check_permissions(intent: CheckPermissions, root: str) -> tuple[str, ...]:
    return ("ls", "-ld", "--", scoped_path(root, intent.name))


def _fetch_logs(intent: FetchLogs, root: str) -> tuple[str, ...]:
    # Marker filtering is done on the captured output by the caller.
    return ("dmesg",)


_RENDERERS: dict[IntentKind, Callable[[Intent, str], tuple[str, ...]]] = {
    IntentKind.CREATE_FILE: _create_file,
    IntentKind.CREATE_DIR: _create_dir,
    IntentKind.CREATE_HARDLINK: _create_hardlink,
    IntentKind.CREATE_SYMLINK: _create_symlink,
    IntentKind.READ_FILE: _read_file,
    IntentKind.WRITE_FILE: _write_file,
    IntentKind.DELETE_FILE: _delete_file,
    IntentKind.DELETE_DIR: _delete_dir,
    IntentKind.LIST_DIR: _list_dir,
    IntentKind.CHECK_PERMISSIONS: _check_permissions,
    IntentKind.FETCH_LOGS: _fetch_logs,
}


def render_command(intent: Intent, root: str) -> RenderedCommand:
    """Render an intent into a command operating under ``root``."""
    try:
        render = _RENDERERS[intent.kind]
    except KeyError as e:
        raise ValueError(f"No renderer for intent kind: {intent.kind}") from e
    paths = tuple(scoped_path(root, name) for name in intent.names())
    return RenderedCommand(argv=render(intent, root), kind=intent.kind, paths=paths)
