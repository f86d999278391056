"""Reduction of raw execution results into Success/Failure outcomes.

Classification order:
1. Non-zero exit code, a timeout, or a denied elevation in stderr -> Failure,
   message = ``Error: `` + stderr.
2. Anything else -> Success, message = stdout (or ``Success`` if empty).

Exit code 0 with unrelated stderr text is still a Success; guarded
commands signal logical failures through their exit status.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from core.command.base import ExecuteResult
from core.command.renderer import EXIT_NOT_EMPTY, EXIT_NOT_FOUND, EXIT_WRONG_TYPE, RenderedCommand

DENIED_MARKER = "Permission denied"
SUCCESS_SENTINEL = "Success"
ERROR_PREFIX = "Error:"


class ErrorKind(StrEnum):
    VALIDATION = "validation"
    PRIVILEGE_DENIED = "privilege_denied"
    NOT_FOUND = "not_found"
    WRONG_TYPE = "wrong_type"
    NOT_EMPTY = "not_empty"
    ALREADY_EXISTS = "already_exists"
    TIMEOUT = "timeout"
    EXECUTION_FAILURE = "execution_failure"


# First match wins; checked against the failure text case-insensitively.
_KIND_PATTERNS: list[tuple[ErrorKind, re.Pattern[str]]] = [
    (
        ErrorKind.PRIVILEGE_DENIED,
        re.compile(
            r"permission denied|incorrect password|a password is required|"
            r"not in the sudoers|sorry, try again|operation not permitted",
            re.IGNORECASE,
        ),
    ),
    (ErrorKind.NOT_EMPTY, re.compile(r"not empty", re.IGNORECASE)),
    (ErrorKind.ALREADY_EXISTS, re.compile(r"file exists|already exists", re.IGNORECASE)),
    (
        ErrorKind.WRONG_TYPE,
        re.compile(r"is a directory|not a directory|not a file", re.IGNORECASE),
    ),
    (
        ErrorKind.NOT_FOUND,
        re.compile(r"does not exist|no such file or directory|cannot access", re.IGNORECASE),
    ),
]


_GUARDED_STATUS_KINDS = {
    EXIT_NOT_FOUND: ErrorKind.NOT_FOUND,
    EXIT_WRONG_TYPE: ErrorKind.WRONG_TYPE,
    EXIT_NOT_EMPTY: ErrorKind.NOT_EMPTY,
}


@dataclass(frozen=True)
class Outcome:
    """Classified result of one command.

    ``message`` is the human-readable text for status events; ``output`` is
    the untouched stdout for data-bearing events (an empty file reads as "").
    """

    ok: bool
    message: str
    output: str = ""
    kind: ErrorKind | None = None

    @classmethod
    def success(cls, output: str) -> Outcome:
        return cls(ok=True, message=output or SUCCESS_SENTINEL, output=output)

    @classmethod
    def failure(cls, message: str, kind: ErrorKind = ErrorKind.EXECUTION_FAILURE) -> Outcome:
        if not message.startswith(ERROR_PREFIX):
            message = f"{ERROR_PREFIX} {message}"
        return cls(ok=False, message=message, kind=kind)


def classify_error_kind(text: str) -> ErrorKind:
    """Map failure text onto the error taxonomy."""
    for kind, pattern in _KIND_PATTERNS:
        if pattern.search(text):
            return kind
    return ErrorKind.EXECUTION_FAILURE


def _without_paths(text: str, paths: tuple[str, ...]) -> str:
    # Longest first so a path never leaves a fragment of a longer one behind.
    for path in sorted(paths, key=len, reverse=True):
        text = text.replace(path, "")
    return text


def classify(result: ExecuteResult, command: RenderedCommand | None = None) -> Outcome:
    """Reduce a raw execution result to an Outcome.

    When ``command`` is given, guarded refusals are classified by exit
    status and client paths are removed before matching tool stderr, so a
    name such as ``not empty`` cannot pick the kind.
    """
    stderr = result.stderr.strip()
    if result.timed_out:
        return Outcome.failure(stderr or "Command timed out", ErrorKind.TIMEOUT)

    tool_text = _without_paths(stderr, command.paths) if command is not None else stderr
    if result.exit_code != 0 or DENIED_MARKER in tool_text:
        kind = None
        if command is not None and command.guarded:
            kind = _GUARDED_STATUS_KINDS.get(result.exit_code)
        return Outcome.failure(stderr, kind or classify_error_kind(tool_text))
    return Outcome.success(result.stdout)
