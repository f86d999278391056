"""Pydantic models for the WebSocket event protocol."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.command.intents import (
    CheckPermissions,
    CreateDir,
    CreateFile,
    CreateHardLink,
    CreateSymlink,
    DeleteDir,
    DeleteFile,
    FetchLogs,
    GatewayValidationError,
    Intent,
    ListDir,
    ReadFile,
    WriteFile,
)
from core.command.outcome import ErrorKind


class ClientEvent(StrEnum):
    CREATE_FILE = "create-file"
    CREATE_DIR = "create-dir"
    CREATE_HARDLINK = "create-hardlink"
    CREATE_SYMLINK = "create-symlink"
    READ_FILE = "read-file"
    WRITE_FILE = "write-file"
    DELETE_FILE = "deleteFile"
    DELETE_DIR = "deleteDirectory"
    REFRESH_DIR = "refresh-dir"
    CHECK_PERMISSIONS = "check-permissions"
    GET_KERNEL_LOGS = "get-kernel-logs"
    LOGIN = "login"


class ServerEvent(StrEnum):
    DIR_UPDATED = "dir-updated"
    FILE_READ = "file-read"
    SUCCESS = "success"
    ERROR = "error"
    PERMISSION_RESULT = "permission-result"
    KERNEL_LOGS = "kernel-logs"
    ACK = "ack"


EVENT_ALIASES: dict[str, ClientEvent] = {
    "delete-file": ClientEvent.DELETE_FILE,
    "delete_file": ClientEvent.DELETE_FILE,
    "delete-dir": ClientEvent.DELETE_DIR,
    "delete-directory": ClientEvent.DELETE_DIR,
    "delete_dir": ClientEvent.DELETE_DIR,
}


class InboundFrame(BaseModel):
    """One client -> gateway frame."""

    event: str
    args: list[Any] = Field(default_factory=list)
    data: Any = None
    request_id: str | None = None
    ack: int | None = None

    def client_event(self) -> ClientEvent:
        if self.event in EVENT_ALIASES:
            return EVENT_ALIASES[self.event]
        try:
            return ClientEvent(self.event)
        except ValueError as e:
            raise GatewayValidationError(f"Unknown event: {self.event}") from e


class OutboundFrame(BaseModel):
    """One gateway -> client frame."""

    event: ServerEvent
    data: Any = None
    request_id: str | None = None
    kind: ErrorKind | None = None
    ack: int | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class NamePayload(BaseModel):
    name: str


class WriteFilePayload(BaseModel):
    file_name: str = Field(alias="fileName")
    content: str = ""

    model_config = ConfigDict(populate_by_name=True)


class LoginPayload(BaseModel):
    user: str = ""
    password: str = Field("", alias="pass")

    model_config = ConfigDict(populate_by_name=True)


def _positional(frame: InboundFrame, count: int, keys: tuple[str, ...]) -> list[Any]:
    """Collect ``count`` values from args, a bare data string, or data keys."""
    if len(frame.args) >= count:
        return frame.args[:count]
    if count == 1 and isinstance(frame.data, str):
        return [frame.data]
    if isinstance(frame.data, dict):
        if count == 1:
            return [next((frame.data[k] for k in keys if k in frame.data), None)]
        return [frame.data.get(k) for k in keys]
    raise GatewayValidationError(f"{frame.event} expects {count} argument(s)")


def _model(frame: InboundFrame, model: type[BaseModel]) -> BaseModel:
    data = frame.data
    if data is None and frame.args and isinstance(frame.args[0], dict):
        data = frame.args[0]
    if not isinstance(data, dict):
        raise GatewayValidationError(f"{frame.event} expects an object payload")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise GatewayValidationError(f"{frame.event}: invalid or missing field(s): {fields}") from e


def frame_to_intent(frame: InboundFrame) -> Intent:
    """Translate an inbound frame into an intent.

    Raises:
        GatewayValidationError: unknown event, wrong shape or empty fields
    """
    event = frame.client_event()

    if event == ClientEvent.CREATE_FILE:
        return CreateFile(*_positional(frame, 1, ("name", "fileName")))
    if event == ClientEvent.CREATE_DIR:
        return CreateDir(*_positional(frame, 1, ("name", "fileName")))
    if event == ClientEvent.READ_FILE:
        return ReadFile(*_positional(frame, 1, ("fileName", "name")))
    if event == ClientEvent.CHECK_PERMISSIONS:
        return CheckPermissions(*_positional(frame, 1, ("name", "fileName")))
    if event == ClientEvent.CREATE_HARDLINK:
        return CreateHardLink(*_positional(frame, 2, ("target", "link")))
    if event == ClientEvent.CREATE_SYMLINK:
        return CreateSymlink(*_positional(frame, 2, ("target", "link")))
    if event == ClientEvent.WRITE_FILE:
        payload = _model(frame, WriteFilePayload)
        return WriteFile(name=payload.file_name, content=payload.content)
    if event == ClientEvent.DELETE_FILE:
        return DeleteFile(name=_model(frame, NamePayload).name)
    if event == ClientEvent.DELETE_DIR:
        return DeleteDir(name=_model(frame, NamePayload).name)
    if event == ClientEvent.REFRESH_DIR:
        return ListDir()
    if event == ClientEvent.GET_KERNEL_LOGS:
        return FetchLogs()
    raise GatewayValidationError(f"{frame.event} is not a filesystem intent")
