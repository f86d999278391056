"""Per-connection gateway: intents in, classified outcome events out.

Each intent runs as its own task, so a session never waits on an earlier
command before accepting the next one. Responses to overlapping intents
may arrive out of request order; clients that care send a ``request_id``,
which is echoed on every frame produced for that request.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
import uuid
from collections.abc import Awaitable, Callable
from enum import StrEnum
from typing import Any

from backend.web.models.events import OutboundFrame, ServerEvent
from backend.web.services.session_registry import SessionRegistry
from config.schema import DEFAULT_LOG_MARKER, LoginConfig
from core.command.base import BaseExecutor
from core.command.hooks import CommandHook
from core.command.intents import (
    CreateHardLink,
    CreateSymlink,
    FetchLogs,
    Intent,
    IntentKind,
    ListDir,
)
from core.command.outcome import ErrorKind, Outcome, classify
from core.command.renderer import render_command

logger = logging.getLogger(__name__)

EventSink = Callable[[OutboundFrame], Awaitable[None]]

NO_LOGS_MESSAGE = "No relevant logs found."
LOG_ERROR_MESSAGE = "Error fetching logs."


class SessionState(StrEnum):
    CONNECTED = "connected"
    IDLE = "idle"
    AWAITING_EXECUTION = "awaiting_execution"
    DISCONNECTED = "disconnected"


def success_message(intent: Intent) -> str:
    """Status text for a successful non-query intent."""
    kind = intent.kind
    if kind == IntentKind.CREATE_FILE:
        return f"{intent.name} created successfully."
    if kind == IntentKind.CREATE_DIR:
        return f"{intent.name} directory created successfully."
    if isinstance(intent, CreateHardLink):
        return f"Hard link {intent.link} created successfully."
    if isinstance(intent, CreateSymlink):
        return f"Symbolic link {intent.link} created successfully."
    if kind == IntentKind.WRITE_FILE:
        return f"Written to {intent.name} successfully."
    if kind == IntentKind.DELETE_FILE:
        return f"File '{intent.name}' deleted successfully."
    if kind == IntentKind.DELETE_DIR:
        return f"Directory '{intent.name}' deleted successfully."
    raise ValueError(f"No success message for {kind}")


def filter_log_lines(output: str, marker: str) -> str:
    lines = [line for line in output.splitlines() if marker in line]
    return "\n".join(lines)


class SessionGateway:
    """One connected client's gateway."""

    def __init__(
        self,
        executor: BaseExecutor,
        root: str,
        sink: EventSink,
        *,
        registry: SessionRegistry | None = None,
        hooks: list[CommandHook] | None = None,
        login: LoginConfig | None = None,
        log_marker: str = DEFAULT_LOG_MARKER,
        session_id: str | None = None,
    ):
        self.session_id = session_id or f"sess_{uuid.uuid4().hex[:12]}"
        self.executor = executor
        self.root = root
        self.registry = registry
        self.hooks = hooks or []
        self.login_config = login or LoginConfig()
        self.log_marker = log_marker
        self._sink = sink
        self._send_lock = asyncio.Lock()
        self._tasks: set[asyncio.Task] = set()
        self._log_poll: asyncio.Task | None = None
        self._started = False
        self._closed = False

    # ── lifecycle ──

    @property
    def state(self) -> SessionState:
        if self._closed:
            return SessionState.DISCONNECTED
        if self._tasks:
            return SessionState.AWAITING_EXECUTION
        return SessionState.IDLE if self._started else SessionState.CONNECTED

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> None:
        if self.registry is not None:
            self.registry.add(self)

    def close(self) -> None:
        """Stop delivering events. In-flight commands still run to completion."""
        self._closed = True
        if self.registry is not None:
            self.registry.remove(self)
        if self._tasks:
            logger.info("Session %s closed with %d command(s) still running", self.session_id, len(self._tasks))

    async def wait_idle(self) -> None:
        """Wait until every submitted intent has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ── outbound ──

    async def send(self, frame: OutboundFrame) -> None:
        if self._closed:
            return
        async with self._send_lock:
            try:
                await self._sink(frame)
            except Exception as e:
                logger.debug("Session %s send failed, dropping connection: %s", self.session_id, e)
                self._closed = True

    async def send_error(self, message: str, kind: ErrorKind, request_id: str | None = None) -> None:
        await self.send(OutboundFrame(event=ServerEvent.ERROR, data=message, kind=kind, request_id=request_id))

    # ── inbound ──

    def submit(self, intent: Intent, request_id: str | None = None) -> asyncio.Task:
        """Start handling ``intent`` without waiting for it."""
        self._started = True
        task = asyncio.create_task(self.handle(intent, request_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def poll_logs(self) -> bool:
        """Submit a FetchLogs intent unless the previous one is still running."""
        if self._log_poll is not None and not self._log_poll.done():
            return False
        self._log_poll = self.submit(FetchLogs())
        return True

    async def handle(self, intent: Intent, request_id: str | None = None) -> None:
        """Run one intent and emit its terminal event (plus a listing refresh if mutating)."""
        try:
            outcome = await self.execute(intent)
            await self.send(self.outcome_frame(intent, outcome, request_id))
        except Exception as e:
            logger.exception("Session %s: %s intent failed unexpectedly", self.session_id, intent.kind)
            await self.send_error(f"Error: {e}", ErrorKind.EXECUTION_FAILURE, request_id)

        if intent.mutating:
            await self.refresh_listing(request_id)

    async def execute(self, intent: Intent) -> Outcome:
        """Render, vet, run and classify one intent."""
        command = render_command(intent, self.root)
        context: dict[str, Any] = {"session_id": self.session_id, "root": self.root}

        for hook in self.hooks:
            result = hook.check_command(intent, command, context)
            if not result.allow:
                logger.warning(
                    "Session %s: %s blocked by %s %s", self.session_id, intent.kind, hook.name, result.metadata or {}
                )
                return Outcome.failure(result.error_message, ErrorKind.VALIDATION)
            if not result.continue_chain:
                break

        outcome = classify(await self.executor.execute(command), command)

        for hook in self.hooks:
            if outcome.ok:
                hook.on_command_success(command, outcome.output, context)
            else:
                hook.on_command_error(command, outcome.message, context)
        return outcome

    async def refresh_listing(self, request_id: str | None = None) -> None:
        """List the root and push it to every connected session."""
        try:
            outcome = await self.execute(ListDir())
        except Exception as e:
            logger.exception("Session %s: listing refresh failed", self.session_id)
            await self.send_error(f"Error: {e}", ErrorKind.EXECUTION_FAILURE, request_id)
            return

        if not outcome.ok:
            await self.send_error(outcome.message, outcome.kind or ErrorKind.EXECUTION_FAILURE, request_id)
            return

        frame = OutboundFrame(event=ServerEvent.DIR_UPDATED, data=outcome.output, request_id=request_id)
        if self.registry is None:
            await self.send(frame)
        else:
            await self.registry.broadcast(frame, origin=self)

    def outcome_frame(self, intent: Intent, outcome: Outcome, request_id: str | None = None) -> OutboundFrame:
        kind = intent.kind

        if kind == IntentKind.FETCH_LOGS:
            if not outcome.ok:
                logger.debug("Session %s: log fetch failed: %s", self.session_id, outcome.message)
                text = LOG_ERROR_MESSAGE
            else:
                text = filter_log_lines(outcome.output, self.log_marker) or NO_LOGS_MESSAGE
            return OutboundFrame(event=ServerEvent.KERNEL_LOGS, data=text, request_id=request_id)

        if not outcome.ok:
            return OutboundFrame(
                event=ServerEvent.ERROR,
                data=outcome.message,
                kind=outcome.kind or ErrorKind.EXECUTION_FAILURE,
                request_id=request_id,
            )

        if kind == IntentKind.READ_FILE:
            data = {"fileName": intent.name, "content": outcome.output}
            return OutboundFrame(event=ServerEvent.FILE_READ, data=data, request_id=request_id)
        if kind == IntentKind.LIST_DIR:
            return OutboundFrame(event=ServerEvent.DIR_UPDATED, data=outcome.output, request_id=request_id)
        if kind == IntentKind.CHECK_PERMISSIONS:
            return OutboundFrame(
                event=ServerEvent.PERMISSION_RESULT,
                data=outcome.output.strip(),
                request_id=request_id,
            )
        return OutboundFrame(event=ServerEvent.SUCCESS, data=success_message(intent), request_id=request_id)

    # ── login ──

    def login(self, user: str, password: str) -> bool:
        """Check the configured credential pair. Not an authorization gate."""
        expected = self.login_config.password.get_secret_value()
        if not expected:
            return False
        user_ok = secrets.compare_digest(user.encode(), self.login_config.user.encode())
        pass_ok = secrets.compare_digest(password.encode(), expected.encode())
        ok = user_ok and pass_ok
        logger.info("Session %s login as %r: %s", self.session_id, user, "ok" if ok else "rejected")
        return ok
