"""WebSocket event channel: one long-lived connection per client."""

import logging

from fastapi import APIRouter, WebSocket
from pydantic import ValidationError

from backend.web.models.events import (
    ClientEvent,
    InboundFrame,
    LoginPayload,
    OutboundFrame,
    ServerEvent,
    frame_to_intent,
)
from backend.web.services.session_gateway import SessionGateway
from core.command.intents import GatewayValidationError
from core.command.outcome import ErrorKind

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


def create_session(websocket: WebSocket) -> SessionGateway:
    state = websocket.app.state
    settings = state.settings

    async def sink(frame: OutboundFrame) -> None:
        await websocket.send_json(frame.to_wire())

    return SessionGateway(
        executor=state.executor,
        root=settings.root,
        sink=sink,
        registry=state.registry,
        hooks=state.hooks,
        login=settings.login,
        log_marker=settings.logs.marker,
    )


async def dispatch_frame(session: SessionGateway, raw: str) -> None:
    """Parse one inbound frame and hand it to the session. Never raises on bad input."""
    try:
        frame = InboundFrame.model_validate_json(raw)
    except ValidationError as e:
        await session.send_error(f"Error: malformed frame: {e.error_count()} problem(s)", ErrorKind.VALIDATION)
        return

    try:
        if frame.client_event() == ClientEvent.LOGIN:
            await _handle_login(session, frame)
            return
        intent = frame_to_intent(frame)
    except GatewayValidationError as e:
        await session.send_error(f"Error: {e}", ErrorKind.VALIDATION, frame.request_id)
        return

    session.submit(intent, frame.request_id)


async def _handle_login(session: SessionGateway, frame: InboundFrame) -> None:
    data = frame.data if isinstance(frame.data, dict) else (frame.args[0] if frame.args else {})
    try:
        payload = LoginPayload.model_validate(data)
    except ValidationError:
        payload = None
    success = payload is not None and session.login(payload.user, payload.password)
    await session.send(
        OutboundFrame(event=ServerEvent.ACK, data={"success": success}, ack=frame.ack, request_id=frame.request_id)
    )


async def _next_frame(websocket: WebSocket, session: SessionGateway) -> str | None:
    """Return the next text payload, or None once the client is gone."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return None
        if message.get("text") is not None:
            return message["text"]
        try:
            return (message.get("bytes") or b"").decode("utf-8")
        except UnicodeDecodeError:
            await session.send_error("Error: malformed frame: binary payload is not UTF-8", ErrorKind.VALIDATION)


@router.websocket("/ws")
async def event_channel(websocket: WebSocket) -> None:
    await websocket.accept()
    session = create_session(websocket)
    session.open()
    logger.info("User connected: %s", session.session_id)

    try:
        while (raw := await _next_frame(websocket, session)) is not None:
            await dispatch_frame(session, raw)
    finally:
        session.close()
        logger.info("User disconnected: %s", session.session_id)
