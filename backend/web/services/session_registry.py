"""In-memory registry of connected gateway sessions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from backend.web.models.events import OutboundFrame

if TYPE_CHECKING:
    from backend.web.services.session_gateway import SessionGateway

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Tracks live sessions so refreshes and log polls can reach all of them."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionGateway] = {}

    def add(self, session: SessionGateway) -> None:
        self._sessions[session.session_id] = session
        logger.info("Session %s registered (%d connected)", session.session_id, len(self._sessions))

    def remove(self, session: SessionGateway) -> None:
        if self._sessions.pop(session.session_id, None) is not None:
            logger.info("Session %s removed (%d connected)", session.session_id, len(self._sessions))

    def sessions(self) -> list[SessionGateway]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    async def broadcast(self, frame: OutboundFrame, origin: SessionGateway | None = None) -> None:
        """Send ``frame`` to every session; only ``origin`` keeps the request_id."""
        targets = self.sessions()
        if origin is not None and origin.session_id not in self._sessions:
            targets.append(origin)
        for session in targets:
            if session is origin:
                await session.send(frame)
            else:
                await session.send(frame.model_copy(update={"request_id": None}))
