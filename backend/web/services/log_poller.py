"""Background task that pushes kernel log lines to every connected session."""

import asyncio
import logging

from backend.web.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


def poll_logs_once(registry: SessionRegistry) -> int:
    """Start a log fetch for each open session. Returns how many were started.

    A session whose previous fetch has not finished is skipped for this tick.
    """
    count = 0
    for session in registry.sessions():
        if session.closed:
            continue
        if not session.poll_logs():
            logger.debug("Session %s: previous log poll still running, skipping", session.session_id)
            continue
        count += 1
    return count


async def log_poller_loop(registry: SessionRegistry, interval: float) -> None:
    """Periodically poll kernel logs for all sessions until cancelled."""
    logger.info("Log poller started (interval=%ss)", interval)
    while True:
        try:
            count = poll_logs_once(registry)
            if count > 0:
                logger.debug("Log poll submitted for %d session(s)", count)
        except Exception:
            logger.exception("Log poller tick failed")
        await asyncio.sleep(interval)
