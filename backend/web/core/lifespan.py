"""Application lifespan management."""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from backend.web.services.log_poller import log_poller_loop
from backend.web.services.session_registry import SessionRegistry
from config.loader import load_settings
from core.command.dispatcher import get_elevation_info, get_executor
from core.command.hooks import load_hooks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for startup and shutdown."""
    # Settings may be injected before startup (tests, embedding)
    settings = getattr(app.state, "settings", None)
    if settings is None:
        settings = load_settings(workspace_root=Path.cwd())

    # Initialize app state
    app.state.settings = settings
    if getattr(app.state, "executor", None) is None:
        app.state.executor = get_executor(settings)
    app.state.hooks = load_hooks(
        root=settings.root,
        confine_to_root=settings.hooks.confine_to_root,
        audit=settings.hooks.audit,
    )
    app.state.registry = SessionRegistry()
    app.state.log_poller_task = None

    logger.info("Gateway root=%s elevation=%s", settings.root, get_elevation_info(settings))

    try:
        if settings.logs.poll_interval > 0:
            app.state.log_poller_task = asyncio.create_task(
                log_poller_loop(app.state.registry, settings.logs.poll_interval)
            )
        yield
    finally:
        # Cleanup: stop log poller
        task = app.state.log_poller_task
        if task:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
