"""Gateway status endpoint."""

from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(prefix="/api", tags=["status"])


@router.get("/status")
async def gateway_status(request: Request) -> dict[str, Any]:
    """Report the fixed root and how many sessions are connected."""
    state = request.app.state
    return {
        "root": state.settings.root,
        "sessions": len(state.registry),
        "log_poll_interval": state.settings.logs.poll_interval,
    }
