"""Build the executor configured for this process."""

from __future__ import annotations

from config.schema import GatewaySettings

from .base import BaseExecutor
from .privileged import PrivilegedExecutor


def get_executor(settings: GatewaySettings) -> BaseExecutor:
    """
    Get the privileged executor described by ``settings``.

    The elevation credential is unwrapped here and passed into the executor;
    nothing else holds it.

    Args:
        settings: Loaded gateway settings

    Returns:
        Executor instance
    """
    elevation = settings.elevation
    password = elevation.password.get_secret_value() if elevation.password else None
    return PrivilegedExecutor(
        wrapper=elevation.wrapper,
        password=password,
        timeout=elevation.timeout,
    )


def get_elevation_info(settings: GatewaySettings) -> dict[str, str]:
    """Describe the elevation setup without exposing the credential."""
    wrapper = settings.elevation.wrapper
    return {
        "wrapper": " ".join(wrapper) if wrapper else "(none)",
        "credential": "set" if settings.elevation.password else "unset",
        "timeout": str(settings.elevation.timeout) if settings.elevation.timeout else "none",
    }
