"""Configuration schema for the fsgate gateway using Pydantic.

This module defines the complete configuration structure with:
- Fixed root and bind address
- Elevation wrapper, injected credential and per-command timeout
- Log poller cadence and marker
- Login credential pair and command hook switches
"""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr, field_validator

DEFAULT_ROOT = "/mount/fs"
DEFAULT_LOG_MARKER = "file_system"

# ============================================================================
# Elevation
# ============================================================================


class ElevationConfig(BaseModel):
    """How privileged commands are wrapped."""

    wrapper: list[str] = Field(
        default_factory=lambda: ["sudo", "-S", "-p", ""],
        description="Argument prefix for every command (empty = run directly)",
    )
    password: SecretStr | None = Field(None, description="Credential written to the wrapper's stdin")
    timeout: float | None = Field(None, gt=0, description="Per-command timeout in seconds (None = no timeout)")


# ============================================================================
# Log poller
# ============================================================================


class LogPollerConfig(BaseModel):
    """Kernel log polling."""

    marker: str = Field(DEFAULT_LOG_MARKER, min_length=1, description="Only log lines containing this are sent")
    poll_interval: float = Field(5.0, ge=0.0, description="Seconds between polls (0 = disabled)")


# ============================================================================
# Login / hooks
# ============================================================================


class LoginConfig(BaseModel):
    """Credential pair accepted by the login event."""

    user: str = Field("admin", description="Login user name")
    password: SecretStr = Field(SecretStr(""), description="Login password (empty = login always fails)")


class HooksConfig(BaseModel):
    """Command hook switches."""

    confine_to_root: bool = Field(False, description="Block names that escape the root instead of only logging")
    audit: bool = Field(True, description="Log every privileged command to fsgate.audit")


class GatewaySettings(BaseModel):
    """Complete gateway configuration."""

    root: str = Field(DEFAULT_ROOT, description="Fixed root directory all operations are scoped under")
    host: str = Field("0.0.0.0", description="Bind address")
    port: int = Field(3000, gt=0, lt=65536, description="Bind port")
    elevation: ElevationConfig = Field(default_factory=ElevationConfig)
    logs: LogPollerConfig = Field(default_factory=LogPollerConfig)
    login: LoginConfig = Field(default_factory=LoginConfig)
    hooks: HooksConfig = Field(default_factory=HooksConfig)

    @field_validator("root")
    @classmethod
    def normalize_root(cls, v: str) -> str:
        """Root must be absolute; trailing slashes are dropped."""
        if not v.startswith("/"):
            raise ValueError(f"root must be an absolute path, got {v!r}")
        return v.rstrip("/") or "/"
