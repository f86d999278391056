"""Gateway settings loader.

Configuration priority (highest to lowest):
1. Explicit overrides (CLI / tests)
2. Environment variables (FSGATE_*)
3. Project config (.fsgate/gateway.json in workspace)
4. User config (~/.fsgate/gateway.json)
5. Schema defaults

The elevation credential is resolved here, once, and handed to the
executor by the application lifespan; it is never read from anywhere else.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from config.schema import GatewaySettings

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "gateway.json"
CONFIG_DIR_NAME = ".fsgate"

_TRUE_VALUES = {"1", "true", "yes", "on"}


class SettingsLoader:
    """Three-tier settings loader with environment overlay."""

    def __init__(
        self,
        workspace_root: str | Path | None = None,
        user_dir: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
    ):
        self.workspace_root = Path(workspace_root).resolve() if workspace_root else None
        self.user_dir = Path(user_dir) if user_dir else Path.home() / CONFIG_DIR_NAME
        self.environ = os.environ if environ is None else environ

    def load(self, overrides: dict[str, Any] | None = None) -> GatewaySettings:
        merged = self._deep_merge(
            self._load_user_config(),
            self._load_project_config(),
            self._load_env_config(),
            overrides or {},
        )
        if isinstance(merged.get("root"), str):
            merged["root"] = os.path.expandvars(os.path.expanduser(merged["root"]))
        settings = GatewaySettings(**merged)
        logger.info(
            "Loaded settings: root=%s wrapper=%s credential=%s poll_interval=%s",
            settings.root,
            settings.elevation.wrapper,
            "set" if settings.elevation.password else "unset",
            settings.logs.poll_interval,
        )
        return settings

    def _load_user_config(self) -> dict[str, Any]:
        """Load user config from ~/.fsgate/gateway.json."""
        return self._load_json(self.user_dir / CONFIG_FILE_NAME)

    def _load_project_config(self) -> dict[str, Any]:
        """Load project config from .fsgate/gateway.json."""
        if not self.workspace_root:
            return {}
        return self._load_json(self.workspace_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME)

    def _load_env_config(self) -> dict[str, Any]:
        env = self.environ
        config: dict[str, Any] = {}

        if env.get("FSGATE_ROOT"):
            config["root"] = env["FSGATE_ROOT"]
        port = env.get("FSGATE_PORT") or env.get("PORT")
        if port:
            config["port"] = int(port)
        if env.get("FSGATE_HOST"):
            config["host"] = env["FSGATE_HOST"]

        elevation: dict[str, Any] = {}
        password = self._resolve_sudo_password()
        if password is not None:
            elevation["password"] = password
        if env.get("FSGATE_COMMAND_TIMEOUT"):
            elevation["timeout"] = float(env["FSGATE_COMMAND_TIMEOUT"])
        if "FSGATE_ELEVATION_WRAPPER" in env:
            elevation["wrapper"] = env["FSGATE_ELEVATION_WRAPPER"].split()
        if elevation:
            config["elevation"] = elevation

        if env.get("FSGATE_LOG_POLL_INTERVAL"):
            config["logs"] = {"poll_interval": float(env["FSGATE_LOG_POLL_INTERVAL"])}

        login: dict[str, Any] = {}
        if env.get("FSGATE_LOGIN_USER"):
            login["user"] = env["FSGATE_LOGIN_USER"]
        if env.get("FSGATE_LOGIN_PASSWORD"):
            login["password"] = env["FSGATE_LOGIN_PASSWORD"]
        if login:
            config["login"] = login

        if env.get("FSGATE_CONFINE_TO_ROOT"):
            config["hooks"] = {"confine_to_root": env["FSGATE_CONFINE_TO_ROOT"].lower() in _TRUE_VALUES}

        return config

    def _resolve_sudo_password(self) -> str | None:
        """FSGATE_SUDO_PASSWORD wins over FSGATE_SUDO_PASSWORD_FILE."""
        if self.environ.get("FSGATE_SUDO_PASSWORD"):
            return self.environ["FSGATE_SUDO_PASSWORD"]
        secret_file = self.environ.get("FSGATE_SUDO_PASSWORD_FILE")
        if not secret_file:
            return None
        path = Path(secret_file).expanduser()
        try:
            return path.read_text(encoding="utf-8").rstrip("\r\n")
        except OSError as e:
            raise RuntimeError(f"Cannot read sudo password file {path}: {e}") from e

    @staticmethod
    def _load_json(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Skipping unreadable config %s: %s", path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Skipping config %s: top level must be an object", path)
            return {}
        return data

    def _deep_merge(self, *dicts: dict[str, Any]) -> dict[str, Any]:
        """Deep merge multiple dictionaries. Later dicts override earlier ones."""
        result: dict[str, Any] = {}
        for d in dicts:
            for key, value in d.items():
                if key not in result:
                    result[key] = value
                elif value is None:
                    continue
                elif isinstance(value, dict) and isinstance(result[key], dict):
                    result[key] = self._deep_merge(result[key], value)
                else:
                    result[key] = value
        return result


def load_settings(workspace_root: str | Path | None = None, overrides: dict[str, Any] | None = None) -> GatewaySettings:
    """Load settings for the current process."""
    return SettingsLoader(workspace_root=workspace_root).load(overrides)
