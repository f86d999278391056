"""Configuration management for fsgate."""

from .loader import SettingsLoader, load_settings
from .schema import GatewaySettings

__all__ = ["GatewaySettings", "SettingsLoader", "load_settings"]
