"""
Config Module - Black Box Interface

Purpose: Application configuration management
Interface: get_config(), ConfigModule.get(), get_prompt()
Hidden: Config sources, validation logic, environment parsing

AI provider settings are not kept here; they are read from the settings
document through irconsole.config.provider.
"""

import os
from typing import Any, Dict, List


# Configuration Contract: Required and Optional Keys

REQUIRED_CONFIG_KEYS = {
    "backend_url": "Base URL of the remote execution backend",
    "settings_path": "Path of the settings.json holding AI provider settings",
    "host": "API server bind address",
    "port": "API server port",
    "log_level": "Logging level (DEBUG, INFO, WARNING, ERROR)",
}

OPTIONAL_CONFIG_KEYS = {
    "backend_token": {
        "description": "Bearer token for the backend session",
        "default": None,
    },
    "debug": {
        "description": "Enable debug mode",
        "default": False,
    },
    "api_keys": {
        "description": "Comma-separated keys accepted in X-API-Key; empty disables auth",
        "default": [],
    },
}

DEFAULT_SETTINGS_PATH = "~/.config/irconsole/settings.json"


class ConfigModule:
    """Configuration management module."""

    def __init__(self):
        """Initialize with environment variables."""
        self._config = self._load_from_env()
        self._validate_required_keys()

    def _validate_required_keys(self) -> None:
        """
        Validate that all required configuration keys are present.

        Raises:
            ValueError: If required keys are missing
        """
        missing_keys = []
        for key in REQUIRED_CONFIG_KEYS:
            if key not in self._config or self._config[key] in (None, ""):
                missing_keys.append(key)

        if missing_keys:
            raise ValueError(
                f"Missing required configuration keys: {', '.join(missing_keys)}. "
                f"Check environment variables."
            )

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment."""
        return {
            # Backend settings
            "backend_url": os.getenv("BACKEND_URL"),
            "backend_token": os.getenv("BACKEND_TOKEN"),
            "settings_path": os.path.expanduser(os.getenv("SETTINGS_PATH", DEFAULT_SETTINGS_PATH)),
            # API settings
            "host": os.getenv("API_HOST", "127.0.0.1"),
            "port": int(os.getenv("API_PORT", "8080")),
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "debug": os.getenv("DEBUG", "false").lower() == "true",
            "api_keys": _split_keys(os.getenv("API_KEYS", "")),
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    @staticmethod
    def get_config_schema() -> Dict[str, Any]:
        """
        Get the configuration schema (contract) for this module.

        Returns:
            Dictionary with 'required' and 'optional' key specifications

        Example:
            >>> schema = ConfigModule.get_config_schema()
            >>> print(schema['required']['backend_url'])
            'Base URL of the remote execution backend'
        """
        return {
            "required": REQUIRED_CONFIG_KEYS.copy(),
            "optional": OPTIONAL_CONFIG_KEYS.copy(),
        }


def _split_keys(value: str) -> List[str]:
    return [key.strip() for key in value.split(",") if key.strip()]


# Singleton instance
_instance = None


def get_config() -> ConfigModule:
    """Get the configuration module singleton."""
    global _instance
    if _instance is None:
        _instance = ConfigModule()
    return _instance


def reset_config() -> None:
    """Drop the singleton so the next get_config() re-reads the environment."""
    global _instance
    _instance = None


# Public prompt loader interface
from .prompts import get_prompt

__all__ = ["get_config", "reset_config", "ConfigModule", "get_prompt"]
