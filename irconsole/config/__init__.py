"""AI settings providers."""

from .provider import (
    DEFAULT_PROVIDER,
    AIProviderConfig,
    AISettings,
    JsonSettingsProvider,
    SettingsProvider,
    StaticSettingsProvider,
    parse_ai_settings,
)

__all__ = [
    "DEFAULT_PROVIDER",
    "AIProviderConfig",
    "AISettings",
    "JsonSettingsProvider",
    "SettingsProvider",
    "StaticSettingsProvider",
    "parse_ai_settings",
]
