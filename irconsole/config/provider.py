"""AI provider settings following Black Box Design principles."""
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from irconsole.modules.errors import ConfigurationError

logger = logging.getLogger("irconsole.config")

# Providers that run locally and take no API key
KEYLESS_PROVIDERS = {"ollama"}

DEFAULT_PROVIDER_KEY = "openai"


@dataclass
class AIProviderConfig:
    """One LLM provider entry."""
    name: str
    api_key: str
    model: str
    base_url: str

    @property
    def completions_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"


DEFAULT_PROVIDER = AIProviderConfig(
    name="openai",
    api_key="",
    model="gpt-3.5-turbo",
    base_url="https://api.openai.com/v1",
)


@dataclass
class AISettings:
    """The `ai` section of the settings document."""
    current_provider: str = DEFAULT_PROVIDER_KEY
    providers: Dict[str, AIProviderConfig] = field(
        default_factory=lambda: {DEFAULT_PROVIDER_KEY: DEFAULT_PROVIDER}
    )

    def active_provider(self) -> AIProviderConfig:
        """
        Get the configured provider, checked for use.

        Raises:
            ConfigurationError: If the provider entry is missing, or it needs
                an API key and has none
        """
        provider = self.providers.get(self.current_provider)
        if provider is None:
            raise ConfigurationError(f"AI provider '{self.current_provider}' is not configured")
        if not provider.api_key and self.current_provider not in KEYLESS_PROVIDERS:
            raise ConfigurationError(
                f"No API key set for AI provider '{self.current_provider}'. Add one in settings."
            )
        return provider


class SettingsProvider(Protocol):
    """Protocol for read-only AI settings sources."""

    def get_ai_settings(self) -> AISettings:
        """Get AI settings."""
        ...


class StaticSettingsProvider:
    """Settings held in memory."""

    def __init__(self, settings: Optional[AISettings] = None):
        self.settings = settings or AISettings()

    def get_ai_settings(self) -> AISettings:
        return self.settings


class JsonSettingsProvider:
    """Settings read from the console's settings.json on every call."""

    def __init__(self, path: str):
        self.path = os.path.expanduser(path)

    def get_ai_settings(self) -> AISettings:
        """
        Read the `ai` section.

        A missing or empty file gives the default provider.

        Raises:
            ConfigurationError: If the file is not valid JSON
        """
        if not os.path.isfile(self.path):
            logger.debug(f"Settings file {self.path} not found, using default AI provider")
            return AISettings()

        with open(self.path, "r", encoding="utf-8") as f:
            raw = f.read()
        if not raw.strip():
            return AISettings()

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Settings file {self.path} is not valid JSON: {e}") from e

        return parse_ai_settings(document)


def parse_ai_settings(document: Any) -> AISettings:
    """Build AISettings from a settings document, falling back to defaults."""
    ai = document.get("ai") if isinstance(document, dict) else None
    if not isinstance(ai, dict):
        return AISettings()

    providers: Dict[str, AIProviderConfig] = {}
    for key, entry in (ai.get("providers") or {}).items():
        if not isinstance(entry, dict):
            continue
        providers[key] = AIProviderConfig(
            name=entry.get("name") or key,
            api_key=entry.get("apiKey") or "",
            model=entry.get("model") or DEFAULT_PROVIDER.model,
            base_url=entry.get("baseUrl") or DEFAULT_PROVIDER.base_url,
        )

    if not providers:
        providers = {DEFAULT_PROVIDER_KEY: DEFAULT_PROVIDER}

    return AISettings(
        current_provider=ai.get("currentProvider") or DEFAULT_PROVIDER_KEY,
        providers=providers,
    )
