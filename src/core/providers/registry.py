from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Type

from src.config.settings import Settings
from src.core.errors import ConfigurationError
from src.core.providers.anthropic_provider import AnthropicProvider
from src.core.providers.base import BaseProvider, ProviderSettings
from src.core.providers.gemini_provider import GeminiProvider
from src.core.providers.openai_provider import OpenAIProvider
from src.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProviderSpec:
    name: str
    provider_class: Type[BaseProvider]
    credential_env: str
    model_setting: str


# Order is the order reported by list_available()
PROVIDER_SPECS: List[ProviderSpec] = [
    ProviderSpec("gemini", GeminiProvider, "GOOGLE_AI_API_KEY", "GEMINI_MODEL"),
    ProviderSpec("openai", OpenAIProvider, "OPENAI_API_KEY", "OPENAI_MODEL"),
    ProviderSpec("anthropic", AnthropicProvider, "ANTHROPIC_API_KEY", "ANTHROPIC_MODEL"),
]


@dataclass(frozen=True)
class ProviderConfig:
    """Snapshot of provider selection and credential presence"""
    provider: str = "gemini"
    credentials: Dict[str, Optional[str]] = field(default_factory=dict)
    models: Dict[str, str] = field(default_factory=dict)
    temperature: float = 0.7
    max_tokens: int = 4000

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderConfig":
        return cls(
            provider=(settings.AI_PROVIDER or "gemini").strip().lower(),
            credentials={spec.credential_env: getattr(settings, spec.credential_env) for spec in PROVIDER_SPECS},
            models={spec.name: getattr(settings, spec.model_setting) for spec in PROVIDER_SPECS},
            temperature=settings.AI_TEMPERATURE,
            max_tokens=settings.AI_MAX_TOKENS,
        )

    def has_credential(self, spec: ProviderSpec) -> bool:
        return bool((self.credentials.get(spec.credential_env) or "").strip())


def load_provider_config() -> ProviderConfig:
    # Fresh Settings() so environment changes are picked up without a restart
    return ProviderConfig.from_settings(Settings())


class ProviderRegistry:
    """
    Selects among the named providers based on an explicit configuration.

    With a ``config_loader`` the configuration is re-read on every call so that
    credential changes are noticed; a fixed ``config`` is used as-is until
    ``refresh()`` is called.
    """

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        config_loader: Optional[Callable[[], ProviderConfig]] = None,
        specs: Optional[List[ProviderSpec]] = None,
    ):
        if config is None and config_loader is None:
            config_loader = load_provider_config
        self._config = config
        self._config_loader = config_loader
        self._specs = {spec.name: spec for spec in (specs or PROVIDER_SPECS)}

    @property
    def config(self) -> ProviderConfig:
        if self._config_loader is not None:
            self._config = self._config_loader()
        return self._config

    def refresh(self, config: Optional[ProviderConfig] = None) -> ProviderConfig:
        if config is not None:
            self._config = config
            self._config_loader = None
        return self.config

    @property
    def supported(self) -> List[str]:
        return list(self._specs)

    def list_available(self) -> List[str]:
        config = self.config
        return [name for name, spec in self._specs.items() if config.has_credential(spec)]

    def current_provider(self) -> str:
        return self.config.provider

    def display_name(self, name: Optional[str] = None) -> Optional[str]:
        spec = self._specs.get(name or self.current_provider())
        return spec.provider_class.display_name if spec else None

    def create_provider(self) -> BaseProvider:
        config = self.config
        available = [name for name, spec in self._specs.items() if config.has_credential(spec)]
        spec = self._specs.get(config.provider)

        if spec is None:
            message = (
                f"Unsupported AI provider: {config.provider}. "
                f"Supported providers: {', '.join(self._specs)}"
            )
            logger.error(message)
            raise ConfigurationError(message, available_providers=available, provider=config.provider)

        if not config.has_credential(spec):
            message = f"{spec.credential_env} environment variable is required for {spec.name} provider"
            logger.error(message)
            raise ConfigurationError(message, available_providers=available, provider=spec.name)

        return spec.provider_class(ProviderSettings(
            api_key=config.credentials[spec.credential_env],
            model=config.models.get(spec.name, ""),
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        ))

    def status(self) -> Dict[str, object]:
        available = self.list_available()
        return {
            "currentProvider": self.current_provider(),
            "availableProviders": available,
            "status": "configured" if available else "not_configured",
        }
