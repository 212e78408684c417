from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional
from src.utils.logger import get_logger


@dataclass
class ProviderSettings:
    """Per-provider generation settings"""
    api_key: str
    model: str
    temperature: float = 0.7
    max_tokens: int = 4000


class BaseProvider(ABC):
    """
    A named external text-generation backend.

    Implementations raise the SDK's own exceptions; the model invoker decides
    which of them are transient.
    """
    name: str = ""
    display_name: str = ""

    def __init__(self, settings: ProviderSettings):
        self.settings = settings
        self.logger = get_logger(self.__class__.__name__)
        self._client: Optional[Any] = None

    @abstractmethod
    def _create_client(self) -> Any:
        """Build the SDK client"""
        pass

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Send a single prompt and return the raw text completion"""
        pass

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._create_client()
            self.logger.info(f"Initialized {self.display_name} client with model {self.settings.model}")
        return self._client

    def get_model_info(self) -> Dict[str, Any]:
        return {
            "provider": self.name,
            "display_name": self.display_name,
            "model": self.settings.model,
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
        }
