from functools import lru_cache

from src.core.providers.registry import ProviderRegistry
from src.core.services.assistant_service import AssistantService

@lru_cache()
def get_provider_registry() -> ProviderRegistry:
    return ProviderRegistry()

@lru_cache()
def get_assistant_service() -> AssistantService:
    registry = get_provider_registry()
    return AssistantService(registry=registry)
