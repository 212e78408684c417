from typing import Any, Dict, List, Optional

from src.config.settings import Settings, get_settings
from src.core.agents.fallback import FallbackGenerator
from src.core.agents.invoker import ModelInvoker
from src.core.agents.normalizer import ResultNormalizer
from src.core.agents.parser import ResponseParser
from src.core.prompts.analysis import PromptBuilder
from src.core.providers.registry import ProviderRegistry
from src.core.workflows.assistant import AssistantWorkflow
from src.domain.entities.request import AnalysisRequest
from src.domain.schemas.response import AIResponse
from src.utils.logger import get_logger


class AssistantService:
    def __init__(
        self,
        registry: Optional[ProviderRegistry] = None,
        invoker: Optional[ModelInvoker] = None,
        settings: Optional[Settings] = None,
    ):
        self.logger = get_logger(self.__class__.__name__)
        self.settings = settings or get_settings()
        self.registry = registry or ProviderRegistry()

        self.prompt_builder = PromptBuilder(max_document_chars=self.settings.DOCUMENT_CONTEXT_CHARS)
        self.invoker = invoker or ModelInvoker(
            max_attempts=self.settings.AI_MAX_ATTEMPTS,
            base_delay=self.settings.AI_RETRY_BASE_DELAY,
            timeout=self.settings.AI_REQUEST_TIMEOUT_SECONDS,
        )
        self.parser = ResponseParser()
        self.normalizer = ResultNormalizer()
        self.fallback = FallbackGenerator()

        self.workflow = AssistantWorkflow(
            self.prompt_builder,
            self.invoker,
            self.parser,
            self.normalizer,
            self.fallback,
        )

    async def analyze(self, request: AnalysisRequest) -> AIResponse:
        """
        Turn a request into a render-ready AIResponse.

        Raises ConfigurationError when no usable provider is configured; every
        other failure is absorbed into a fallback response.
        """
        provider = self.registry.create_provider()
        self.logger.info(
            f"Analyzing request with {provider.display_name} "
            f"({len(request.documents)} documents, action={request.is_predefined_action})"
        )
        final_state = await self.workflow.run(request, provider)
        if final_state.get("degraded"):
            self.logger.warning(f"Returned fallback response (reason: {final_state.get('error_kind')})")
        return final_state["response"]

    def provider_name(self) -> Optional[str]:
        return self.registry.display_name()

    def available_providers(self) -> List[str]:
        return self.registry.list_available()

    def provider_status(self) -> Dict[str, Any]:
        return self.registry.status()
