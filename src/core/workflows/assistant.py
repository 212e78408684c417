from typing import Dict

from langgraph.graph import StateGraph, START, END

from src.core.agents.fallback import FallbackGenerator
from src.core.agents.invoker import ModelInvoker
from src.core.agents.normalizer import ResultNormalizer
from src.core.agents.parser import ResponseParser
from src.core.errors import InvocationError, ParseError
from src.core.prompts.analysis import PromptBuilder
from src.core.providers.base import BaseProvider
from src.core.workflows.state import AssistantState
from src.domain.entities.request import AnalysisRequest
from src.utils.logger import get_logger


class AssistantWorkflow:
    """
    build_prompt -> invoke -> parse -> normalize, with invocation and parse
    failures routed through fallback before normalize.
    """

    def __init__(
        self,
        prompt_builder: PromptBuilder,
        invoker: ModelInvoker,
        parser: ResponseParser,
        normalizer: ResultNormalizer,
        fallback: FallbackGenerator,
    ):
        self.prompt_builder = prompt_builder
        self.invoker = invoker
        self.parser = parser
        self.normalizer = normalizer
        self.fallback = fallback
        self.logger = get_logger(self.__class__.__name__)

        self.graph = self._build_graph()

    def _build_graph(self):
        workflow = StateGraph(AssistantState)

        workflow.add_node("build_prompt", self._build_prompt_node)
        workflow.add_node("invoke", self._invoke_node)
        workflow.add_node("parse", self._parse_node)
        workflow.add_node("fallback", self._fallback_node)
        workflow.add_node("normalize", self._normalize_node)

        workflow.add_edge(START, "build_prompt")
        workflow.add_edge("build_prompt", "invoke")
        workflow.add_conditional_edges("invoke", self._route_on_error("parse"), ["parse", "fallback"])
        workflow.add_conditional_edges("parse", self._route_on_error("normalize"), ["normalize", "fallback"])
        workflow.add_edge("fallback", "normalize")
        workflow.add_edge("normalize", END)

        return workflow.compile()

    @staticmethod
    def _route_on_error(next_node: str):
        def route(state: AssistantState) -> str:
            return "fallback" if state.get("error_kind") else next_node
        return route

    async def _build_prompt_node(self, state: AssistantState) -> Dict:
        return {"prompt": self.prompt_builder.build(state["request"])}

    async def _invoke_node(self, state: AssistantState) -> Dict:
        try:
            raw = await self.invoker.invoke(state["provider"], state["prompt"])
        except InvocationError as e:
            self.logger.warning(f"Model invocation failed ({e.kind.value}) after {e.attempts} attempt(s); using fallback")
            return {"error_kind": e.kind.value, "error_message": e.message}
        return {"raw_output": raw}

    async def _parse_node(self, state: AssistantState) -> Dict:
        try:
            result = self.parser.parse(state.get("raw_output") or "")
        except ParseError as e:
            self.logger.warning(f"Could not parse model output: {e.message}; using fallback")
            return {"error_kind": "parse", "error_message": e.message}
        return {"result": result}

    async def _fallback_node(self, state: AssistantState) -> Dict:
        return {"result": self.fallback.generate_for(state["request"]), "degraded": True}

    async def _normalize_node(self, state: AssistantState) -> Dict:
        return {"response": self.normalizer.normalize(state["result"])}

    async def run(self, request: AnalysisRequest, provider: BaseProvider) -> AssistantState:
        return await self.graph.ainvoke({"request": request, "provider": provider, "degraded": False})
