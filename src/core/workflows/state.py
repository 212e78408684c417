from typing import TypedDict, Optional, Any

from src.domain.entities.request import AnalysisRequest
from src.domain.schemas.analysis import StructuredResult
from src.domain.schemas.response import AIResponse

class AssistantState(TypedDict, total=False):
    request: AnalysisRequest
    provider: Any
    prompt: str
    raw_output: Optional[str]
    result: Optional[StructuredResult]
    response: Optional[AIResponse]
    error_kind: Optional[str]  # invocation kind or "parse"
    error_message: Optional[str]
    degraded: bool
