from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple


class ActionKind(str, Enum):
    AGENT_ACTION = "agent_action"    # predefined analysis action button
    AGENT_MENTION = "agent_mention"  # free-form "@agent" chat message


@dataclass(frozen=True)
class ActionContext:
    kind: ActionKind
    action_title: Optional[str] = None

    @property
    def is_predefined_action(self) -> bool:
        return self.kind == ActionKind.AGENT_ACTION


@dataclass(frozen=True)
class DocumentSummary:
    name: str
    extracted_text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentSummary":
        return cls(
            name=str(data.get("name") or "Untitled document"),
            extracted_text=data.get("extractedText") or data.get("extracted_text"),
        )


@dataclass(frozen=True)
class AnalysisRequest:
    """A single assistant request, immutable for the lifetime of the pipeline"""
    prompt: str
    documents: Tuple[DocumentSummary, ...] = ()
    action_context: Optional[ActionContext] = None
    integrations: Tuple[str, ...] = ()
    generate_charts: bool = False
    include_statistics: bool = False
    request_visual_analysis: bool = False
    chart_types: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept lists from callers but store tuples
        object.__setattr__(self, "documents", tuple(self.documents))
        object.__setattr__(self, "integrations", tuple(self.integrations))
        object.__setattr__(self, "chart_types", tuple(self.chart_types))

    @property
    def has_documents(self) -> bool:
        return len(self.documents) > 0

    @property
    def is_predefined_action(self) -> bool:
        return self.action_context is not None and self.action_context.is_predefined_action

    @classmethod
    def build(
        cls,
        prompt: str,
        documents: Optional[Iterable[Dict[str, Any]]] = None,
        **kwargs,
    ) -> "AnalysisRequest":
        return cls(
            prompt=prompt,
            documents=tuple(DocumentSummary.from_dict(d) for d in (documents or [])),
            **kwargs,
        )
