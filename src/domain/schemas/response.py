from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.schemas.analysis import ChangeType, ChartType


class _CamelResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChartDescriptor(_CamelResponse):
    """Chart rendered by the dashboard ChartRenderer"""
    type: ChartType
    title: str
    description: Optional[str] = None
    data: List[Dict[str, Any]] = Field(default_factory=list)
    x_key: str = "label"
    y_key: str = "value"


class SummaryMetric(_CamelResponse):
    title: str
    value: Union[int, float, str]
    change: float = 0
    change_type: ChangeType = ChangeType.NEUTRAL
    icon: str = "target"
    description: Optional[str] = None


class SummaryCard(_CamelResponse):
    title: str
    metrics: List[SummaryMetric]
    insights: List[str] = Field(default_factory=list)


class AIResponse(_CamelResponse):
    """Caller-facing projection of a structured result"""
    response: str = Field(..., min_length=1, description="Markdown narrative")
    charts: Optional[List[ChartDescriptor]] = None
    summary: Optional[SummaryCard] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
