from typing import Any, Dict, List, Optional, Type, Union
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Level(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ChangeType(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class ChartType(str, Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    AREA = "area"


# Model output is loosely typed. Each leaf is coerced or dropped on its own so
# that one odd value never invalidates the rest of the result.

def _lenient_enum(enum_cls: Type[Enum], value: Any) -> Any:
    """Unknown enum values become None instead of invalidating the whole result"""
    if value is None or isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        for member in enum_cls:
            if member.value == normalized:
                return member
    return None


def _lenient_number(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "").rstrip("%")
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


def _lenient_text(value: Any) -> Optional[str]:
    """Scalars become strings; objects and arrays are dropped"""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _lenient_text_list(value: Any) -> Optional[List[str]]:
    """A lone scalar becomes a one-item list; nested objects and arrays are skipped"""
    if value is None:
        return None
    if not isinstance(value, list):
        value = [value]
    items = [_lenient_text(item) for item in value]
    return [item for item in items if item is not None]


def _lenient_bool(value: Any) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("true", "yes", "y", "1"):
            return True
        if normalized in ("false", "no", "n", "0"):
            return False
    return None


def _is_object(value: Any) -> bool:
    return isinstance(value, (dict, BaseModel))


def _lenient_object(value: Any) -> Any:
    """Anything other than a JSON object counts as absent"""
    return value if _is_object(value) else None


def _lenient_objects(value: Any) -> Optional[List[Any]]:
    """A lone object becomes a one-item list; non-object items are skipped"""
    if value is None:
        return None
    if _is_object(value):
        return [value]
    if not isinstance(value, list):
        return None
    return [item for item in value if _is_object(item)]


class CamelModel(BaseModel):
    """Base for the model-facing JSON contract, which uses camelCase keys"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ExecutiveSummary(CamelModel):
    title: Optional[str] = None
    overview: Optional[str] = None
    key_points: Optional[List[str]] = None
    risk_level: Optional[Level] = None
    action_required: Optional[bool] = None

    @field_validator("title", "overview", mode="before")
    @classmethod
    def _text(cls, v):
        return _lenient_text(v)

    @field_validator("key_points", mode="before")
    @classmethod
    def _key_points(cls, v):
        return _lenient_text_list(v)

    @field_validator("risk_level", mode="before")
    @classmethod
    def _risk_level(cls, v):
        return _lenient_enum(Level, v)

    @field_validator("action_required", mode="before")
    @classmethod
    def _action_required(cls, v):
        return _lenient_bool(v)


class AnalysisSection(CamelModel):
    title: Optional[str] = None
    content: Optional[str] = None
    insights: Optional[List[str]] = None
    importance: Optional[Level] = None

    @field_validator("title", "content", mode="before")
    @classmethod
    def _text(cls, v):
        return _lenient_text(v)

    @field_validator("insights", mode="before")
    @classmethod
    def _insights(cls, v):
        return _lenient_text_list(v)

    @field_validator("importance", mode="before")
    @classmethod
    def _importance(cls, v):
        return _lenient_enum(Level, v)


class Analysis(CamelModel):
    introduction: Optional[str] = None
    sections: Optional[List[AnalysisSection]] = None
    conclusion: Optional[str] = None

    @field_validator("introduction", "conclusion", mode="before")
    @classmethod
    def _text(cls, v):
        return _lenient_text(v)

    @field_validator("sections", mode="before")
    @classmethod
    def _sections(cls, v):
        return _lenient_objects(v)


class Metric(CamelModel):
    title: Optional[str] = None
    value: Optional[Union[int, float, str]] = None
    numeric_value: Optional[float] = None
    change: Optional[float] = None
    change_type: Optional[ChangeType] = None
    icon: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None

    @field_validator("title", "icon", "description", "category", mode="before")
    @classmethod
    def _text(cls, v):
        return _lenient_text(v)

    @field_validator("value", mode="before")
    @classmethod
    def _value(cls, v):
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            return _lenient_text(v)
        return v

    @field_validator("numeric_value", "change", mode="before")
    @classmethod
    def _numbers(cls, v):
        return _lenient_number(v)

    @field_validator("change_type", mode="before")
    @classmethod
    def _change_type(cls, v):
        return _lenient_enum(ChangeType, v)


class Insight(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    impact: Optional[str] = None
    category: Optional[str] = None
    action_items: Optional[List[str]] = None

    @field_validator("title", "description", "impact", "category", mode="before")
    @classmethod
    def _text(cls, v):
        return _lenient_text(v)

    @field_validator("action_items", mode="before")
    @classmethod
    def _action_items(cls, v):
        return _lenient_text_list(v)


class Chart(CamelModel):
    type: Optional[ChartType] = None
    title: Optional[str] = None
    description: Optional[str] = None
    data: Optional[List[Dict[str, Any]]] = None
    x_key: Optional[str] = None
    y_key: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _chart_type(cls, v):
        return _lenient_enum(ChartType, v)

    @field_validator("title", "description", "x_key", "y_key", mode="before")
    @classmethod
    def _text(cls, v):
        return _lenient_text(v)

    @field_validator("data", mode="before")
    @classmethod
    def _data(cls, v):
        # Records only; a bare list of numbers has no keys to plot against
        if not isinstance(v, list):
            return None
        return [record for record in v if isinstance(record, dict)]


class Recommendation(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    timeframe: Optional[str] = None
    category: Optional[str] = None
    expected_outcome: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def _text(cls, v):
        return _lenient_text(v)


class Risk(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    probability: Optional[float] = None
    impact: Optional[float] = None
    severity: Optional[str] = None
    mitigation: Optional[str] = None

    @field_validator("title", "description", "severity", "mitigation", mode="before")
    @classmethod
    def _text(cls, v):
        return _lenient_text(v)

    @field_validator("probability", "impact", mode="before")
    @classmethod
    def _numbers(cls, v):
        return _lenient_number(v)


class RiskAssessment(CamelModel):
    overall_score: Optional[float] = Field(None, description="Overall risk score from 0-10")
    risks: Optional[List[Risk]] = None

    @field_validator("overall_score", mode="before")
    @classmethod
    def _score(cls, v):
        score = _lenient_number(v)
        if score is None:
            return None
        return min(max(score, 0.0), 10.0)

    @field_validator("risks", mode="before")
    @classmethod
    def _risks(cls, v):
        return _lenient_objects(v)


class AnalysisMetadata(CamelModel):
    analysis_type: Optional[str] = None
    confidence: Optional[float] = None
    data_quality: Optional[str] = None
    last_updated: Optional[str] = None
    sources: Optional[List[str]] = None

    @field_validator("analysis_type", "data_quality", "last_updated", mode="before")
    @classmethod
    def _text(cls, v):
        return _lenient_text(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def _confidence(cls, v):
        return _lenient_number(v)

    @field_validator("sources", mode="before")
    @classmethod
    def _sources(cls, v):
        return _lenient_text_list(v)


class StructuredResult(CamelModel):
    """Complete JSON structure the model is instructed to return"""
    executive_summary: Optional[ExecutiveSummary] = None
    analysis: Optional[Analysis] = None
    metrics: Optional[List[Metric]] = None
    insights: Optional[List[Insight]] = None
    charts: Optional[List[Chart]] = None
    recommendations: Optional[List[Recommendation]] = None
    risk_assessment: Optional[RiskAssessment] = None
    metadata: Optional[AnalysisMetadata] = None

    @field_validator("executive_summary", "analysis", "risk_assessment", "metadata", mode="before")
    @classmethod
    def _objects(cls, v):
        return _lenient_object(v)

    @field_validator("metrics", "insights", "charts", "recommendations", mode="before")
    @classmethod
    def _object_lists(cls, v):
        return _lenient_objects(v)



# Example output structure, embedded verbatim in the prompt
EXAMPLE_OUTPUT = {
    "executiveSummary": {
        "title": "Brief title of the analysis",
        "overview": "2-3 sentence executive overview",
        "keyPoints": ["Key point 1", "Key point 2", "Key point 3"],
        "riskLevel": "low | medium | high",
        "actionRequired": True
    },
    "analysis": {
        "introduction": "Context for the analysis",
        "sections": [
            {
                "title": "Section title",
                "content": "Detailed analysis content",
                "insights": ["Supporting insight"],
                "importance": "low | medium | high"
            }
        ],
        "conclusion": "Overall conclusion"
    },
    "metrics": [
        {
            "title": "Total Revenue",
            "value": "$4.1M",
            "numericValue": 4100000,
            "change": 15.2,
            "changeType": "positive | negative | neutral",
            "icon": "revenue | users | target | calendar | warning | success",
            "description": "Q1 2024 vs Q1 2023",
            "category": "financial | operational | strategic | risk"
        }
    ],
    "insights": [
        {
            "title": "Insight title",
            "description": "What the data shows",
            "impact": "high | medium | low",
            "category": "opportunity | risk | trend | recommendation",
            "actionItems": ["Follow-up action"]
        }
    ],
    "charts": [
        {
            "type": "bar | line | pie | area",
            "title": "Chart title",
            "description": "What the chart shows",
            "data": [{"label": "Q1", "value": 2400000}],
            "xKey": "label",
            "yKey": "value"
        }
    ],
    "recommendations": [
        {
            "title": "Recommendation title",
            "description": "What to do",
            "priority": "high | medium | low",
            "timeframe": "immediate | short_term | long_term",
            "category": "financial | operational | strategic | risk",
            "expectedOutcome": "Expected result"
        }
    ],
    "riskAssessment": {
        "overallScore": 5.5,
        "risks": [
            {
                "title": "Risk title",
                "description": "Risk description",
                "probability": 0.4,
                "impact": 7,
                "severity": "critical | high | medium | low",
                "mitigation": "Mitigation strategy"
            }
        ]
    },
    "metadata": {
        "analysisType": "financial | risk | compliance | performance | strategy | general",
        "confidence": 0.85,
        "dataQuality": "high | medium | low",
        "lastUpdated": "ISO 8601 date",
        "sources": ["Document name"]
    }
}
