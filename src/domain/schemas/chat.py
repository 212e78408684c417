from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChatDocument(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: str = "Untitled document"
    extracted_text: Optional[str] = None


class ChatIntegration(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str


class ChatRequest(BaseModel):
    """Body of POST /api/chat as sent by the dashboard"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    message: Optional[str] = None
    documents: List[ChatDocument] = Field(default_factory=list)
    integrations: List[ChatIntegration] = Field(default_factory=list)
    is_agent_action: bool = False
    action_title: Optional[str] = None
    is_agent_mention: bool = False
    generate_charts: bool = False
    include_statistics: bool = False
    chart_types: List[str] = Field(default_factory=list)
    request_visual_analysis: bool = False
    board_id: Optional[str] = None


class ChatResponse(BaseModel):
    response: str
    charts: Optional[List[Dict[str, Any]]] = None
    summary: Optional[Dict[str, Any]] = None
    provider: Optional[str] = None
    availableProviders: List[str] = Field(default_factory=list)


class ProviderStatusResponse(BaseModel):
    currentProvider: str
    availableProviders: List[str]
    status: str
