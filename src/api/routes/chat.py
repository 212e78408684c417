from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
from typing import Any, Dict

from src.api.dependencies import get_assistant_service
from src.core.errors import ConfigurationError
from src.core.services.assistant_service import AssistantService
from src.domain.entities.request import ActionContext, ActionKind, AnalysisRequest, DocumentSummary
from src.domain.schemas.chat import ChatRequest, ChatResponse, ProviderStatusResponse
from src.utils.logger import get_logger

router = APIRouter(prefix="/chat", tags=["Chat"])
logger = get_logger(__name__)


def to_analysis_request(body: ChatRequest) -> AnalysisRequest:
    action_context = None
    if body.is_agent_action and body.action_title:
        action_context = ActionContext(kind=ActionKind.AGENT_ACTION, action_title=body.action_title)
    elif body.is_agent_mention:
        action_context = ActionContext(kind=ActionKind.AGENT_MENTION)

    return AnalysisRequest(
        prompt=body.message,
        documents=tuple(DocumentSummary(name=d.name, extracted_text=d.extracted_text) for d in body.documents),
        action_context=action_context,
        integrations=tuple(i.name for i in body.integrations),
        generate_charts=body.generate_charts,
        include_statistics=body.include_statistics,
        request_visual_analysis=body.request_visual_analysis,
        chart_types=tuple(body.chart_types),
    )


@router.post("", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    service: AssistantService = Depends(get_assistant_service),
):
    """
    Answer a chat message or agent action with narrative, summary metrics and charts.
    """
    if not body.message or not body.message.strip():
        raise HTTPException(status_code=400, detail="Message is required")

    try:
        result = await service.analyze(to_analysis_request(body))
    except ConfigurationError as e:
        logger.error(f"AI provider creation error: {e.message}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "AI provider not configured. Please set up your API keys in environment variables.",
                "availableProviders": e.available_providers,
                "currentProvider": e.provider,
            },
        )
    except Exception as e:
        logger.exception(f"Chat request failed: {e}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process chat request. Please try again."},
        )

    payload = result.to_payload()
    return ChatResponse(
        response=payload["response"],
        charts=payload.get("charts"),
        summary=payload.get("summary"),
        provider=service.provider_name(),
        availableProviders=service.available_providers(),
    )


@router.get("", response_model=ProviderStatusResponse)
async def provider_status(
    service: AssistantService = Depends(get_assistant_service),
) -> Dict[str, Any]:
    """
    Report the configured provider and which providers have credentials.
    """
    return service.provider_status()
