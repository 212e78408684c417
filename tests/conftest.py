import json
import pytest
from unittest.mock import MagicMock, AsyncMock

from src.config.settings import Settings
from src.core.agents.invoker import ModelInvoker
from src.core.providers.base import BaseProvider
from src.core.providers.registry import ProviderConfig, ProviderRegistry
from src.domain.entities.request import ActionContext, ActionKind, AnalysisRequest, DocumentSummary


class FakeAPIError(Exception):
    """Mimics SDK errors that carry an HTTP status code"""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


@pytest.fixture
def overloaded_error():
    return FakeAPIError("503 Service Unavailable: the model is overloaded", status_code=503)


@pytest.fixture
def mock_provider():
    provider = MagicMock(spec=BaseProvider)
    provider.name = "gemini"
    provider.display_name = "Google Gemini"
    provider.generate = AsyncMock(return_value="{}")
    return provider


@pytest.fixture
def mock_registry(mock_provider):
    registry = MagicMock(spec=ProviderRegistry)
    registry.create_provider.return_value = mock_provider
    registry.list_available.return_value = ["gemini"]
    registry.display_name.return_value = "Google Gemini"
    return registry


@pytest.fixture
def gemini_config():
    return ProviderConfig(
        provider="gemini",
        credentials={"GOOGLE_AI_API_KEY": "test-google-key", "OPENAI_API_KEY": None, "ANTHROPIC_API_KEY": ""},
        models={"gemini": "gemini-pro", "openai": "gpt-4", "anthropic": "claude-3-5-sonnet-20241022"},
    )


@pytest.fixture
def registry(gemini_config):
    return ProviderRegistry(config=gemini_config)


@pytest.fixture
def sleep_recorder():
    return AsyncMock(return_value=None)


@pytest.fixture
def invoker(sleep_recorder):
    return ModelInvoker(max_attempts=3, base_delay=2.0, sleep=sleep_recorder)


@pytest.fixture
def test_settings():
    return Settings(AI_PROVIDER="gemini", GOOGLE_AI_API_KEY="test-google-key", _env_file=None)


@pytest.fixture
def board_documents():
    return (
        DocumentSummary(name="Q4 Financial Report.pdf", extracted_text="Revenue grew 15% to $4.1M. " * 80),
        DocumentSummary(name="Board Minutes March.pdf", extracted_text="The board approved the 2024 budget."),
    )


@pytest.fixture
def action_request(board_documents):
    return AnalysisRequest(
        prompt="Provide a comprehensive financial analysis of Q4 results",
        documents=board_documents,
        action_context=ActionContext(kind=ActionKind.AGENT_ACTION, action_title="Q4 Financial Analysis"),
        generate_charts=True,
        include_statistics=True,
    )


@pytest.fixture
def structured_payload():
    return {
        "executiveSummary": {
            "title": "Q4 Board Review",
            "overview": "Revenue exceeded plan while costs stayed flat.",
            "keyPoints": ["Revenue up 15%", "Burn rate down 12%"],
            "riskLevel": "medium",
            "actionRequired": True,
        },
        "analysis": {
            "introduction": "This review covers the Q4 board pack.",
            "sections": [
                {
                    "title": "Revenue",
                    "content": "Revenue reached $4.1M.",
                    "insights": ["Enterprise segment drove growth"],
                    "importance": "high",
                }
            ],
            "conclusion": "The company is on track for its annual targets.",
        },
        "metrics": [
            {"title": "Total Revenue", "value": "$4.1M", "numericValue": 4100000, "change": 15.2, "changeType": "positive", "icon": "revenue", "description": "Q4 vs Q3", "category": "financial"},
            {"title": "Open Risks", "value": "3"},
        ],
        "insights": [
            {"title": "Growth", "description": "Growth is accelerating", "impact": "high", "category": "trend", "actionItems": []},
            {"title": "Hiring plan needed"},
        ],
        "charts": [
            {"type": "bar", "title": "Quarterly Revenue", "description": "Revenue by quarter", "data": [{"label": "Q3", "value": 3.6}, {"label": "Q4", "value": 4.1}], "xKey": "label", "yKey": "value"},
            {"type": "line", "title": "Burn"},
        ],
        "recommendations": [
            {"title": "Expand sales team", "description": "Hire two enterprise account executives.", "priority": "high", "timeframe": "short_term", "category": "strategic", "expectedOutcome": "Faster growth"}
        ],
        "riskAssessment": {"overallScore": 4.5, "risks": [{"title": "Competition", "probability": 0.3, "impact": 6, "severity": "medium", "mitigation": "Differentiate"}]},
        "metadata": {"analysisType": "financial", "confidence": 0.9, "dataQuality": "high", "lastUpdated": "2024-04-01", "sources": ["Q4 Financial Report.pdf"]},
    }


@pytest.fixture
def structured_json(structured_payload):
    return json.dumps(structured_payload)
