from unittest.mock import AsyncMock

from src.core.errors import ConfigurationError
from src.domain.schemas.response import AIResponse, ChartDescriptor, SummaryCard, SummaryMetric

# ============================================================================
# CHAT ROUTES
# ============================================================================

def test_chat_success(client, mock_assistant_service):
    """Test a chat message returns narrative, summary and charts"""
    mock_assistant_service.analyze = AsyncMock(return_value=AIResponse(
        response="## Q4 Review\n\nRevenue grew.",
        summary=SummaryCard(title="Q4 Review", metrics=[SummaryMetric(title="Revenue", value="$4.1M")]),
        charts=[ChartDescriptor(type="bar", title="Revenue")],
    ))

    response = client.post(
        "/api/chat",
        json={
            "message": "How did Q4 go?",
            "documents": [{"name": "q4.pdf", "extractedText": "Revenue grew 15%."}],
            "isAgentAction": True,
            "actionTitle": "Q4 Financial Analysis",
            "generateCharts": True,
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["response"].startswith("## Q4 Review")
    assert data["summary"]["metrics"][0]["changeType"] == "neutral"
    assert data["charts"][0]["xKey"] == "label"
    assert data["provider"] == "Google Gemini"
    assert data["availableProviders"] == ["gemini"]

    request = mock_assistant_service.analyze.await_args.args[0]
    assert request.prompt == "How did Q4 go?"
    assert request.documents[0].extracted_text == "Revenue grew 15%."
    assert request.is_predefined_action
    assert request.generate_charts

def test_chat_plain_response_omits_optional_parts(client, mock_assistant_service):
    """Test a free-form answer has no summary or charts"""
    mock_assistant_service.analyze = AsyncMock(return_value=AIResponse(response="Plain answer"))

    response = client.post("/api/chat", json={"message": "Hi", "isAgentMention": True})

    assert response.status_code == 200
    data = response.json()
    assert data["summary"] is None
    assert data["charts"] is None
    assert mock_assistant_service.analyze.await_args.args[0].action_context.kind.value == "agent_mention"

def test_chat_requires_message(client, mock_assistant_service):
    """Test an empty message is rejected before any analysis"""
    mock_assistant_service.analyze = AsyncMock()

    for body in ({}, {"message": "   "}):
        response = client.post("/api/chat", json=body)
        assert response.status_code == 400
        assert response.json()["detail"] == "Message is required"

    mock_assistant_service.analyze.assert_not_awaited()

def test_chat_provider_not_configured(client, mock_assistant_service):
    """Test configuration errors surface the available providers"""
    mock_assistant_service.analyze = AsyncMock(side_effect=ConfigurationError(
        "GOOGLE_AI_API_KEY environment variable is required for gemini provider",
        available_providers=["openai"],
        provider="gemini",
    ))

    response = client.post("/api/chat", json={"message": "Summarize"})

    assert response.status_code == 500
    data = response.json()
    assert data["error"].startswith("AI provider not configured")
    assert data["availableProviders"] == ["openai"]
    assert data["currentProvider"] == "gemini"

def test_chat_unexpected_error(client, mock_assistant_service):
    """Test unexpected failures return a generic error"""
    mock_assistant_service.analyze = AsyncMock(side_effect=RuntimeError("boom"))

    response = client.post("/api/chat", json={"message": "Summarize"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to process chat request. Please try again."}

# ============================================================================
# PROVIDER STATUS
# ============================================================================

def test_provider_status(client, mock_assistant_service):
    """Test provider status reporting"""
    mock_assistant_service.provider_status.return_value = {
        "currentProvider": "gemini",
        "availableProviders": ["gemini", "anthropic"],
        "status": "configured",
    }

    response = client.get("/api/chat")

    assert response.status_code == 200
    assert response.json() == {
        "currentProvider": "gemini",
        "availableProviders": ["gemini", "anthropic"],
        "status": "configured",
    }

def test_root_and_health(client):
    """Test service liveness endpoints"""
    root = client.get("/")
    assert root.status_code == 200
    assert root.json()["status"] == "BoardBravo Assistant is Online"

    health = client.get("/health")
    assert health.json() == {"status": "healthy"}
