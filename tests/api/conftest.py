import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from src.main import app
from src.api.dependencies import get_assistant_service
from src.core.services.assistant_service import AssistantService

@pytest.fixture
def mock_assistant_service():
    service = MagicMock(spec=AssistantService)
    service.provider_name.return_value = "Google Gemini"
    service.available_providers.return_value = ["gemini"]
    return service

@pytest.fixture
def client(mock_assistant_service):
    app.dependency_overrides[get_assistant_service] = lambda: mock_assistant_service

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
