"""
Shared test fixtures and configuration.
"""

import os
import tempfile

import pytest
from unittest.mock import AsyncMock

# Set test environment variables before importing medico modules
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", os.path.join(tempfile.gettempdir(), "medico_test_data"))
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ["LLM_API_KEY"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ["GOOGLE_API_KEY"] = ""

from fastapi.testclient import TestClient  # noqa: E402

from medico.llm.base import LLMProvider, LLMResponse  # noqa: E402
from medico.main import app  # noqa: E402
from medico.services.ai_service import AIService, get_ai_service  # noqa: E402
from medico.storage import LocalStorage, UserStorage, get_user_storage  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store(tmp_path):
    return LocalStorage(str(tmp_path / "kv"))


@pytest.fixture
def user_storage(store):
    return UserStorage(store)


@pytest.fixture
def mock_provider():
    """Provider double; set chat_completion.return_value / side_effect per test."""
    provider = AsyncMock(spec=LLMProvider)
    provider.chat_completion.return_value = LLMResponse(content="Test reply", model="test")
    return provider


@pytest.fixture
def ai_service(mock_provider):
    return AIService(mock_provider)


@pytest.fixture
def client(user_storage, ai_service):
    """TestClient with storage in tmp_path and the AI provider mocked."""
    app.dependency_overrides[get_user_storage] = lambda: user_storage
    app.dependency_overrides[get_ai_service] = lambda: ai_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Register a test user and return auth headers."""
    response = client.post("/auth/register", json={"email": "patient@example.com"})
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
