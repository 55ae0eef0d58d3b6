"""
API test fixtures.

Provides: app with a mocked service container, async HTTP client
Dependencies: httpx, fastapi
System role: HTTP-level test infrastructure
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from docuchat.api.deps import get_chat_service, get_document_service, get_session_service
from docuchat.api.main import create_app
from docuchat.application.services.chat_service import ChatService
from docuchat.models.chat import ContextualResult, ResponseOutcome


@pytest.fixture
def container() -> MagicMock:
    """Service container with mocked vendor clients."""
    mock = MagicMock()
    mock.storage.test_connection.return_value = {"success": True}
    mock.indexer.test_connection = AsyncMock(return_value={"success": True, "status": "ACTIVE"})
    return mock


@pytest.fixture
def responder(make_result) -> MagicMock:
    mock = MagicMock()
    mock.respond = AsyncMock(
        return_value=ContextualResult(
            outcome=ResponseOutcome.ANSWERED,
            response="Revenue grew 12%.",
            citations=["report.pdf (Page 3)"],
            sources=[make_result(page_number=3)],
        )
    )
    return mock


@pytest.fixture
def document_service() -> MagicMock:
    mock = MagicMock()
    mock.process_document = AsyncMock()
    return mock


@pytest.fixture
def app(container, session_service, responder, document_service):
    """Application wired to the in-memory session store and mocks."""
    application = create_app(container=container)
    application.dependency_overrides[get_session_service] = lambda: session_service
    application.dependency_overrides[get_chat_service] = lambda: ChatService(session_service, responder)
    application.dependency_overrides[get_document_service] = lambda: document_service
    return application


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the app."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
