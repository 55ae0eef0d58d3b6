"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory database, session store, fake chat models, search result factory
Dependencies: pytest, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from docuchat.models.search import DocumentSearchResult, SearchMetadata


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from docuchat.boundary.db.base import Base
    from docuchat.boundary.db.models import ChatMessageModel, ChatSessionModel  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_service(test_async_db):
    """SessionService bound to the in-memory database."""
    from docuchat.application.services.session_service import SessionService

    return SessionService(db=test_async_db)


@pytest.fixture
def make_result():
    """Factory for DocumentSearchResult instances."""

    def _make(
        content: str = "Quarterly revenue grew 12%.",
        file_name: str = "report.pdf",
        session_id: str = "s1",
        page_number: int | None = None,
        score: float = 0.5,
    ) -> DocumentSearchResult:
        return DocumentSearchResult(
            content=content,
            metadata=SearchMetadata(file_name=file_name, session_id=session_id, page_number=page_number),
            score=score,
        )

    return _make


@pytest.fixture
def fake_chat_model():
    """Factory for FakeListChatModel with canned responses."""

    def _make(*responses: str) -> FakeListChatModel:
        return FakeListChatModel(responses=list(responses))

    return _make


@pytest.fixture
def failing_chat_model() -> MagicMock:
    """Chat model whose every call raises."""
    model = MagicMock()
    model.ainvoke = AsyncMock(side_effect=RuntimeError("model unavailable"))
    return model


@pytest.fixture
def recorded_sleeps():
    """Async sleep replacement that records requested delays."""
    delays: list[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays
    return _sleep
