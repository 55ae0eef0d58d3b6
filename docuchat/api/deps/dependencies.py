"""
Dependency injection functions.

Factory functions for FastAPI dependencies, resolved from the service
container stored on app.state.

Dependencies: fastapi, docuchat.application, docuchat.api.deps.container
System role: DI wiring for request-scoped services
"""

from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from docuchat.api.deps.container import ServiceContainer
from docuchat.application.services import ChatService, DocumentProcessingService, SessionService
from docuchat.boundary.aws.s3_client import S3DocumentClient
from docuchat.boundary.db.connection import session_scope
from docuchat.core.indexing import IndexerPoller


def get_container(request: Request) -> ServiceContainer:
    """Return the container built during application startup."""
    return request.app.state.container


async def get_async_db(
    container: ServiceContainer = Depends(get_container),
) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a request-scoped database session.

    Yields:
        AsyncSession: Closed after the response is sent
    """
    async for session in session_scope(container.session_factory):
        yield session


def get_session_service(db: AsyncSession = Depends(get_async_db)) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        SessionService: Session store bound to the request's session
    """
    return SessionService(db=db)


def get_chat_service(
    session_service: SessionService = Depends(get_session_service),
    container: ServiceContainer = Depends(get_container),
) -> ChatService:
    """Get chat service with the shared contextual responder."""
    return ChatService(session_service=session_service, responder=container.responder)


def get_document_service(
    session_service: SessionService = Depends(get_session_service),
    container: ServiceContainer = Depends(get_container),
) -> DocumentProcessingService:
    """
    Get document processing service instance.

    Args:
        session_service: Session store (injected)
        container: Service container (injected)

    Returns:
        DocumentProcessingService: Upload pipeline over shared clients
    """
    return DocumentProcessingService(
        session_service=session_service,
        storage=container.storage,
        indexer=container.indexer,
        retriever=container.retriever,
        summarizer=container.summarizer,
        pipeline=container.settings.pipeline,
    )


def get_storage(container: ServiceContainer = Depends(get_container)) -> S3DocumentClient:
    """Get the S3 document client."""
    return container.storage


def get_indexer(container: ServiceContainer = Depends(get_container)) -> IndexerPoller:
    """Get the indexer trigger/poller."""
    return container.indexer
