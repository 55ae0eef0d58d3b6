"""
Session API endpoints.

Routes:
- POST /sessions - Create new session
- GET /sessions - List sessions (optional userId filter)
- GET /sessions/{id} - Restore session
- DELETE /sessions/{id} - Delete session
- POST /sessions/{id}/initialize - Get or create session with welcome message
- POST /sessions/{id}/messages - Append message
- GET /sessions/{id}/summary - Stored document summary

Dependencies: docuchat.application.services.session_service, docuchat.models
System role: Session management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from docuchat.api.deps import get_session_service
from docuchat.application.services.session_service import SessionService
from docuchat.core.exceptions import SessionNotFoundError
from docuchat.models.common import SuccessFlagResponse
from docuchat.models.session import (
    CreateSessionRequest,
    DocumentSummaryResponse,
    InitializeSessionRequest,
    RestoreSessionResponse,
    SaveMessageRequest,
    SaveMessageResponse,
    SessionListResponse,
    SessionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    request: CreateSessionRequest,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Create new session with an empty message list.

    Raises:
        PersistenceError: Creation failed, including a duplicate session id (500)
    """
    session = await session_service.create_session(
        request.session_id,
        request.document_name,
        user_id=request.user_id,
    )
    return SessionResponse(session=session)


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    user_id: str | None = Query(default=None, alias="userId"),
    session_service: SessionService = Depends(get_session_service),
) -> SessionListResponse:
    """List sessions, most recently updated first."""
    sessions = await session_service.list_sessions(user_id=user_id)
    return SessionListResponse(sessions=sessions)


@router.get("/{session_id}", response_model=RestoreSessionResponse)
async def restore_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> RestoreSessionResponse:
    """Restore a session; a missing session yields success=false with 200."""
    return await session_service.restore_session(session_id)


@router.delete("/{session_id}", response_model=SuccessFlagResponse)
async def delete_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> SuccessFlagResponse:
    """Delete a session and its messages; success=false when it did not exist."""
    deleted = await session_service.delete_session(session_id)
    return SuccessFlagResponse(success=deleted)


@router.post("/{session_id}/initialize", response_model=SessionResponse)
async def initialize_session(
    session_id: str,
    request: InitializeSessionRequest,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """Return the session, creating it with a welcome message if needed."""
    session = await session_service.initialize_session(session_id, request.document_name)
    return SessionResponse(session=session)


@router.post("/{session_id}/messages", response_model=SaveMessageResponse)
async def save_message(
    session_id: str,
    request: SaveMessageRequest,
    session_service: SessionService = Depends(get_session_service),
) -> SaveMessageResponse:
    """
    Append a message to a session.

    Raises:
        SessionNotFoundError: No such session (404)
    """
    stored = await session_service.add_message(session_id, request.message)
    if stored is None:
        raise SessionNotFoundError(session_id)
    return SaveMessageResponse(success=True, message=stored)


@router.get("/{session_id}/summary", response_model=DocumentSummaryResponse)
async def get_document_summary(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> DocumentSummaryResponse:
    """Return the stored document summary message, if any."""
    summary = await session_service.get_document_summary(session_id)
    return DocumentSummaryResponse(success=summary is not None, summary=summary)
