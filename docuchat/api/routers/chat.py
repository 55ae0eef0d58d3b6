"""
Chat API endpoints.

Routes:
- POST /sessions/{id}/respond - Stateless contextual response with caller history
- POST /sessions/{id}/chat - Persisted chat turn

Upstream search/model failures return 200 with the fallback apology.

Dependencies: docuchat.application.services.chat_service, docuchat.models
System role: Chat HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from docuchat.api.deps import get_chat_service
from docuchat.application.services.chat_service import ChatService
from docuchat.models.chat import ChatRequest, ChatResponse, GenerateResponseRequest, to_legacy_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["chat"])


@router.post("/{session_id}/respond", response_model=ChatResponse)
async def generate_response(
    session_id: str,
    request: GenerateResponseRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """
    Answer a message from the session's documents without storing it.

    Args:
        session_id: Session whose documents are searched
        request: User message and conversation history
        chat_service: Injected ChatService

    Returns:
        ChatResponse: Response, citations, sources and outcome tag
    """
    result = await chat_service.respond(session_id, request.user_message, request.conversation_history)
    reply = to_legacy_response(result)
    return ChatResponse(
        response=reply.response,
        citations=reply.citations,
        sources=reply.sources,
        outcome=result.outcome,
    )


@router.post("/{session_id}/chat", response_model=ChatResponse)
async def chat(
    session_id: str,
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """
    Store the user message, answer it, and store the answer.

    Raises:
        SessionNotFoundError: No such session (404)
        PersistenceError: Message could not be stored (500)
    """
    return await chat_service.process_chat_turn(session_id, request.message)
