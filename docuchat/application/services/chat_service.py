"""
Chat service for document Q&A.

Answers user messages from the session's document content, either
statelessly with caller-supplied history or as a persisted chat turn.

Dependencies: docuchat.core.responder, docuchat.application.services.session_service
System role: Chat service orchestration layer
"""

import logging
from typing import Sequence

from docuchat.application.services.session_service import SessionService
from docuchat.core.exceptions import SessionNotFoundError
from docuchat.core.responder import ContextualResponder, HistoryItem
from docuchat.models.chat import ChatResponse, ContextualResponse, ContextualResult, to_legacy_response
from docuchat.models.session import NewMessage

logger = logging.getLogger(__name__)


class ChatService:
    """
    Chat service for conversational Q&A.

    Coordinates session validation, history lookup, the contextual
    responder, and message persistence.
    """

    def __init__(self, session_service: SessionService, responder: ContextualResponder) -> None:
        """
        Initialize chat service.

        Args:
            session_service: Session store
            responder: Contextual responder
        """
        self.session_service = session_service
        self.responder = responder

    async def respond(
        self,
        session_id: str,
        user_message: str,
        history: Sequence[HistoryItem],
    ) -> ContextualResult:
        """Return the responder's tagged result."""
        return await self.responder.respond(session_id, user_message, history)

    async def generate_contextual_response(
        self,
        session_id: str,
        user_message: str,
        history: Sequence[HistoryItem],
    ) -> ContextualResponse:
        """
        Answer a message without touching the session store.

        Upstream failures become the fixed apology with empty citations.

        Args:
            session_id: Session whose documents are searched
            user_message: New user message
            history: Prior conversation, oldest first

        Returns:
            ContextualResponse: response, citations, sources
        """
        result = await self.respond(session_id, user_message, history)
        return to_legacy_response(result)

    async def process_chat_turn(self, session_id: str, user_message: str) -> ChatResponse:
        """
        Process one persisted chat turn.

        Flow:
        1. Validate session exists
        2. Store the user message
        3. Answer using the stored history before this message
        4. Store the assistant message with citations

        Args:
            session_id: Session ID
            user_message: User's message

        Returns:
            ChatResponse: Response, citations, sources, outcome and stored assistant message

        Raises:
            SessionNotFoundError: If the session does not exist
            PersistenceError: If a message cannot be stored
        """
        session = await self.session_service.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        history = list(session.messages)
        await self.session_service.add_message(session_id, NewMessage(content=user_message, is_user=True))

        result = await self.respond(session_id, user_message, history)
        reply = to_legacy_response(result)

        stored = await self.session_service.add_message(
            session_id,
            NewMessage(content=reply.response, is_user=False, citations=reply.citations or None),
        )

        logger.info(
            f"{__name__}:process_chat_turn - Turn completed",
            extra={"session_id": session_id, "outcome": result.outcome.value},
        )
        return ChatResponse(
            response=reply.response,
            citations=reply.citations,
            sources=reply.sources,
            outcome=result.outcome,
            message=stored,
        )
