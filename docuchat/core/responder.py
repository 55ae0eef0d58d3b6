"""
Contextual responder.

Combines retrieved passages and recent conversation history into one
model call and derives citations from the passages used.

Dependencies: langchain_core, docuchat.core.retriever, docuchat.core.citation_builder
System role: Answer generation for chat turns
"""

import logging
from typing import Protocol, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from docuchat.boundary.llm.chat_model import message_text
from docuchat.core.citation_builder import CitationBuilder
from docuchat.core.exceptions import SearchError
from docuchat.core.prompts import RESPONDER_PROMPT
from docuchat.core.retriever import ContentRetriever
from docuchat.models.chat import ContextualResult, ResponseOutcome, UpstreamErrorKind
from docuchat.models.search import DocumentSearchResult

logger = logging.getLogger(__name__)

EMPTY_RESPONSE = "I apologize, but I could not generate a response at this time."


class HistoryItem(Protocol):
    content: str
    is_user: bool


def build_context(results: Sequence[DocumentSearchResult]) -> str:
    """Render passages as `Source: <fileName>\\nContent: <content>` blocks."""
    return "\n\n".join(f"Source: {r.metadata.file_name}\nContent: {r.content}" for r in results)


def build_history(history: Sequence[HistoryItem], window: int = 10) -> list[BaseMessage]:
    """
    Convert the most recent non-blank history entries to chat messages.

    Args:
        history: Entries oldest first
        window: Number of entries to keep

    Returns:
        list[BaseMessage]: HumanMessage/AIMessage in original order
    """
    kept = [item for item in history if item.content.strip()]
    if window <= 0:
        return []
    return [
        HumanMessage(content=item.content) if item.is_user else AIMessage(content=item.content)
        for item in kept[-window:]
    ]


class ContextualResponder:
    """Retrieval-grounded answer generation."""

    def __init__(
        self,
        retriever: ContentRetriever,
        model: BaseChatModel,
        top_k: int = 5,
        history_window: int = 10,
        citation_builder: CitationBuilder | None = None,
    ) -> None:
        """
        Initialize responder.

        Args:
            retriever: Passage retriever
            model: Chat model for answers
            top_k: Passages retrieved per turn
            history_window: History entries included in the prompt
            citation_builder: Citation formatter
        """
        self._retriever = retriever
        self._model = model
        self._top_k = top_k
        self._history_window = history_window
        self._citations = citation_builder or CitationBuilder()

    async def respond(
        self,
        session_id: str,
        user_message: str,
        history: Sequence[HistoryItem],
    ) -> ContextualResult:
        """
        Answer a user message from the session's document content.

        Never raises: retrieval and model failures are returned as
        UPSTREAM_ERROR results.

        Args:
            session_id: Session whose documents are searched
            user_message: New user message
            history: Prior conversation, oldest first

        Returns:
            ContextualResult: ANSWERED, NO_CONTENT or UPSTREAM_ERROR
        """
        try:
            sources = await self._retriever.search(user_message, session_id=session_id, top=self._top_k)
        except SearchError as e:
            logger.error(f"{__name__}:respond - Retrieval failed", extra={"session_id": session_id, "error": str(e)})
            return ContextualResult(
                outcome=ResponseOutcome.UPSTREAM_ERROR,
                error_kind=UpstreamErrorKind.SEARCH,
                error_detail=e.message,
            )
        except Exception as e:
            logger.error(f"{__name__}:respond - Unexpected retrieval failure: {e}", exc_info=True)
            return ContextualResult(
                outcome=ResponseOutcome.UPSTREAM_ERROR,
                error_kind=UpstreamErrorKind.UNKNOWN,
                error_detail=str(e),
            )

        messages = RESPONDER_PROMPT.format_messages(
            context=build_context(sources),
            history=build_history(history, self._history_window),
            question=user_message,
        )

        try:
            response = await self._model.ainvoke(messages)
        except Exception as e:
            logger.error(f"{__name__}:respond - Model call failed", extra={"session_id": session_id, "error": str(e)})
            return ContextualResult(
                outcome=ResponseOutcome.UPSTREAM_ERROR,
                error_kind=UpstreamErrorKind.MODEL,
                error_detail=str(e),
            )

        text = message_text(response) or EMPTY_RESPONSE
        if not sources:
            logger.info(f"{__name__}:respond - No passages found", extra={"session_id": session_id})
            return ContextualResult(outcome=ResponseOutcome.NO_CONTENT, response=text)

        return ContextualResult(
            outcome=ResponseOutcome.ANSWERED,
            response=text,
            citations=self._citations.build_citations(sources),
            sources=sources,
        )
