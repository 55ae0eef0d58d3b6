"""
Chat domain models and schemas.

Tagged contextual-response results and chat request/response schemas.

Dependencies: pydantic
System role: Chat API contracts
"""

from enum import Enum

from pydantic import Field

from docuchat.models.common import CamelModel
from docuchat.models.search import DocumentSearchResult
from docuchat.models.session import Message

FALLBACK_RESPONSE = (
    "I apologize, but I'm having trouble accessing the document content right now. "
    "Please try again or ask a different question."
)


class ResponseOutcome(str, Enum):
    """Variant tag of a contextual response."""

    ANSWERED = "answered"
    NO_CONTENT = "no_content"
    UPSTREAM_ERROR = "upstream_error"


class UpstreamErrorKind(str, Enum):
    """Which collaborator failed while answering."""

    SEARCH = "search"
    MODEL = "model"
    UNKNOWN = "unknown"


class ContextualResult(CamelModel):
    """
    Tagged result of the contextual responder.

    ANSWERED carries response, citations and sources. NO_CONTENT carries the
    model's response given an empty context. UPSTREAM_ERROR carries the
    failure kind and detail and no response.
    """

    outcome: ResponseOutcome
    response: str | None = None
    citations: list[str] = Field(default_factory=list)
    sources: list[DocumentSearchResult] = Field(default_factory=list)
    error_kind: UpstreamErrorKind | None = None
    error_detail: str | None = None


class ContextualResponse(CamelModel):
    """User-facing response shape: always renderable, never an error."""

    response: str
    citations: list[str] = Field(default_factory=list)
    sources: list[DocumentSearchResult] = Field(default_factory=list)


def to_legacy_response(result: ContextualResult) -> ContextualResponse:
    """
    Map a tagged result to the always-successful response shape.

    Upstream failures collapse to the fixed apology with no citations.

    Args:
        result: Tagged responder result

    Returns:
        ContextualResponse: Response, citations and sources for the UI
    """
    if result.outcome == ResponseOutcome.UPSTREAM_ERROR or result.response is None:
        return ContextualResponse(response=FALLBACK_RESPONSE)
    return ContextualResponse(
        response=result.response,
        citations=list(result.citations),
        sources=list(result.sources),
    )


class HistoryEntry(CamelModel):
    """Conversation history entry supplied by the client."""

    content: str
    is_user: bool
    id: str | None = None


class GenerateResponseRequest(CamelModel):
    """Request schema for a stateless contextual response."""

    user_message: str = Field(min_length=1)
    conversation_history: list[HistoryEntry] = Field(default_factory=list)


class ChatRequest(CamelModel):
    """Request schema for a persisted chat turn."""

    message: str = Field(min_length=1)


class ChatResponse(CamelModel):
    """Response schema for chat endpoints."""

    success: bool = True
    response: str
    citations: list[str] = Field(default_factory=list)
    sources: list[DocumentSearchResult] = Field(default_factory=list)
    outcome: ResponseOutcome | None = None
    message: Message | None = None
