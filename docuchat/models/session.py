"""
Session domain models and schemas.

Persisted record shapes for chat sessions and messages, plus request and
response schemas for session operations.

Dependencies: pydantic
System role: Session API contracts
"""

from datetime import datetime, timezone

from pydantic import Field

from docuchat.models.common import CamelModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(CamelModel):
    """Single chat message as persisted in a session."""

    id: str = Field(description="Message identifier, unique within its session")
    content: str = Field(description="Message text")
    is_user: bool = Field(description="True for user-authored, False for assistant")
    timestamp: datetime = Field(default_factory=_utcnow, description="Creation time (UTC)")
    citations: list[str] | None = Field(default=None, description="Citation strings for answers")


class NewMessage(CamelModel):
    """Message submitted for appending; the store assigns or repairs the id."""

    id: str | None = Field(default=None, description="Optional caller-supplied id")
    content: str
    is_user: bool
    timestamp: datetime | None = None
    citations: list[str] | None = None


class ChatSession(CamelModel):
    """Chat session as persisted."""

    session_id: str
    document_name: str
    messages: list[Message] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    user_id: str | None = None


class CreateSessionRequest(CamelModel):
    """Request schema for creating a new session."""

    session_id: str = Field(min_length=1)
    document_name: str
    user_id: str | None = None


class InitializeSessionRequest(CamelModel):
    """Request schema for idempotent session bootstrap."""

    document_name: str


class SaveMessageRequest(CamelModel):
    """Request schema for appending a message to a session."""

    message: NewMessage


class SessionResponse(CamelModel):
    """Response wrapping a single session."""

    success: bool = True
    session: ChatSession


class RestoreSessionResponse(CamelModel):
    """Response for session restore; never raised, success=False when missing."""

    success: bool
    session: ChatSession | None = None
    error: str | None = None


class SessionListResponse(CamelModel):
    """Response listing sessions, most recently updated first."""

    success: bool = True
    sessions: list[ChatSession]


class DocumentSummaryResponse(CamelModel):
    """Stored document summary for a session, if any."""

    success: bool
    summary: str | None = None


class SaveMessageResponse(CamelModel):
    """Response for a message append; message carries the final id."""

    success: bool
    message: Message | None = None
