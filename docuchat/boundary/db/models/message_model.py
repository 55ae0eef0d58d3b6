"""
Chat message ORM model.

Dependencies: sqlalchemy, docuchat.boundary.db.base
System role: Message persistence within a chat session
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docuchat.boundary.db.base import Base, UUIDMixin, utcnow


class ChatMessageModel(Base, UUIDMixin):
    """
    Single message in a chat session.

    (session_pk, message_id) and (session_pk, position) are unique, so ids
    never repeat within a session and order is the append order.

    Attributes:
        session_pk: Parent session primary key
        message_id: Message id exposed to clients
        position: Zero-based append index within the session
        content: Message text
        is_user: True for user messages, False for assistant messages
        timestamp: Message creation time (UTC)
        citations: Optional list of citation strings
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        UniqueConstraint("session_pk", "message_id", name="uq_chat_messages_session_message_id"),
        UniqueConstraint("session_pk", "position", name="uq_chat_messages_session_position"),
    )

    session_pk: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    message_id: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_user: Mapped[bool] = mapped_column(Boolean, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    citations: Mapped[list[str] | None] = mapped_column(JSON, nullable=True, default=None)

    session = relationship("ChatSessionModel", back_populates="messages")
