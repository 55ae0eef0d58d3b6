"""
Chat session ORM model.

Represents one document conversation keyed by an externally generated
session id.

Dependencies: sqlalchemy, docuchat.boundary.db.base
System role: Session persistence for chat history
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from docuchat.boundary.db.base import Base, TimestampMixin, UUIDMixin


class ChatSessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Chat session ORM model.

    session_id is unique: a session id maps to at most one row.
    Messages are loaded in append order and removed with the session.

    Attributes:
        id: UUID primary key (auto-generated)
        session_id: Opaque client-generated session identifier
        document_name: Name of the document discussed in this session
        user_id: Optional owner identifier
        messages: Ordered ChatMessageModel rows (cascading delete)
        created_at: Session creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)
    """

    __tablename__ = "chat_sessions"

    session_id: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    document_name: Mapped[str] = mapped_column(String(512), nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(255), index=True, nullable=True, default=None)

    messages = relationship(
        "ChatMessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="ChatMessageModel.position",
        lazy="selectin",
    )
