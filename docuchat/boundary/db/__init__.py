"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), create_tables(): Connection management
  - ChatSessionModel, ChatMessageModel: Chat entities
  - session_crud, message_crud: CRUD operation singletons

Dependencies: sqlalchemy, docuchat.configs
System role: Database adapter providing persistent storage for chat sessions
"""

from docuchat.boundary.db.base import Base, TimestampMixin, UUIDMixin
from docuchat.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
    session_scope,
)
from docuchat.boundary.db.models import ChatMessageModel, ChatSessionModel
from docuchat.boundary.db.CRUD import (
    BaseCRUD,
    MessageCRUD,
    SessionCRUD,
    message_crud,
    session_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
    "session_scope",
    "ChatSessionModel",
    "ChatMessageModel",
    "BaseCRUD",
    "SessionCRUD",
    "MessageCRUD",
    "session_crud",
    "message_crud",
]
