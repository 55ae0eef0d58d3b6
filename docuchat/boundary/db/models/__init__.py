"""
Database models package.

Exports:
  - ChatSessionModel: Chat session ORM model
  - ChatMessageModel: Chat message ORM model

Dependencies: sqlalchemy, docuchat.boundary.db.base
System role: Database model definitions for chat persistence
"""

from docuchat.boundary.db.models.message_model import ChatMessageModel
from docuchat.boundary.db.models.session_model import ChatSessionModel

__all__ = [
    "ChatSessionModel",
    "ChatMessageModel",
]
