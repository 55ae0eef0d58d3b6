"""Service orchestrators."""

from .chat_service import ChatService
from .document_service import DocumentProcessingService
from .session_service import SessionService

__all__ = [
    "ChatService",
    "DocumentProcessingService",
    "SessionService",
]
