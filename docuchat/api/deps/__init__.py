"""API-specific dependencies."""

from .container import ServiceContainer
from .dependencies import (
    get_async_db,
    get_chat_service,
    get_container,
    get_document_service,
    get_indexer,
    get_session_service,
    get_storage,
)

__all__ = [
    "ServiceContainer",
    "get_async_db",
    "get_chat_service",
    "get_container",
    "get_document_service",
    "get_indexer",
    "get_session_service",
    "get_storage",
]
