"""
Exception hierarchy for the DocuChat application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocuChatException(Exception):
    """Base exception for all DocuChat application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(DocuChatException):
    """Raised when required connection credentials are missing at startup."""

    def __init__(
        self,
        message: str,
        missing: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            missing: Names of the missing environment variables
            details: Additional context
        """
        details = details or {}
        if missing:
            details["missing"] = missing
        super().__init__(message, details)


class ValidationError(DocuChatException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class SessionNotFoundError(DocuChatException):
    """Raised when a session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Chat session not found: {session_id}", details)


class PersistenceError(DocuChatException):
    """Raised when a session store write or read fails."""

    def __init__(
        self,
        message: str,
        session_id: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize persistence error.

        Args:
            message: Error message
            session_id: Session the operation targeted
            operation: Operation that failed (create, append, delete, ...)
            details: Additional context
        """
        details = details or {}
        if session_id:
            details["session_id"] = session_id
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class UploadError(DocuChatException):
    """Raised when a document cannot be written to blob storage."""

    def __init__(
        self,
        message: str,
        file_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upload error.

        Args:
            message: Error message
            file_name: Original name of the file being uploaded
            details: Additional context
        """
        details = details or {}
        if file_name:
            details["file_name"] = file_name
        super().__init__(message, details)


class SearchError(DocuChatException):
    """Raised when search index operations fail."""

    def __init__(
        self,
        message: str,
        session_id: str | None = None,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize search error.

        Args:
            message: Error message
            session_id: Session ID for the failed query
            operation: Operation that failed (retrieve, ingest, status)
            details: Additional context
        """
        details = details or {}
        if session_id:
            details["session_id"] = session_id
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class IndexingError(SearchError):
    """Raised when an ingestion job cannot be started or has failed."""

    pass
