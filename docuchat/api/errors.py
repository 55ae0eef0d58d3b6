"""
API error handling.

Maps the application exception hierarchy to HTTP status codes and the
`{success: false, error, details}` error body.

Dependencies: fastapi, docuchat.core.exceptions
System role: Consistent error responses across endpoints
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from docuchat.core.exceptions import (
    ConfigurationError,
    DocuChatException,
    IndexingError,
    PersistenceError,
    SearchError,
    SessionNotFoundError,
    UploadError,
    ValidationError,
)
from docuchat.models.common import ErrorResponse

logger = logging.getLogger(__name__)

STATUS_BY_EXCEPTION: list[tuple[type[DocuChatException], int]] = [
    (SessionNotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (UploadError, status.HTTP_502_BAD_GATEWAY),
    (IndexingError, status.HTTP_502_BAD_GATEWAY),
    (SearchError, status.HTTP_502_BAD_GATEWAY),
    (PersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ConfigurationError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def status_for(exc: DocuChatException) -> int:
    """Return the HTTP status for an application exception."""
    for exc_type, code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def docuchat_exception_handler(request: Request, exc: DocuChatException) -> JSONResponse:
    """Render an application exception as an ErrorResponse."""
    code = status_for(exc)
    log = logger.warning if code < 500 else logger.error
    log(
        f"{__name__}:handler - {exc.__class__.__name__} on {request.method} {request.url.path}",
        extra={"error": exc.message, "details": exc.details},
    )
    body = ErrorResponse(error=exc.message, details=exc.details or None)
    return JSONResponse(status_code=code, content=body.model_dump())


def register_exception_handlers(app: FastAPI) -> None:
    """Attach application exception handlers to the app."""
    app.add_exception_handler(DocuChatException, docuchat_exception_handler)
