"""
Utilities for standardized error responses across API endpoints.
"""
from typing import Any, Dict, Optional
import logging

from fastapi import status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AigrotException, MethodNotAllowed

logger = logging.getLogger("aigrot.errors")

INTERNAL_ERROR_MESSAGE = "Internal error"


class ErrorResponse:
    """Standard error response format."""

    @staticmethod
    def model(message: str) -> Dict[str, Any]:
        """
        Create a standardized error response body.

        Args:
            message: Error message shown to the caller

        Returns:
            Dict: ``{"error": message}``
        """
        return {"error": message}

    @staticmethod
    def from_exception(exception: Exception) -> Dict[str, Any]:
        """
        Create error response from exception.

        Unexpected exceptions get a generic message so internals never reach
        the caller.
        """
        if isinstance(exception, AigrotException):
            return ErrorResponse.model(exception.message)
        if isinstance(exception, StarletteHTTPException):
            return ErrorResponse.model(str(exception.detail))
        return ErrorResponse.model(INTERNAL_ERROR_MESSAGE)


def status_code_for(exception: Exception) -> int:
    """Map an exception to the HTTP status it is reported with."""
    if isinstance(exception, (AigrotException, StarletteHTTPException)):
        return exception.status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def log_exception(exception: Exception) -> None:
    """Log client errors briefly and server errors with a traceback."""
    code = status_code_for(exception)
    if code < 500:
        logger.info(f"Rejected request ({code}): {exception}")
    elif isinstance(exception, AigrotException):
        logger.error(f"{exception.code}: {exception.message} {exception.details or ''}".rstrip())
    else:
        logger.error(f"Unhandled exception: {exception}", exc_info=exception)


def from_http_exception(exception: StarletteHTTPException) -> Optional[AigrotException]:
    """Translate framework HTTP errors that have an application equivalent."""
    if exception.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        allow = (exception.headers or {}).get("Allow", "POST")
        return MethodNotAllowed(allow=allow)
    return None


def error_response(exception: Exception) -> JSONResponse:
    """
    Build the JSON response for any exception.

    Args:
        exception: Exception to report

    Returns:
        JSONResponse: ``{"error": ...}`` with the mapped status code
    """
    log_exception(exception)

    headers: Optional[Dict[str, str]] = None
    if isinstance(exception, MethodNotAllowed):
        headers = {"Allow": exception.allow}
    elif isinstance(exception, StarletteHTTPException):
        headers = getattr(exception, "headers", None)

    return JSONResponse(
        status_code=status_code_for(exception),
        content=ErrorResponse.from_exception(exception),
        headers=headers,
    )
