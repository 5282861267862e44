"""
Error handling middleware with error sanitization.

Every failure leaves the API as `{"error": <message>, "timestamp": <ISO-8601>}`
with the status code carried by the exception, the same body the in-process
client's errors serialize to.
"""

import logging
import re
import traceback
from typing import Any, Callable, Optional

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import StorageFailure, TalentFlowError
from core.utils.datetime import now, to_iso

logger = logging.getLogger(__name__)

# Patterns for sensitive data that should never be logged
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'api[_-]?key["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'\b\d{3}-\d{2}-\d{4}\b'),  # SSN
    re.compile(r'\b\d{16}\b'),  # Credit card
]


def sanitize_error_message(message: str) -> str:
    """
    Remove sensitive information from error messages.

    Args:
        message: Original error message

    Returns:
        Sanitized error message
    """
    sanitized = message
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub('[REDACTED]', sanitized)
    return sanitized


def get_safe_error_details(exc: Exception, include_details: bool = False) -> dict[str, Any]:
    """
    Extract error details without exposing sensitive information.

    Args:
        exc: The exception to extract details from
        include_details: Whether to include the traceback (debug only)
    """
    details = {
        "type": type(exc).__name__,
        "message": sanitize_error_message(str(exc)),
    }
    if include_details:
        details["traceback"] = traceback.format_exc()
    return details


def error_body(message: str, timestamp: Optional[str] = None, **extra: Any) -> dict[str, Any]:
    """The `{error, timestamp}` body, plus any extra keys."""
    body = {"error": message, "timestamp": timestamp or to_iso(now())}
    body.update(extra)
    return body


def format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """Flatten pydantic validation errors into field/message/type entries."""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": sanitize_error_message(error["msg"]),
            "type": error["type"],
        })
    return errors


def response_for(exc: Exception, path: str, method: str, debug: bool = False) -> JSONResponse:
    """
    Map an exception to its JSON error response.

    Application errors keep their own status and message. Database errors
    become a 500 storage failure. Anything else is a generic 500 whose
    message is never shown to the caller.
    """
    if isinstance(exc, TalentFlowError):
        level = logging.WARNING if exc.status_code < 500 else logging.ERROR
        logger.log(level, f"{type(exc).__name__}: {method} {path} - {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    if isinstance(exc, StarletteHTTPException):
        message = sanitize_error_message(str(exc.detail))
        logger.warning(f"HTTP exception: {method} {path} - Status: {exc.status_code}, Message: {message}")
        return JSONResponse(status_code=exc.status_code, content=error_body(message))

    if isinstance(exc, RequestValidationError):
        details = format_validation_errors(exc)
        logger.warning(f"Validation error: {method} {path} - Errors: {details}")
        return JSONResponse(
            status_code=422,
            content=error_body("Request validation failed", details=details),
        )

    if isinstance(exc, SQLAlchemyError):
        failure = StorageFailure()
        logger.error(f"SQLAlchemy error: {method} {path}", exc_info=not debug)
        content = failure.to_dict()
        if debug:
            content["details"] = get_safe_error_details(exc, include_details=True)
        return JSONResponse(status_code=failure.status_code, content=content)

    logger.error(
        f"Unhandled exception: {method} {path} - "
        f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
        exc_info=True,
    )
    content = error_body("An unexpected error occurred")
    if debug:
        content["details"] = get_safe_error_details(exc, include_details=True)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


class ErrorHandlingMiddleware:
    """
    ASGI middleware that turns anything escaping the route handlers and the
    registered exception handlers into a JSON error response.
    """

    def __init__(self, app: Callable, debug: bool = False):
        """
        Args:
            app: The ASGI application
            debug: Whether to include tracebacks in error bodies
        """
        self.app = app
        self.debug = debug

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            await self.app(scope, receive, send)
        except Exception as exc:
            response = await self._handle_exception(exc, scope)
            await response(scope, receive, send)

    async def _handle_exception(self, exc: Exception, scope: dict) -> Response:
        response = response_for(
            exc,
            scope.get("path", "unknown"),
            scope.get("method", "unknown"),
            debug=self.debug,
        )

        # Echo the request ID if the client sent one
        headers = dict(scope.get("headers") or [])
        request_id = headers.get(b"x-request-id")
        if request_id:
            response.headers["x-request-id"] = request_id.decode()
        return response


def setup_error_handlers(app, debug: bool = False):
    """
    Set up exception handlers for a FastAPI application.

    Args:
        app: FastAPI application instance
        debug: Whether to include tracebacks in error bodies
    """

    async def handle(request: Request, exc: Exception):
        return response_for(exc, str(request.url.path), request.method, debug=debug)

    app.add_exception_handler(TalentFlowError, handle)
    app.add_exception_handler(StarletteHTTPException, handle)
    app.add_exception_handler(RequestValidationError, handle)
    app.add_exception_handler(SQLAlchemyError, handle)
