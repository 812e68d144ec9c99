from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from walletauth.errors import AuthenticationError, RateLimitError

logger = structlog.get_logger(__name__)


def create_json_error_response(
    status_code: int,
    error: str,
    message: str | None = None,
    extra: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Create the stable `{success: false, error, message?}` error body."""
    content: dict[str, Any] = {"success": False, "error": error}
    if message is not None:
        content["message"] = message
    if extra:
        content.update(extra)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def user_error_handler(_: Request, exc: Exception) -> Response:
    """Handle all UserError subclasses with appropriate status codes."""
    if isinstance(exc, RateLimitError):
        return create_json_error_response(
            status_code=429,
            error="Too many requests",
            message=str(exc),
            extra={"retryAfter": exc.retry_after},
            headers={"Retry-After": str(exc.retry_after)},
        )

    # Any other UserError is a client mistake
    status_code = 401 if isinstance(exc, AuthenticationError) else 400

    return create_json_error_response(status_code=status_code, error=str(exc), message=str(exc))


async def http_exception_handler(_: Request, exc: Exception) -> Response:
    """Wrap routing errors (404, 405) in the standard error body."""
    if not isinstance(exc, StarletteHTTPException):
        raise exc
    detail = str(exc.detail)
    return create_json_error_response(status_code=exc.status_code, error=detail, message=detail, headers=exc.headers)


def describe_validation_error(error: dict[str, Any]) -> str:
    """Render one pydantic error as `field: reason`."""
    reason = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
    fields = [str(part) for part in error.get("loc", ()) if part != "body"]
    if not fields:
        return reason
    return f"{'.'.join(fields)}: {reason}"


async def request_validation_handler(_: Request, exc: Exception) -> Response:
    """Report every malformed request field in one 400 response."""
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    message = ", ".join(describe_validation_error(error) for error in errors) or "Invalid request data"
    return create_json_error_response(status_code=400, error=message, message=message)


def make_general_exception_handler(expose_details: bool) -> Callable[[Request, Exception], Awaitable[Response]]:
    async def general_exception_handler(_: Request, exc: Exception) -> Response:
        """Handle unexpected errors (500)."""
        logger.exception("unexpected_error", error=str(exc))
        return create_json_error_response(
            status_code=500,
            error="Internal server error",
            message=str(exc) if expose_details else "An unexpected error occurred",
        )

    return general_exception_handler
