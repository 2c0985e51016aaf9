from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from structlog.stdlib import BoundLogger

from app.configs.settings import DEFAULT_ERROR_MESSAGE
from app.utils.helpers import host


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def error_content(message: str, **extra: Any) -> dict[str, Any]:
    """Build the error envelope returned by every failing endpoint."""
    return {"status": "error", "message": message, **extra}


def create_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        # Default values
        status_code = HTTP_500_INTERNAL_SERVER_ERROR
        detail = "Internal Server Error"

        # Extract from custom exception if available
        if hasattr(exc, "status_code"):
            status_code = exc.status_code
        if hasattr(exc, "detail"):
            detail = exc.detail

        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        # Additional exception attributes travel alongside the message
        extra = {k: v for k, v in exc.__dict__.items() if k not in ("status_code", "detail")}

        return ORJSONResponse(content=error_content(detail, **extra), status_code=status_code)

    return handler


def create_unhandled_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """Create the catch-all handler for exceptions no other handler claims."""

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.exception(
            "Unhandled exception",
            ip=host(request),
            path=request.url.path,
            error_type=type(exc).__name__,
        )
        return ORJSONResponse(
            content=error_content(DEFAULT_ERROR_MESSAGE),
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return handler
