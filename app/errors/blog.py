"""Blog domain errors."""

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class BlogError(BaseAppError):
    """Base class for blog errors."""


class BlogValidationError(BlogError):
    """Raised when a request carries values outside the blog vocabularies."""

    def __init__(self, detail: str = "Invalid request") -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


class BlogNotFoundError(BlogError):
    """Raised when no blog matches the lookup (or the caller does not own it)."""

    def __init__(self, detail: str = "No blog found") -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


blog_exception_handler = create_exception_handler(logger)
