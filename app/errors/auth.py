"""Authentication errors."""

from starlette.status import HTTP_401_UNAUTHORIZED

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class UserAuthenticationError(BaseAppError):
    """Base class for authentication errors."""

    def __init__(
        self,
        detail: str = "Authentication failed",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)


class InvalidTokenError(UserAuthenticationError):
    """Raised when the bearer token is missing, expired or malformed."""

    def __init__(self) -> None:
        super().__init__("Could not validate credentials", HTTP_401_UNAUTHORIZED)


class InactiveUserError(UserAuthenticationError):
    """Raised when the token's subject no longer maps to a user."""

    def __init__(self) -> None:
        super().__init__("User not found for this token", HTTP_401_UNAUTHORIZED)


auth_exception_handler = create_exception_handler(logger)
