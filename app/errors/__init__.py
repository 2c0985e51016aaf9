from app.errors.auth import (
    InactiveUserError,
    InvalidTokenError,
    UserAuthenticationError,
    auth_exception_handler,
)
from app.errors.base import (
    BaseAppError,
    create_exception_handler,
    create_unhandled_exception_handler,
    error_content,
)
from app.errors.blog import (
    BlogError,
    BlogNotFoundError,
    BlogValidationError,
    blog_exception_handler,
)
from app.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    database_exception_handler,
)
from app.errors.upload import (
    CoverImageUploadError,
    ImageProcessingError,
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from app.errors.validation import validation_exception_handler

__all__ = [
    "BaseAppError",
    "BlogError",
    "BlogNotFoundError",
    "BlogValidationError",
    "CoverImageUploadError",
    "DatabaseConnectionError",
    "DatabaseError",
    "ImageProcessingError",
    "ImageTooLargeError",
    "InactiveUserError",
    "InvalidImageError",
    "InvalidTokenError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "UserAuthenticationError",
    "auth_exception_handler",
    "blog_exception_handler",
    "create_exception_handler",
    "create_unhandled_exception_handler",
    "database_exception_handler",
    "error_content",
    "upload_exception_handler",
    "validation_exception_handler",
]
