"""
Utility modules for the estate portal.
"""

from .auth import (
    create_access_token,
    verify_token,
    TokenPayload
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConflictError,
    BadRequestError,
    InvalidCredentialsError,
    InvalidTokenError,
    InactiveUserError,
    InsufficientPermissionsError,
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError,
    StorageConfigurationError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Auth utilities
    "create_access_token",
    "verify_token",
    "TokenPayload",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConflictError",
    "BadRequestError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "InactiveUserError",
    "InsufficientPermissionsError",
    "FileUploadError",
    "UnsupportedFileTypeError",
    "FileSizeExceededError",
    "StorageConfigurationError",
]
