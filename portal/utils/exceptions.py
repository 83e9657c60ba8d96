"""
Exceptions raised by services and dependencies.

Each APIException subclass carries its HTTP status and a stable error code;
the handlers in portal.services.error_handler turn them into JSON envelopes
or error pages.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base class: ``status_code`` and ``error_code`` come from the subclass."""

    default_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "API_ERROR"

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code or self.default_status, detail=detail, headers=headers)
        self.error_code = error_code or self.default_code


class ValidationError(APIException):
    default_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_code = "VALIDATION_ERROR"

    def __init__(self, detail: str, field_errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(detail)
        self.field_errors = field_errors or []


class NotFoundError(APIException):
    default_status = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        suffix = f" with ID: {resource_id}" if resource_id else ""
        super().__init__(f"{resource} not found{suffix}")


class UnauthorizedError(APIException):
    default_status = status.HTTP_401_UNAUTHORIZED
    default_code = "UNAUTHORIZED"

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(APIException):
    default_status = status.HTTP_403_FORBIDDEN
    default_code = "FORBIDDEN"

    def __init__(self, detail: str = "Access forbidden"):
        super().__init__(detail)


class ConflictError(APIException):
    default_status = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"


class BadRequestError(APIException):
    default_status = status.HTTP_400_BAD_REQUEST
    default_code = "BAD_REQUEST"


# Authentication
class InvalidCredentialsError(UnauthorizedError):

    def __init__(self, detail: str = "Invalid email or password"):
        super().__init__(detail)


class InvalidTokenError(UnauthorizedError):

    def __init__(self, detail: str = "Invalid token"):
        super().__init__(detail)


class InactiveUserError(ForbiddenError):

    def __init__(self, detail: str = "User account is inactive"):
        super().__init__(detail)


class InsufficientPermissionsError(ForbiddenError):

    def __init__(self, action: str):
        super().__init__(f"Insufficient permissions to {action}")


# Uploads
class FileUploadError(BadRequestError):

    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}")


class UnsupportedFileTypeError(BadRequestError):

    def __init__(self, file_type: str, supported_types: List[str]):
        super().__init__(
            f"Unsupported file type '{file_type}'. Supported types: {', '.join(supported_types)}"
        )


class FileSizeExceededError(BadRequestError):

    def __init__(self, size: int, max_size: int):
        super().__init__(f"File size {size} bytes exceeds maximum allowed size {max_size} bytes")


class StorageConfigurationError(RuntimeError):
    """Object storage credentials are missing; raised at startup."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"AWS credentials are not properly configured (missing: {', '.join(missing)})")
