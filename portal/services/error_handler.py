"""
Error responses for the JSON API and the server-rendered pages.

API errors share one envelope:
    {"error": {"code", "message", "timestamp", "request_id"[, "details"]}}
"""

from typing import Dict, Any, Optional, List
from datetime import datetime, timezone
from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from pydantic import ValidationError as PydanticValidationError
from fastapi.exceptions import RequestValidationError
from portal.config import settings
from portal.utils.exceptions import APIException, ValidationError
import logging
import uuid

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def wants_html(request: Request) -> bool:
    """Browsers navigating outside the API prefix get an error page instead of JSON."""
    return (
        not request.url.path.startswith(settings.api_v1_prefix)
        and "text/html" in request.headers.get("accept", "")
    )


class ErrorHandlerService:
    """
    Builds error envelopes and logs every handled error with a short request id.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "code": error_code,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        }
        if details:
            body["details"] = details
        if request_id:
            body["request_id"] = request_id
        return {"error": body}

    @staticmethod
    def _respond(
        status_code: int,
        error_code: str,
        message: str,
        request: Optional[Request],
        level: int = logging.WARNING,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
        exc_info: bool = False,
    ) -> JSONResponse:
        request_id = uuid.uuid4().hex[:8]
        path = request.url.path if request else None
        logger.log(
            level,
            f"[{request_id}] {status_code} {error_code} on {path}: {message}",
            extra={"request_id": request_id, "error_code": error_code, "path": path},
            exc_info=exc_info,
        )
        return JSONResponse(
            status_code=status_code,
            content=ErrorHandlerService.format_error_response(error_code, message, details, request_id),
            headers=headers,
        )

    @staticmethod
    def handle_api_exception(exception: APIException, request: Optional[Request] = None) -> JSONResponse:
        details = exception.field_errors if isinstance(exception, ValidationError) else None
        return ErrorHandlerService._respond(
            exception.status_code,
            exception.error_code,
            exception.detail,
            request,
            details=details,
            headers=exception.headers,
        )

    @staticmethod
    def handle_validation_error(
        exception: RequestValidationError | PydanticValidationError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Report every failing field as ``{"field": "body -> price", "message", "type"}``."""
        details = [
            {
                "field": " -> ".join(str(part) for part in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
            for error in exception.errors()
        ]
        return ErrorHandlerService._respond(
            422, "VALIDATION_ERROR", "Request validation failed", request, details=details
        )

    @staticmethod
    def handle_database_error(exception: SQLAlchemyError, request: Optional[Request] = None) -> JSONResponse:
        """Database failures never leak driver messages to the client."""
        if isinstance(exception, IntegrityError):
            status_code, error_code, message = 409, "INTEGRITY_ERROR", "Data integrity constraint violation"
        else:
            status_code, error_code, message = 500, "DATABASE_ERROR", "Database operation failed"
        logger.debug(f"Database error detail: {exception}")
        return ErrorHandlerService._respond(
            status_code, error_code, message, request, level=logging.ERROR, exc_info=True
        )

    @staticmethod
    def handle_http_exception(exception: HTTPException, request: Optional[Request] = None) -> JSONResponse:
        return ErrorHandlerService._respond(
            exception.status_code,
            f"HTTP_{exception.status_code}",
            str(exception.detail),
            request,
            headers=getattr(exception, "headers", None),
        )

    @staticmethod
    def handle_unexpected_error(exception: Exception, request: Optional[Request] = None) -> JSONResponse:
        logger.debug(f"Unhandled {type(exception).__name__}: {exception}")
        return ErrorHandlerService._respond(
            500, "INTERNAL_SERVER_ERROR", GENERIC_ERROR_MESSAGE, request, level=logging.ERROR, exc_info=True
        )
