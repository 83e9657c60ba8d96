"""
FastAPI application entry point.
Main application setup and configuration.
"""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError as PydanticValidationError
import logging

from portal.config import settings
from portal.database import test_database_connection, close_db_connection
from portal.routers import (
    auth_router,
    properties_router,
    moderation_router,
    favorites_router,
    agents_router,
    complexes_router,
    uploads_router,
    pages_router
)
from portal.services.storage import initialize_storage
from portal.services.error_handler import ErrorHandlerService, GENERIC_ERROR_MESSAGE, wants_html
from portal.templating import templates
from portal.utils.exceptions import APIException

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Builds the shared storage client and checks the database before serving.

    Raises:
        StorageConfigurationError: If the storage credentials are missing
    """
    # Startup
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    app.state.storage = initialize_storage(settings).unwrap()

    db_connected = await test_database_connection()
    if not db_connected:
        logger.error("Failed to connect to database on startup")

    yield

    # Shutdown
    logger.info("Shutting down application")
    await close_db_connection()


# Create FastAPI application instance
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Property listing portal: server-rendered pages plus a JSON API.

    ## Authentication

    Use `/api/v1/auth/login` to obtain a JWT token and send it as `Bearer <token>`,
    or sign in through `/auth/login` which stores the token in a session cookie.
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Authentication", "description": "Registration, login and session"},
        {"name": "Properties", "description": "Featured listings, search and listing management"},
        {"name": "Moderation", "description": "Approval and rejection of listings"},
        {"name": "Favorites", "description": "Favorite listings of the current user"},
        {"name": "Agents", "description": "Agent directory and reviews"},
        {"name": "Complexes", "description": "Residential complexes"},
        {"name": "Uploads", "description": "Image upload to object storage"},
        {"name": "Health", "description": "System health endpoints"},
    ],
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(auth_router, prefix=settings.api_v1_prefix)
app.include_router(properties_router, prefix=settings.api_v1_prefix)
app.include_router(moderation_router, prefix=settings.api_v1_prefix)
app.include_router(favorites_router, prefix=settings.api_v1_prefix)
app.include_router(agents_router, prefix=settings.api_v1_prefix)
app.include_router(complexes_router, prefix=settings.api_v1_prefix)
app.include_router(uploads_router, prefix=settings.api_v1_prefix)

# Server-rendered pages
app.include_router(pages_router)


def error_page(request: Request, status_code: int, message: str):
    return templates.TemplateResponse(
        request,
        "error.html",
        {"current_user": None, "status_code": status_code, "message": message},
        status_code=status_code,
    )


# Global exception handlers using ErrorHandlerService
@app.exception_handler(APIException)
async def api_exception_handler(request: Request, exc: APIException):
    """Handle custom API exceptions with structured error responses."""
    return ErrorHandlerService.handle_api_exception(exc, request)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle FastAPI request validation errors with detailed field information."""
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(PydanticValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: PydanticValidationError):
    """Handle Pydantic validation errors with detailed field information."""
    return ErrorHandlerService.handle_validation_error(exc, request)


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    """Query failures on pages render the generic error view without the cause."""
    if wants_html(request):
        logger.error(f"Database error on {request.url.path}: {exc}", exc_info=True)
        return error_page(request, status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)
    return ErrorHandlerService.handle_database_error(exc, request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Browsers get the error page, API clients get structured JSON."""
    if wants_html(request):
        return error_page(request, exc.status_code, exc.detail)
    return ErrorHandlerService.handle_http_exception(exc, request)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with secure error responses."""
    if wants_html(request):
        logger.error(f"Unhandled {type(exc).__name__} on {request.url.path}: {exc}", exc_info=True)
        return error_page(request, status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR_MESSAGE)
    return ErrorHandlerService.handle_unexpected_error(exc, request)


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check endpoint with database connectivity test.
    Reports storage availability alongside the database check.
    """
    db_healthy = await test_database_connection()
    if not db_healthy:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection failed"
        )

    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": "connected",
        "storage": "configured" if getattr(app.state, "storage", None) else "unavailable"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "portal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
