"""
FastAPI dependency injection utilities for authentication, services and storage.
"""

from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from portal.config import settings
from portal.database import get_db
from portal.models.user import User
from portal.services.auth import AuthService
from portal.services.property import PropertyService
from portal.services.agent import AgentService
from portal.services.complex import ComplexService
from portal.services.storage import StorageClient
from portal.utils.exceptions import (
    UnauthorizedError,
    InvalidTokenError,
    InactiveUserError,
    InsufficientPermissionsError
)


# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    return PropertyService(db)


async def get_agent_service(db: AsyncSession = Depends(get_db)) -> AgentService:
    return AgentService(db)


async def get_complex_service(db: AsyncSession = Depends(get_db)) -> ComplexService:
    return ComplexService(db)


def get_storage(request: Request) -> StorageClient:
    """Storage client built at startup by the application lifespan."""
    return request.app.state.storage


def _request_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Bearer header first, then the session cookie set by the login form."""
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.session_cookie_name)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> User:
    """
    Get current authenticated user from the access token.

    Raises:
        UnauthorizedError: If no token is provided
        InvalidTokenError: If the token is invalid or expired
        InactiveUserError: If user account is inactive
    """
    token = _request_token(request, credentials)
    if not token:
        raise UnauthorizedError("Authentication token required")

    return await auth_service.get_current_user(token)


async def get_current_admin_user(current_user: User = Depends(get_current_user)) -> User:
    """
    Raises:
        InsufficientPermissionsError: If user is not an admin
    """
    if not current_user.is_admin:
        raise InsufficientPermissionsError("access admin resources")

    return current_user


async def get_optional_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[User]:
    """
    Get current user if a valid token is present, otherwise None.
    Invalid or stale tokens are treated as anonymous access.
    """
    token = _request_token(request, credentials)
    if not token:
        return None

    try:
        return await auth_service.get_current_user(token)
    except (InvalidTokenError, InactiveUserError):
        return None
