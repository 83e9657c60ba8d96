"""
Authentication service for registration, login and session resolution.
"""

from typing import Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from portal.repositories.user import UserRepository
from portal.models.user import User
from portal.schemas.auth import RegisterRequest
from portal.schemas.user import ProfileUpdate
from portal.utils.auth import create_access_token, verify_token
from portal.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    InactiveUserError,
    ConflictError,
    ValidationError,
)
from jose import JWTError
import uuid
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """
    Authentication service for managing user accounts and access tokens.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)

    async def register(self, data: RegisterRequest) -> User:
        """
        Create an account.

        Raises:
            ConflictError: If the email is already registered
            ValidationError: If the account data is invalid
        """
        if await self.user_repo.get_by_email(data.email):
            raise ConflictError(f"User with email {data.email} already exists")

        try:
            user = await self.user_repo.create_user(data.model_dump())
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"Registered user {user.email} with role {user.role.value}")
        return user

    async def update_profile(self, current_user: User, data: ProfileUpdate) -> User:
        """
        Update name, email, phone and description of the current user.

        Raises:
            ConflictError: If the new email belongs to another account
        """
        existing = await self.user_repo.get_by_email(data.email)
        if existing and existing.id != current_user.id:
            raise ConflictError(f"User with email {data.email} already exists")

        user = await self.user_repo.update(current_user.id, data.model_dump())
        logger.info(f"Profile updated for user {user.id}")
        return user

    async def authenticate_user(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Raises:
            InvalidCredentialsError: If credentials are invalid
            InactiveUserError: If user account is inactive
        """
        user = await self.user_repo.authenticate_user(email, password)

        if not user:
            logger.warning(f"Failed authentication attempt for email: {email}")
            raise InvalidCredentialsError()

        if not user.is_active:
            logger.warning(f"Inactive user attempted login: {email}")
            raise InactiveUserError()

        logger.info(f"User authenticated successfully: {user.email}")
        return user

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """Authenticate and issue an access token."""
        user = await self.authenticate_user(email, password)
        return user, create_access_token(user)

    async def get_current_user(self, token: str) -> User:
        """
        Resolve the user behind an access token.

        Raises:
            InvalidTokenError: If the token is invalid, expired, or its user is gone
            InactiveUserError: If the user account is inactive
        """
        try:
            payload = verify_token(token)
            user_id = uuid.UUID(payload.user_id)
        except (JWTError, ValueError) as e:
            logger.debug(f"Rejected access token: {e}")
            raise InvalidTokenError()

        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise InvalidTokenError("User not found")

        if not user.is_active:
            raise InactiveUserError()

        return user
