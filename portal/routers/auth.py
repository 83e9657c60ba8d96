"""
Authentication API endpoints for registration, login and the current session.
Provides JWT-based authentication; the token is returned in the body and set as a cookie.
"""

from fastapi import APIRouter, Depends, Response, status
from portal.models.user import User
from portal.services.auth import AuthService
from portal.schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from portal.schemas.user import ProfileUpdate, SessionUser, UserResponse
from portal.utils.dependencies import get_auth_service, get_current_user
from portal.config import settings


router = APIRouter(prefix="/auth", tags=["Authentication"])


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register account",
    description="Create a new account. Admin accounts cannot be self-registered."
)
async def register(
    register_data: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> UserResponse:
    """
    Raises:
        ConflictError: If the email is already registered
        ValidationError: If the account data is invalid
    """
    user = await auth_service.register(register_data)
    return UserResponse.model_validate(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="User login",
    description="Authenticate user with email and password, returns a JWT access token"
)
async def login(
    login_data: LoginRequest,
    response: Response,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Authenticate user and return a JWT access token.

    Args:
        login_data: Login credentials (email and password)
        response: Outgoing response, receives the session cookie
        auth_service: Authentication service

    Returns:
        Login response with the session user and the access token

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveUserError: If user account is inactive
    """
    user, access_token = await auth_service.login(
        email=login_data.email,
        password=login_data.password
    )
    set_session_cookie(response, access_token)

    return LoginResponse(
        user=SessionUser.model_validate(user),
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60
    )


@router.get(
    "/session",
    response_model=SessionUser,
    status_code=status.HTTP_200_OK,
    summary="Current session",
    description="Session user carried by the access token: identity, contact fields and role"
)
async def get_session(current_user: User = Depends(get_current_user)) -> SessionUser:
    return SessionUser.model_validate(current_user)


@router.put(
    "/session",
    response_model=SessionUser,
    status_code=status.HTTP_200_OK,
    summary="Update profile",
    description="Edit name, email, phone and description of the signed-in user"
)
async def update_session(
    profile_data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> SessionUser:
    """
    Raises:
        ConflictError: If the email is already used by another account
    """
    user = await auth_service.update_profile(current_user, profile_data)
    return SessionUser.model_validate(user)


@router.post(
    "/logout",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="User logout",
    description="Clear the session cookie. Bearer tokens stay valid until they expire."
)
async def logout() -> Response:
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    response.delete_cookie(settings.session_cookie_name)
    return response
