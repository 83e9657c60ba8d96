"""
Authentication utilities for JWT token management.
Access tokens carry the session claims rendered by pages: role and contact fields.
"""

from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from portal.config import settings
from portal.models.user import User


class TokenPayload:
    """JWT token payload structure."""

    def __init__(
        self,
        user_id: str,
        email: str,
        role: str,
        exp: datetime,
        phone: Optional[str] = None,
        country_code: Optional[str] = None,
        description: Optional[str] = None,
    ):
        self.user_id = user_id
        self.email = email
        self.role = role
        self.exp = exp
        self.phone = phone
        self.country_code = country_code
        self.description = description

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from decoded claims."""
        return cls(
            user_id=data["sub"],
            email=data["email"],
            role=data["role"],
            exp=datetime.utcfromtimestamp(data["exp"]),
            phone=data.get("phone"),
            country_code=data.get("country_code"),
            description=data.get("description"),
        )


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token with user claims.

    Args:
        user: Authenticated user
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "phone": user.phone,
        "country_code": user.country_code,
        "description": user.description,
        "exp": expire,
        "iat": datetime.utcnow(),
        "type": "access"
    }

    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> TokenPayload:
    """
    Verify and decode an access token.

    Raises:
        JWTError: If token is invalid, expired or malformed
    """
    payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])

    if payload.get("type") != "access":
        raise JWTError("Invalid token type")

    if not payload.get("sub") or not payload.get("email") or not payload.get("role"):
        raise JWTError("Invalid token payload")

    return TokenPayload.from_dict(payload)
