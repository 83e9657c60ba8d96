"""
Pydantic schemas for authentication requests and responses.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional
from portal.models.user import UserRole
from portal.schemas.user import SessionUser


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, max_length=128)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()


class RegisterRequest(LoginRequest):
    """Registration request schema."""

    name: str = Field(..., min_length=1, max_length=255)
    role: UserRole = Field(UserRole.BUYER, description="Requested account role")
    phone: Optional[str] = Field(None, max_length=50)
    country_code: Optional[str] = Field(None, max_length=8)
    license_number: Optional[str] = Field(None, max_length=100)
    experience: Optional[int] = Field(None, ge=0, le=80)
    company_name: Optional[str] = Field(None, max_length=255)

    @field_validator('role')
    @classmethod
    def forbid_admin_signup(cls, v):
        if v == UserRole.ADMIN:
            raise ValueError("Admin accounts cannot be self-registered")
        return v

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class LoginResponse(BaseModel):
    """Login response with the session user and access token."""

    user: SessionUser
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration time in seconds")
