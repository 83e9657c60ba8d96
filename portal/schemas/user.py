"""
Pydantic schemas for users and their read projections.

Three shapes of the same account exist side by side: the session user carried by
the access token, the owner summary shown on listing cards, and the agent card.
They overlap but are not interchangeable.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from portal.models.user import UserRole


class SessionUser(BaseModel):
    """Authenticated user as exposed to pages and the session endpoint."""

    id: UUID
    name: Optional[str] = None
    email: str
    image: Optional[str] = None
    role: UserRole
    description: Optional[str] = None
    phone: Optional[str] = None
    country_code: Optional[str] = None

    class Config:
        from_attributes = True


class OwnerSummary(BaseModel):
    """Reduced owner projection attached to listings."""

    id: UUID
    name: Optional[str] = None
    image: Optional[str] = None

    class Config:
        from_attributes = True


class UserResponse(SessionUser):
    """Full profile response."""

    license_number: Optional[str] = None
    experience: Optional[int] = None
    company_name: Optional[str] = None
    is_active: bool
    created_at: datetime


class ProfileUpdate(BaseModel):
    """Editable profile fields of the current user."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=2000)

    @field_validator('name')
    @classmethod
    def strip_name(cls, v):
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()


class ListingRef(BaseModel):
    id: UUID


class AgentResponse(BaseModel):
    """Agent card with review statistics."""

    id: UUID
    name: Optional[str] = None
    image: str
    email: str
    phone: Optional[str] = None
    country_code: Optional[str] = None
    description: Optional[str] = None
    experience: Optional[int] = None
    license_number: Optional[str] = None
    listings: List[ListingRef] = Field(default_factory=list)
    review_count: int = Field(0, ge=0)
    rating: float = Field(0, ge=0, le=5)


class ReviewCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)
