"""
Pydantic schemas for request/response validation.
"""

from .auth import LoginRequest, RegisterRequest, LoginResponse
from .user import SessionUser, OwnerSummary, UserResponse, ProfileUpdate, AgentResponse, ReviewCreate
from .property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyImageResponse,
    PropertyListResponse,
    ApproveRequest,
    RejectRequest,
)
from .complex import ComplexCreate, ComplexResponse

__all__ = [
    "LoginRequest",
    "RegisterRequest",
    "LoginResponse",
    "SessionUser",
    "OwnerSummary",
    "UserResponse",
    "ProfileUpdate",
    "AgentResponse",
    "ReviewCreate",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyImageResponse",
    "PropertyListResponse",
    "ApproveRequest",
    "RejectRequest",
    "ComplexCreate",
    "ComplexResponse",
]
