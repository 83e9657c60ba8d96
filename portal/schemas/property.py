"""
Pydantic schemas for property requests and responses.
Handles listing creation, moderation payloads and public listing output.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from portal.models.property import PropertyCategory, ListingStatus, Currency
from portal.models.rating import PropertyRating
from portal.schemas.user import OwnerSummary


class PropertyBase(BaseModel):
    """Base property schema with common fields."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1, max_length=5000)
    price: Decimal = Field(..., ge=0)
    currency: Currency = Currency.EUR
    location: str = Field(..., min_length=1, max_length=255)
    status: ListingStatus = ListingStatus.FOR_SALE
    category: PropertyCategory

    bedrooms: int = Field(0, ge=0, le=50)
    bathrooms: int = Field(0, ge=0, le=50)
    total_area: int = Field(..., ge=0)
    living_area: Optional[int] = Field(None, ge=0)
    floor: Optional[int] = None
    building_floors: Optional[int] = Field(None, ge=0)

    parking: bool = False
    elevator: bool = False
    swimming_pool: bool = False
    gym: bool = False
    installment: bool = False

    @field_validator('title', 'description', 'location')
    @classmethod
    def strip_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @model_validator(mode='after')
    def validate_areas(self):
        if self.living_area is not None and self.living_area > self.total_area:
            raise ValueError("Living area cannot exceed total area")
        return self


class PropertyCreate(PropertyBase):
    """Schema for creating a new listing. Listings start unmoderated."""

    cover_image: Optional[str] = Field(None, max_length=500)
    images: List[str] = Field(default_factory=list, max_length=30)
    complex_id: Optional[UUID] = None


class PropertyUpdate(PropertyBase):
    """Owner edit of a listing; saving it sends the listing back to moderation."""

    cover_image: Optional[str] = Field(None, max_length=500)


class PropertyImageResponse(BaseModel):
    id: UUID
    url: str
    display_order: int

    class Config:
        from_attributes = True


class PropertyResponse(PropertyBase):
    """Listing as returned to clients."""

    id: UUID
    price: float
    cover_image: Optional[str] = None
    moderated: bool
    rejected: bool
    rejection_reason: Optional[str] = None
    property_rating: Optional[PropertyRating] = None
    owner_id: UUID
    owner: OwnerSummary
    images: List[PropertyImageResponse] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PropertyListResponse(BaseModel):
    properties: List[PropertyResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class ApproveRequest(BaseModel):
    """Moderation approval payload; the rating is validated against the rating enumeration."""

    rating: PropertyRating

    @field_validator('rating', mode='before')
    @classmethod
    def parse_rating(cls, v):
        return PropertyRating.parse(v)


class RejectRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=2000)
