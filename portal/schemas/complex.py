"""
Pydantic schemas for residential complexes.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from uuid import UUID
from portal.models.complex import ComplexCategory
from portal.models.rating import PropertyRating
from portal.schemas.user import OwnerSummary


class ComplexBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field("", max_length=500)
    category: ComplexCategory
    description: str = Field("", max_length=5000)
    building_area: int = Field(0, ge=0)
    living_area: int = Field(0, ge=0)
    total_objects: int = Field(0, ge=0)
    floors: int = Field(1, ge=1)
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    parking: bool = False
    installment: bool = False
    swimming_pool: bool = False
    elevator: bool = False
    cover_image: Optional[str] = Field(None, max_length=500)


class ComplexCreate(ComplexBase):
    pass


class ComplexResponse(ComplexBase):
    id: UUID
    moderated: bool
    rejected: bool
    rejection_reason: Optional[str] = None
    property_rating: Optional[PropertyRating] = None
    owner: OwnerSummary
    created_at: datetime

    class Config:
        from_attributes = True
