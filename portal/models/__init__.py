"""
Database models for the Estate Portal.
Includes User, Property, PropertyImage and Complex models with relationships and validation.
"""

from portal.models.rating import PropertyRating, InvalidRatingError
from portal.models.user import User, UserRole, AgentReview, AGENT_ROLES
from portal.models.property import Property, PropertyCategory, ListingStatus, Currency
from portal.models.image import PropertyImage
from portal.models.complex import Complex, ComplexCategory

__all__ = [
    "PropertyRating",
    "InvalidRatingError",
    "User",
    "UserRole",
    "AgentReview",
    "AGENT_ROLES",
    "Property",
    "PropertyCategory",
    "ListingStatus",
    "Currency",
    "PropertyImage",
    "Complex",
    "ComplexCategory",
]
