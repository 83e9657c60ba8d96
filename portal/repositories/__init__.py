"""
Repository layer for data access operations.
"""

from portal.repositories.base import BaseRepository
from portal.repositories.property import (
    PropertyRepository,
    PropertySearchFilters,
    ModerationFilter,
    get_featured_properties,
)
from portal.repositories.user import UserRepository
from portal.repositories.complex import ComplexRepository

__all__ = [
    "BaseRepository",
    "PropertyRepository",
    "PropertySearchFilters",
    "ModerationFilter",
    "get_featured_properties",
    "UserRepository",
    "ComplexRepository",
]
