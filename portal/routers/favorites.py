"""
Favorite listings of the current user.
"""

from fastapi import APIRouter, Depends, Path, status
from typing import List
from uuid import UUID

from portal.models.user import User
from portal.services.property import PropertyService
from portal.schemas.property import PropertyResponse
from portal.utils.dependencies import get_current_user, get_property_service


router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get("/properties", response_model=List[PropertyResponse], summary="Favorite properties")
async def list_favorites(
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.list_favorites(current_user)
    return [PropertyResponse.model_validate(p) for p in properties]


@router.post(
    "/properties/{property_id}",
    response_model=List[PropertyResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add favorite"
)
async def add_favorite(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    """
    Raises:
        NotFoundError: If the property does not exist or is not approved
    """
    properties = await property_service.set_favorite(property_id, current_user, favorite=True)
    return [PropertyResponse.model_validate(p) for p in properties]


@router.delete("/properties/{property_id}", response_model=List[PropertyResponse], summary="Remove favorite")
async def remove_favorite(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.set_favorite(property_id, current_user, favorite=False)
    return [PropertyResponse.model_validate(p) for p in properties]
