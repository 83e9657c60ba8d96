"""
Property listing API endpoints: featured listings, public search, owner listings and CRUD.
"""

from fastapi import APIRouter, Depends, status, Query, Path
from fastapi.responses import Response
from typing import Optional, List, Literal
from decimal import Decimal
from uuid import UUID
import math

from portal.config import settings
from portal.models.user import User
from portal.models.property import PropertyCategory
from portal.repositories.property import PropertySearchFilters
from portal.services.property import PropertyService
from portal.schemas.property import PropertyCreate, PropertyUpdate, PropertyResponse, PropertyListResponse
from portal.utils.dependencies import (
    get_current_user,
    get_optional_current_user,
    get_property_service
)


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "/featured",
    response_model=List[PropertyResponse],
    summary="Featured properties",
    description="The six newest approved listings with images and owner"
)
async def featured_properties(
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.get_featured()
    return [PropertyResponse.model_validate(p) for p in properties]


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="Search approved properties",
    description="Paginated approved listings with optional text, type, price and bedroom filters"
)
async def list_properties(
    q: Optional[str] = Query(None, description="Search in title, description and location"),
    category: Optional[PropertyCategory] = Query(None, description="Property type"),
    min_price: Optional[Decimal] = Query(None, ge=0),
    max_price: Optional[Decimal] = Query(None, ge=0),
    bedrooms: Optional[int] = Query(None, ge=0, le=50, description="Minimum number of bedrooms"),
    sort: Literal["newest", "oldest", "price-asc", "price-desc"] = Query("newest"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    filters = PropertySearchFilters(
        category=category,
        min_price=min_price,
        max_price=max_price,
        min_bedrooms=bedrooms,
        sort=sort,
    )
    filters.set_query(q)

    properties, total = await property_service.search(filters, page=page, page_size=page_size)

    return PropertyListResponse(
        properties=[PropertyResponse.model_validate(p) for p in properties],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0
    )


@router.get(
    "/mine",
    response_model=List[PropertyResponse],
    summary="Own properties",
    description="Every listing of the current user regardless of moderation state"
)
async def my_properties(
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.list_own(current_user)
    return [PropertyResponse.model_validate(p) for p in properties]


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get property",
    description="Approved listings are public; pending or rejected ones are visible to their owner and admins"
)
async def get_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: Optional[User] = Depends(get_optional_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Raises:
        NotFoundError: If the property does not exist or is hidden from the caller
    """
    property_obj = await property_service.get_property(property_id, viewer=current_user)
    return PropertyResponse.model_validate(property_obj)


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    description="Create a listing. New listings wait for moderation before they are public."
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Create a new property listing.

    Args:
        property_data: Property creation data
        current_user: Current authenticated user
        property_service: Property service instance

    Returns:
        Created property with details

    Raises:
        InsufficientPermissionsError: If the user's role cannot list properties
        ValidationError: If property data or an image host is invalid
    """
    property_obj = await property_service.create_property(property_data, current_user)
    return PropertyResponse.model_validate(property_obj)


@router.patch(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Edit and resubmit property",
    description="Owner edit of a listing. The listing goes back to moderation: rejection and rating are cleared."
)
async def resubmit_property(
    property_data: PropertyUpdate,
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Raises:
        NotFoundError: If the property does not exist
        InsufficientPermissionsError: If the caller is not the owner
    """
    property_obj = await property_service.resubmit_property(property_id, property_data, current_user)
    return PropertyResponse.model_validate(property_obj)


@router.delete(
    "/{property_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete property",
    description="Delete a listing. Only the owner or an admin may delete it."
)
async def delete_property(
    property_id: UUID = Path(..., description="Property ID"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> Response:
    """
    Raises:
        NotFoundError: If the property does not exist
        InsufficientPermissionsError: If the user cannot manage the property
    """
    await property_service.delete_property(property_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
