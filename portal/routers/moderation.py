"""
Moderation endpoints for administrators: pending queues, approval with a rating, rejection.
Listings and complexes follow the same lifecycle.
"""

from fastapi import APIRouter, Depends, Path
from typing import List
from uuid import UUID

from portal.models.user import User
from portal.repositories.property import ModerationFilter
from portal.services.property import PropertyService
from portal.services.complex import ComplexService
from portal.schemas.complex import ComplexResponse
from portal.schemas.property import PropertyResponse, ApproveRequest, RejectRequest
from portal.utils.dependencies import get_current_admin_user, get_property_service, get_complex_service
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/moderation", tags=["Moderation"])


@router.get(
    "/properties",
    response_model=List[PropertyResponse],
    summary="Pending properties",
    description="Listings that are neither approved nor rejected, oldest first"
)
async def pending_properties(
    admin: User = Depends(get_current_admin_user),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.list_pending()
    return [PropertyResponse.model_validate(p) for p in properties]


@router.patch(
    "/properties/{property_id}/approve",
    response_model=PropertyResponse,
    summary="Approve property",
    description="Mark a listing as moderated and assign its rating (A, B+, B, C or D)"
)
async def approve_property(
    approve_data: ApproveRequest,
    property_id: UUID = Path(..., description="Property ID"),
    admin: User = Depends(get_current_admin_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.approve(property_id, approve_data.rating)
    logger.info(f"Property {property_id} approved by {admin.email} with rating {approve_data.rating.value}")
    return PropertyResponse.model_validate(property_obj)


@router.post(
    "/properties/{property_id}/reject",
    response_model=PropertyResponse,
    summary="Reject property",
    description="Reject a listing with a reason shown to its owner"
)
async def reject_property(
    reject_data: RejectRequest,
    property_id: UUID = Path(..., description="Property ID"),
    admin: User = Depends(get_current_admin_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.reject(property_id, reject_data.reason)
    logger.info(f"Property {property_id} rejected by {admin.email}")
    return PropertyResponse.model_validate(property_obj)


@router.get(
    "/featured-preview",
    response_model=List[PropertyResponse],
    summary="Featured preview",
    description="The newest listings regardless of moderation state, as the featured section would show them unfiltered"
)
async def featured_preview(
    admin: User = Depends(get_current_admin_user),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.get_featured(moderation=ModerationFilter.ALL)
    return [PropertyResponse.model_validate(p) for p in properties]


@router.get(
    "/complexes",
    response_model=List[ComplexResponse],
    summary="Pending complexes",
    description="Complexes that are neither approved nor rejected, newest first"
)
async def pending_complexes(
    admin: User = Depends(get_current_admin_user),
    complex_service: ComplexService = Depends(get_complex_service)
) -> List[ComplexResponse]:
    complexes = await complex_service.list_pending()
    return [ComplexResponse.model_validate(c) for c in complexes]


@router.get("/complexes/rejected", response_model=List[ComplexResponse], summary="Rejected complexes")
async def rejected_complexes(
    admin: User = Depends(get_current_admin_user),
    complex_service: ComplexService = Depends(get_complex_service)
) -> List[ComplexResponse]:
    complexes = await complex_service.list_rejected()
    return [ComplexResponse.model_validate(c) for c in complexes]


@router.patch(
    "/complexes/{complex_id}/approve",
    response_model=ComplexResponse,
    summary="Approve complex",
    description="Make a complex public and assign its rating (A, B+, B, C or D)"
)
async def approve_complex(
    approve_data: ApproveRequest,
    complex_id: UUID = Path(..., description="Complex ID"),
    admin: User = Depends(get_current_admin_user),
    complex_service: ComplexService = Depends(get_complex_service)
) -> ComplexResponse:
    complex_obj = await complex_service.approve(complex_id, approve_data.rating)
    logger.info(f"Complex {complex_id} approved by {admin.email} with rating {approve_data.rating.value}")
    return ComplexResponse.model_validate(complex_obj)


@router.post("/complexes/{complex_id}/reject", response_model=ComplexResponse, summary="Reject complex")
async def reject_complex(
    reject_data: RejectRequest,
    complex_id: UUID = Path(..., description="Complex ID"),
    admin: User = Depends(get_current_admin_user),
    complex_service: ComplexService = Depends(get_complex_service)
) -> ComplexResponse:
    complex_obj = await complex_service.reject(complex_id, reject_data.reason)
    logger.info(f"Complex {complex_id} rejected by {admin.email}")
    return ComplexResponse.model_validate(complex_obj)
