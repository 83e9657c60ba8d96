"""
Residential complex endpoints.
"""

from fastapi import APIRouter, Depends, Path, status
from typing import List, Optional
from uuid import UUID

from portal.models.user import User
from portal.services.complex import ComplexService
from portal.schemas.complex import ComplexCreate, ComplexResponse
from portal.utils.dependencies import get_current_user, get_optional_current_user, get_complex_service


router = APIRouter(prefix="/complexes", tags=["Complexes"])


@router.get("", response_model=List[ComplexResponse], summary="List approved complexes")
async def list_complexes(
    complex_service: ComplexService = Depends(get_complex_service)
) -> List[ComplexResponse]:
    complexes = await complex_service.list_public()
    return [ComplexResponse.model_validate(c) for c in complexes]


@router.get("/{complex_id}", response_model=ComplexResponse, summary="Get complex")
async def get_complex(
    complex_id: UUID = Path(..., description="Complex ID"),
    current_user: Optional[User] = Depends(get_optional_current_user),
    complex_service: ComplexService = Depends(get_complex_service)
) -> ComplexResponse:
    complex_obj = await complex_service.get_complex(complex_id, viewer=current_user)
    return ComplexResponse.model_validate(complex_obj)


@router.post(
    "",
    response_model=ComplexResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create complex",
    description="Builders create complexes; they wait for moderation before they are public"
)
async def create_complex(
    complex_data: ComplexCreate,
    current_user: User = Depends(get_current_user),
    complex_service: ComplexService = Depends(get_complex_service)
) -> ComplexResponse:
    complex_obj = await complex_service.create_complex(complex_data, current_user)
    return ComplexResponse.model_validate(complex_obj)
