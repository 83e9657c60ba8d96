"""
Complex service for residential development listings.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from portal.config import settings
from portal.repositories.complex import ComplexRepository
from portal.models.complex import Complex
from portal.models.rating import PropertyRating
from portal.models.user import User, UserRole
from portal.schemas.complex import ComplexCreate
from portal.utils.exceptions import NotFoundError, InsufficientPermissionsError, ValidationError
import uuid
import logging

logger = logging.getLogger(__name__)

COMPLEX_ROLES = (UserRole.BUILDER, UserRole.AGENT_BUILDER, UserRole.ADMIN)


class ComplexService:

    def __init__(self, db_session: AsyncSession):
        self.complex_repo = ComplexRepository(db_session)

    async def list_public(self) -> List[Complex]:
        return await self.complex_repo.list_public()

    async def get_complex(self, complex_id: uuid.UUID, viewer: Optional[User] = None) -> Complex:
        """
        Raises:
            NotFoundError: If the complex does not exist or is hidden from the viewer
        """
        complex_obj = await self.complex_repo.get_complex_with_details(complex_id)
        if not complex_obj:
            raise NotFoundError("Complex", str(complex_id))

        if not complex_obj.is_public and not (viewer and viewer.can_manage_property(complex_obj.owner_id)):
            raise NotFoundError("Complex", str(complex_id))

        return complex_obj

    async def create_complex(self, data: ComplexCreate, current_user: User) -> Complex:
        """
        Raises:
            InsufficientPermissionsError: If the user is not a builder
            ValidationError: If the cover image host is not allowed
        """
        if current_user.role not in COMPLEX_ROLES:
            raise InsufficientPermissionsError("create complexes")

        if data.cover_image and not settings.is_allowed_image_url(data.cover_image):
            raise ValidationError("Image host is not allowed")

        complex_obj = await self.complex_repo.create_complex({**data.model_dump(), "owner_id": current_user.id})
        logger.info(f"Complex created by {current_user.email}: {complex_obj.name}")
        return complex_obj

    async def list_pending(self) -> List[Complex]:
        return await self.complex_repo.list_pending()

    async def list_rejected(self) -> List[Complex]:
        return await self.complex_repo.list_rejected()

    async def approve(self, complex_id: uuid.UUID, rating: PropertyRating) -> Complex:
        """
        Raises:
            NotFoundError: If the complex does not exist
        """
        complex_obj = await self.complex_repo.approve(complex_id, rating)
        if not complex_obj:
            raise NotFoundError("Complex", str(complex_id))
        return complex_obj

    async def reject(self, complex_id: uuid.UUID, reason: str) -> Complex:
        """
        Raises:
            NotFoundError: If the complex does not exist
        """
        complex_obj = await self.complex_repo.reject(complex_id, reason)
        if not complex_obj:
            raise NotFoundError("Complex", str(complex_id))
        return complex_obj
