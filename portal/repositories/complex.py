"""
Complex repository for residential development listings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from sqlalchemy.orm import selectinload
from portal.repositories.base import BaseRepository
from portal.models.complex import Complex
from portal.models.rating import PropertyRating
from typing import Optional, List, Dict, Any
import uuid
import logging

logger = logging.getLogger(__name__)


class ComplexRepository(BaseRepository[Complex]):

    def __init__(self, db: AsyncSession):
        super().__init__(Complex, db)

    async def get_complex_with_details(self, complex_id: uuid.UUID) -> Optional[Complex]:
        query = (
            select(Complex)
            .options(selectinload(Complex.owner), selectinload(Complex.properties))
            .where(Complex.id == complex_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def list_public(self, limit: int = 50) -> List[Complex]:
        """Approved complexes, newest first."""
        query = (
            select(Complex)
            .where(Complex.moderated.is_(True), Complex.rejected.is_(False))
            .order_by(desc(Complex.created_at))
            .limit(limit)
        )
        result = await self.db.execute(query)
        complexes = list(result.scalars().all())
        logger.debug(f"Retrieved {len(complexes)} public complexes")
        return complexes

    async def create_complex(self, complex_data: Dict[str, Any]) -> Complex:
        created = await self.create(complex_data)
        logger.info(f"Created complex: {created.name} (ID: {created.id})")
        return await self.get_complex_with_details(created.id)

    async def list_pending(self) -> List[Complex]:
        """Complexes that are neither approved nor rejected, newest first."""
        query = (
            select(Complex)
            .where(Complex.moderated.is_(False), Complex.rejected.is_(False))
            .order_by(desc(Complex.created_at))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_rejected(self) -> List[Complex]:
        query = select(Complex).where(Complex.rejected.is_(True)).order_by(desc(Complex.created_at))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def approve(self, complex_id: uuid.UUID, rating: PropertyRating) -> Optional[Complex]:
        updated = await self.update(complex_id, {
            "moderated": True,
            "rejected": False,
            "rejection_reason": None,
            "property_rating": rating,
        })
        if updated is None:
            return None
        logger.info(f"Approved complex {complex_id} with rating {rating.value}")
        return await self.get_complex_with_details(complex_id)

    async def reject(self, complex_id: uuid.UUID, reason: str) -> Optional[Complex]:
        updated = await self.update(complex_id, {"rejected": True, "rejection_reason": reason})
        if updated is None:
            return None
        logger.info(f"Rejected complex {complex_id}")
        return await self.get_complex_with_details(complex_id)
