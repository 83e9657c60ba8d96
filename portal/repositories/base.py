"""
Generic async repository shared by the portal repositories.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from portal.database import Base
from typing import TypeVar, Generic, Optional, Dict, Any, Type
import uuid
import logging

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Create, fetch, update and delete rows of a single model.
    Every write commits on success and rolls the session back on failure.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    @property
    def model_name(self) -> str:
        return self.model.__name__

    async def create(self, values: Dict[str, Any]) -> ModelType:
        """
        Insert a row built from ``values`` and return it refreshed.
        """
        instance = self.model(**values)
        self.db.add(instance)
        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Insert into {self.model_name} failed: {e}")
            raise
        await self.db.refresh(instance)
        logger.debug(f"{self.model_name} {instance.id} inserted")
        return instance

    async def get_by_id(self, id: uuid.UUID) -> Optional[ModelType]:
        """Return the row with the given primary key, or None."""
        result = await self.db.execute(select(self.model).where(self.model.id == id))
        instance = result.scalar_one_or_none()
        if instance is None:
            logger.debug(f"{self.model_name} {id} not found")
        return instance

    async def update(self, id: uuid.UUID, values: Dict[str, Any]) -> Optional[ModelType]:
        """
        Apply ``values`` to an existing row.

        Returns:
            The refreshed row, or None when no row has this id
        """
        instance = await self.get_by_id(id)
        if instance is None:
            return None

        for field, value in values.items():
            setattr(instance, field, value)

        try:
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Update of {self.model_name} {id} failed: {e}")
            raise
        await self.db.refresh(instance)
        logger.debug(f"{self.model_name} {id} updated: {sorted(values)}")
        return instance

    async def delete(self, id: uuid.UUID) -> bool:
        """Delete a row; False when it did not exist."""
        instance = await self.get_by_id(id)
        if instance is None:
            return False

        try:
            await self.db.delete(instance)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Delete of {self.model_name} {id} failed: {e}")
            raise
        logger.debug(f"{self.model_name} {id} deleted")
        return True
