"""
Property repository for listing queries, featured selections and moderation updates.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, desc, asc
from sqlalchemy.orm import selectinload
from portal.repositories.base import BaseRepository
from portal.models.property import Property, PropertyCategory
from portal.models.image import PropertyImage
from portal.models.rating import PropertyRating
from portal.models.user import User
from typing import Optional, List, Dict, Any, Tuple
from decimal import Decimal
import enum
import uuid
import logging

logger = logging.getLogger(__name__)

FEATURED_LIMIT = 6

# Moderation fields of a listing waiting for review
PENDING_STATE = {
    "moderated": False,
    "rejected": False,
    "rejection_reason": None,
    "property_rating": None,
}


class ModerationFilter(str, enum.Enum):
    """Which listings a query may return with respect to moderation."""
    APPROVED = "approved"  # moderated and not rejected
    ALL = "all"


def _apply_moderation(query, moderation: ModerationFilter):
    if moderation == ModerationFilter.APPROVED:
        return query.where(Property.moderated.is_(True), Property.rejected.is_(False))
    return query


def _with_listing_relations(query):
    """Eager-load images and the owner columns shown on listing cards."""
    return query.options(
        selectinload(Property.images),
        selectinload(Property.owner).load_only(User.id, User.name, User.image),
    )


async def get_featured_properties(
    db: AsyncSession,
    moderation: ModerationFilter = ModerationFilter.APPROVED,
    limit: int = FEATURED_LIMIT,
) -> List[Property]:
    """
    Fetch the newest listings for the featured section.

    Args:
        db: Async database session
        moderation: Moderation policy applied to the listings
        limit: Maximum number of listings

    Returns:
        Properties ordered by creation time, newest first, with images and owner loaded
    """
    query = _apply_moderation(select(Property), moderation)
    query = _with_listing_relations(query).order_by(desc(Property.created_at)).limit(limit)

    result = await db.execute(query)
    properties = list(result.scalars().all())
    logger.debug(f"Fetched {len(properties)} featured properties (moderation={moderation.value})")
    return properties


class PropertySearchFilters:
    """Data class for public listing filters."""

    SORT_FIELDS = {
        "newest": (Property.created_at, desc),
        "oldest": (Property.created_at, asc),
        "price-asc": (Property.price, asc),
        "price-desc": (Property.price, desc),
    }

    def __init__(
        self,
        query: Optional[str] = None,
        category: Optional[PropertyCategory] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
        min_bedrooms: Optional[int] = None,
        sort: str = "newest",
    ):
        self.query = query
        self.category = category
        self.min_price = min_price
        self.max_price = max_price
        self.min_bedrooms = min_bedrooms
        self.sort = sort

    def set_price_range(self, value: Optional[str]) -> None:
        """
        Apply a price range option such as ``"100000-200000"`` or ``"1000000"`` (open-ended).
        An empty value clears the range.
        """
        if not value:
            self.min_price = self.max_price = None
            return
        low, _, high = value.partition("-")
        self.min_price = Decimal(low)
        self.max_price = Decimal(high) if high else None

    def set_category(self, value: Optional[str]) -> None:
        self.category = PropertyCategory(value) if value else None

    def set_bedrooms(self, value: Optional[str]) -> None:
        self.min_bedrooms = int(value) if value else None

    def set_sort(self, value: Optional[str]) -> None:
        self.sort = value if value in self.SORT_FIELDS else "newest"

    def set_query(self, value: Optional[str]) -> None:
        self.query = value.strip() if value and value.strip() else None


class PropertyRepository(BaseRepository[Property]):
    """
    Repository for listings.
    Public reads always go through the approved-only moderation policy.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def create_property(self, property_data: Dict[str, Any], image_urls: Optional[List[str]] = None) -> Property:
        """
        Create a new property and its gallery images.

        Args:
            property_data: Dictionary containing property columns
            image_urls: Optional gallery image URLs, in display order

        Returns:
            Created property with relationships loaded

        Raises:
            ValueError: If validation fails
        """
        try:
            property_obj = Property(**property_data)
            property_obj.validate_all()
            property_obj.images = [
                PropertyImage(url=url, display_order=position)
                for position, url in enumerate(image_urls or [])
            ]

            self.db.add(property_obj)
            await self.db.commit()
            logger.info(f"Created property: {property_obj.title} (ID: {property_obj.id})")
            return await self.get_property_with_details(property_obj.id)
        except ValueError as e:
            await self.db.rollback()
            logger.error(f"Property validation failed: {e}")
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create property: {e}")
            raise

    async def get_property_with_details(self, property_id: uuid.UUID) -> Optional[Property]:
        """
        Get property with owner and images.

        Returns:
            Property with loaded relationships or None if not found
        """
        try:
            query = (
                select(Property)
                .options(selectinload(Property.owner), selectinload(Property.images))
                .where(Property.id == property_id)
                .execution_options(populate_existing=True)
            )
            result = await self.db.execute(query)
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get property with details {property_id}: {e}")
            raise

    async def get_featured(
        self,
        moderation: ModerationFilter = ModerationFilter.APPROVED,
        limit: int = FEATURED_LIMIT,
    ) -> List[Property]:
        return await get_featured_properties(self.db, moderation=moderation, limit=limit)

    async def search_public(
        self,
        filters: PropertySearchFilters,
        skip: int = 0,
        limit: int = 20,
    ) -> Tuple[List[Property], int]:
        """
        Search approved listings.

        Returns:
            Tuple of (properties list, total count)
        """
        try:
            conditions = self._build_filter_conditions(filters)

            count_query = _apply_moderation(select(func.count(Property.id)), ModerationFilter.APPROVED)
            query = _with_listing_relations(_apply_moderation(select(Property), ModerationFilter.APPROVED))
            if conditions:
                count_query = count_query.where(*conditions)
                query = query.where(*conditions)

            total_count = (await self.db.execute(count_query)).scalar()

            column, direction = PropertySearchFilters.SORT_FIELDS.get(
                filters.sort, PropertySearchFilters.SORT_FIELDS["newest"]
            )
            query = query.order_by(direction(column)).offset(skip).limit(limit)

            result = await self.db.execute(query)
            properties = list(result.scalars().all())
            logger.debug(f"Search returned {len(properties)} of {total_count} properties")
            return properties, total_count
        except Exception as e:
            logger.error(f"Failed to search properties: {e}")
            raise

    async def list_by_owner(self, owner_id: uuid.UUID) -> List[Property]:
        """All listings of one owner regardless of moderation state, newest first."""
        query = (
            _with_listing_relations(select(Property))
            .where(Property.owner_id == owner_id)
            .order_by(desc(Property.created_at))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def list_pending(self) -> List[Property]:
        """Listings waiting for moderation, oldest first."""
        query = (
            _with_listing_relations(select(Property))
            .where(Property.moderated.is_(False), Property.rejected.is_(False))
            .order_by(asc(Property.created_at))
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def resubmit(self, property_id: uuid.UUID, values: Dict[str, Any]) -> Optional[Property]:
        """
        Apply an owner's edits and put the listing back in the moderation queue.

        Raises:
            ValueError: If the edited listing fails validation
        """
        property_obj = await self.get_by_id(property_id)
        if property_obj is None:
            return None

        for field, value in {**values, **PENDING_STATE}.items():
            setattr(property_obj, field, value)

        try:
            property_obj.validate_all()
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to resubmit property {property_id}: {e}")
            raise

        logger.info(f"Property {property_id} resubmitted for moderation")
        return await self.get_property_with_details(property_id)

    async def approve(self, property_id: uuid.UUID, rating: PropertyRating) -> Optional[Property]:
        """Mark a listing as moderated with the given rating."""
        updated = await self.update(property_id, {
            "moderated": True,
            "rejected": False,
            "rejection_reason": None,
            "property_rating": rating,
        })
        if updated:
            logger.info(f"Approved property {property_id} with rating {rating.value}")
            return await self.get_property_with_details(property_id)
        return None

    async def reject(self, property_id: uuid.UUID, reason: str) -> Optional[Property]:
        """Mark a listing as rejected with a reason."""
        updated = await self.update(property_id, {"rejected": True, "rejection_reason": reason})
        if updated:
            logger.info(f"Rejected property {property_id}: {reason}")
            return await self.get_property_with_details(property_id)
        return None

    def _build_filter_conditions(self, filters: PropertySearchFilters) -> List:
        conditions = []

        if filters.query:
            pattern = f"%{filters.query}%"
            conditions.append(or_(
                Property.title.ilike(pattern),
                Property.description.ilike(pattern),
                Property.location.ilike(pattern),
            ))

        if filters.category:
            conditions.append(Property.category == filters.category)

        if filters.min_price is not None:
            conditions.append(Property.price >= filters.min_price)

        if filters.max_price is not None:
            conditions.append(Property.price <= filters.max_price)

        if filters.min_bedrooms is not None:
            conditions.append(Property.bedrooms >= filters.min_bedrooms)

        return conditions
