"""
Property service for listing business rules.
Handles creation, visibility, moderation and favorites on top of the repositories.
"""

from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from portal.config import settings
from portal.repositories.property import (
    PropertyRepository,
    PropertySearchFilters,
    ModerationFilter,
    FEATURED_LIMIT,
)
from portal.repositories.user import UserRepository
from portal.models.property import Property
from portal.models.rating import PropertyRating
from portal.models.user import User, UserRole
from portal.schemas.property import PropertyCreate, PropertyUpdate
from portal.utils.exceptions import (
    NotFoundError,
    ValidationError,
    InsufficientPermissionsError,
)
import uuid
import logging

logger = logging.getLogger(__name__)

# Roles allowed to publish listings
LISTING_ROLES = (
    UserRole.AGENT,
    UserRole.BUILDER,
    UserRole.AGENT_BUILDER,
    UserRole.INVESTOR,
    UserRole.ADMIN,
)


class PropertyService:
    """
    Property service for managing listings with visibility and moderation rules.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.property_repo = PropertyRepository(db_session)
        self.user_repo = UserRepository(db_session)

    async def create_property(self, property_data: PropertyCreate, current_user: User) -> Property:
        """
        Create a listing owned by the current user. New listings await moderation.

        Raises:
            InsufficientPermissionsError: If the user's role cannot publish listings
            ValidationError: If image URLs are outside the allow-list or data is invalid
        """
        if current_user.role not in LISTING_ROLES:
            raise InsufficientPermissionsError("create listings")

        image_urls = list(property_data.images)
        if property_data.cover_image:
            image_urls.append(property_data.cover_image)
        rejected_urls = [url for url in image_urls if not settings.is_allowed_image_url(url)]
        if rejected_urls:
            raise ValidationError(
                "Image host is not allowed",
                field_errors=[{"field": "images", "message": url} for url in rejected_urls],
            )

        create_data = property_data.model_dump(exclude={"images"})
        create_data["owner_id"] = current_user.id

        try:
            property_obj = await self.property_repo.create_property(create_data, property_data.images)
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"Property created by user {current_user.email}: {property_obj.title} (ID: {property_obj.id})")
        return property_obj

    async def get_property(self, property_id: uuid.UUID, viewer: Optional[User] = None) -> Property:
        """
        Get a listing visible to the viewer.
        Unmoderated or rejected listings are visible only to their owner and admins.

        Raises:
            NotFoundError: If the listing does not exist or is hidden from the viewer
        """
        property_obj = await self.property_repo.get_property_with_details(property_id)

        if not property_obj:
            raise NotFoundError("Property", str(property_id))

        if not property_obj.is_public and not (viewer and viewer.can_manage_property(property_obj.owner_id)):
            raise NotFoundError("Property", str(property_id))

        return property_obj

    async def delete_property(self, property_id: uuid.UUID, current_user: User) -> None:
        """
        Raises:
            NotFoundError: If the listing does not exist
            InsufficientPermissionsError: If the user neither owns it nor is admin
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise NotFoundError("Property", str(property_id))

        if not current_user.can_manage_property(property_obj.owner_id):
            raise InsufficientPermissionsError("delete this property")

        await self.property_repo.delete(property_id)
        logger.info(f"Property {property_id} deleted by {current_user.email}")

    async def resubmit_property(self, property_id: uuid.UUID, data: PropertyUpdate, current_user: User) -> Property:
        """
        Save the owner's edits and return the listing to the moderation queue.
        A rejected listing becomes pending again; an approved one loses its rating.

        Raises:
            NotFoundError: If the listing does not exist
            InsufficientPermissionsError: If the user does not own the listing
            ValidationError: If the cover image host is not allowed or data is invalid
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise NotFoundError("Property", str(property_id))

        if property_obj.owner_id != current_user.id:
            raise InsufficientPermissionsError("edit this property")

        if data.cover_image and not settings.is_allowed_image_url(data.cover_image):
            raise ValidationError(
                "Image host is not allowed",
                field_errors=[{"field": "cover_image", "message": data.cover_image}],
            )

        try:
            updated = await self.property_repo.resubmit(property_id, data.model_dump())
        except ValueError as e:
            raise ValidationError(str(e))

        logger.info(f"Property {property_id} resubmitted by {current_user.email}")
        return updated

    async def get_featured(self, moderation: ModerationFilter = ModerationFilter.APPROVED) -> List[Property]:
        return await self.property_repo.get_featured(moderation=moderation, limit=FEATURED_LIMIT)

    async def search(self, filters: PropertySearchFilters, page: int = 1, page_size: int = 20) -> Tuple[List[Property], int]:
        page_size = min(page_size, settings.max_page_size)
        skip = (page - 1) * page_size
        return await self.property_repo.search_public(filters, skip=skip, limit=page_size)

    async def list_own(self, current_user: User) -> List[Property]:
        return await self.property_repo.list_by_owner(current_user.id)

    async def list_pending(self) -> List[Property]:
        return await self.property_repo.list_pending()

    async def approve(self, property_id: uuid.UUID, rating: PropertyRating) -> Property:
        """
        Raises:
            NotFoundError: If the listing does not exist
        """
        property_obj = await self.property_repo.approve(property_id, rating)
        if not property_obj:
            raise NotFoundError("Property", str(property_id))
        return property_obj

    async def reject(self, property_id: uuid.UUID, reason: str) -> Property:
        """
        Raises:
            NotFoundError: If the listing does not exist
        """
        property_obj = await self.property_repo.reject(property_id, reason)
        if not property_obj:
            raise NotFoundError("Property", str(property_id))
        return property_obj

    async def list_favorites(self, current_user: User) -> List[Property]:
        """Favorite listings that are still publicly visible."""
        user = await self.user_repo.get_with_favorites(current_user.id)
        return [p for p in user.favorites if p.is_public]

    async def set_favorite(self, property_id: uuid.UUID, current_user: User, favorite: bool) -> List[Property]:
        """
        Add or remove a favorite and return the visible favorites.

        Raises:
            NotFoundError: If the listing does not exist or is not public
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj or (favorite and not property_obj.is_public):
            raise NotFoundError("Property", str(property_id))

        user = await self.user_repo.set_favorite(current_user.id, property_obj, favorite)
        return [p for p in user.favorites if p.is_public]
