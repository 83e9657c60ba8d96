"""
User repository for accounts, favorites and agent listings.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from portal.repositories.base import BaseRepository
from portal.models.user import User, UserRole, AgentReview, AGENT_ROLES
from portal.models.property import Property
from typing import Optional, List, Dict, Any, Tuple
import uuid
import logging

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    Repository for user management with authentication support.
    """

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def create_user(self, user_data: Dict[str, Any]) -> User:
        """
        Create a new user with email validation and password hashing.

        Args:
            user_data: Dictionary containing user information.
                       Must include: email, password. Optional: role (defaults to BUYER)

        Returns:
            Created user instance

        Raises:
            ValueError: If validation fails or the email is taken
        """
        try:
            user_data = dict(user_data)
            email = User.validate_email_format(user_data["email"])

            existing_user = await self.get_by_email(email)
            if existing_user:
                raise ValueError(f"User with email {email} already exists")

            password = user_data.pop("password")
            create_data = {
                **user_data,
                "email": email,
                "hashed_password": User.hash_password(password),
                "role": user_data.get("role") or UserRole.BUYER,
                "is_active": user_data.get("is_active", True)
            }

            created_user = await self.create(create_data)
            logger.info(f"Created user: {created_user.email} (ID: {created_user.id})")
            return created_user
        except ValueError as e:
            logger.error(f"User validation failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Failed to create user: {e}")
            raise

    async def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Returns:
            User instance if found, None otherwise
        """
        try:
            normalized_email = email.lower().strip()
            result = await self.db.execute(select(User).where(User.email == normalized_email))
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise

    async def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Check an email/password pair.

        Returns:
            User instance if the password matches, None otherwise
        """
        user = await self.get_by_email(email)

        if not user:
            logger.debug(f"Authentication failed: user {email} not found")
            return None

        if not user.verify_password(password):
            logger.debug(f"Authentication failed: invalid password for {email}")
            return None

        return user

    async def get_with_favorites(self, user_id: uuid.UUID) -> Optional[User]:
        """Load a user together with favorite listings, their images and owners."""
        query = (
            select(User)
            .options(
                selectinload(User.favorites).selectinload(Property.images),
                selectinload(User.favorites).selectinload(Property.owner),
            )
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def set_favorite(self, user_id: uuid.UUID, property_obj: Property, favorite: bool) -> User:
        """
        Add or remove a listing from a user's favorites.
        Adding an existing favorite or removing a missing one is a no-op.
        """
        try:
            user = await self.get_with_favorites(user_id)
            current_ids = {p.id for p in user.favorites}

            if favorite and property_obj.id not in current_ids:
                user.favorites.append(property_obj)
            elif not favorite and property_obj.id in current_ids:
                user.favorites = [p for p in user.favorites if p.id != property_obj.id]

            await self.db.commit()
            logger.debug(f"User {user_id} favorite {property_obj.id} set to {favorite}")
            return await self.get_with_favorites(user_id)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to update favorites for user {user_id}: {e}")
            raise

    async def list_agents(self, limit: int = 100) -> List[Tuple[User, int, float]]:
        """
        List agents with their review statistics.

        Returns:
            List of (user, review_count, average_rating) tuples, best rated first
        """
        try:
            review_stats = (
                select(
                    AgentReview.agent_id.label("agent_id"),
                    func.count(AgentReview.id).label("review_count"),
                    func.avg(AgentReview.rating).label("average_rating"),
                )
                .group_by(AgentReview.agent_id)
                .subquery()
            )

            query = (
                select(
                    User,
                    func.coalesce(review_stats.c.review_count, 0),
                    func.coalesce(review_stats.c.average_rating, 0),
                )
                .outerjoin(review_stats, review_stats.c.agent_id == User.id)
                .options(selectinload(User.properties))
                .where(User.role.in_(AGENT_ROLES), User.is_active.is_(True))
                .order_by(func.coalesce(review_stats.c.average_rating, 0).desc(), User.name)
                .limit(limit)
                .execution_options(populate_existing=True)
            )

            result = await self.db.execute(query)
            agents = [(user, int(count), round(float(rating), 1)) for user, count, rating in result.all()]
            logger.debug(f"Retrieved {len(agents)} agents")
            return agents
        except Exception as e:
            logger.error(f"Failed to list agents: {e}")
            raise

    async def add_review(self, agent_id: uuid.UUID, author_id: uuid.UUID, rating: int, comment: Optional[str] = None) -> AgentReview:
        """
        Record a review for an agent.

        Raises:
            ValueError: If the rating is outside 1..5
        """
        review = AgentReview(agent_id=agent_id, author_id=author_id, rating=rating, comment=comment)
        review.validate_rating()
        self.db.add(review)
        await self.db.commit()
        await self.db.refresh(review)
        logger.info(f"Review {review.id} added for agent {agent_id}")
        return review
