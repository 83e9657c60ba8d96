"""
Agent directory service: builds agent cards with review statistics.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from portal.repositories.user import UserRepository
from portal.models.user import User, AgentReview
from portal.schemas.user import AgentResponse, ListingRef
from portal.utils.exceptions import NotFoundError, BadRequestError, ValidationError
import uuid
import logging

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = "/images/default-avatar.png"


def normalize_avatar(image: Optional[str]) -> str:
    """Absolute URLs and rooted paths pass through; bare paths get rooted; missing images use the default avatar."""
    if not image:
        return DEFAULT_AVATAR
    if image.startswith("/") or image.startswith("http"):
        return image
    return f"/{image}"


class AgentService:

    def __init__(self, db_session: AsyncSession):
        self.user_repo = UserRepository(db_session)

    async def list_agents(self, limit: int = 100) -> List[AgentResponse]:
        agents = await self.user_repo.list_agents(limit=limit)
        return [self._to_card(user, review_count, rating) for user, review_count, rating in agents]

    async def review_agent(self, agent_id: uuid.UUID, author: User, rating: int, comment: Optional[str] = None) -> AgentReview:
        """
        Raises:
            NotFoundError: If the agent does not exist
            BadRequestError: If an agent reviews themselves
        """
        agent = await self.user_repo.get_by_id(agent_id)
        if not agent or not agent.is_agent:
            raise NotFoundError("Agent", str(agent_id))
        if agent.id == author.id:
            raise BadRequestError("Agents cannot review themselves")

        try:
            return await self.user_repo.add_review(agent_id, author.id, rating, comment)
        except ValueError as e:
            raise ValidationError(str(e))

    @staticmethod
    def _to_card(user: User, review_count: int, rating: float) -> AgentResponse:
        return AgentResponse(
            id=user.id,
            name=user.name,
            image=normalize_avatar(user.image),
            email=user.email,
            phone=user.phone,
            country_code=user.country_code,
            description=user.description,
            experience=user.experience,
            license_number=user.license_number,
            listings=[ListingRef(id=p.id) for p in user.properties if p.is_public],
            review_count=review_count,
            rating=rating,
        )
