"""
Agent directory endpoints.
"""

from fastapi import APIRouter, Depends, Path, Query, status
from typing import List
from uuid import UUID

from portal.models.user import User
from portal.services.agent import AgentService
from portal.schemas.user import AgentResponse, ReviewCreate
from portal.utils.dependencies import get_current_user, get_agent_service


router = APIRouter(prefix="/agents", tags=["Agents"])


@router.get(
    "",
    response_model=List[AgentResponse],
    summary="List agents",
    description="Active agents with their public listings, review count and average rating"
)
async def list_agents(
    limit: int = Query(100, ge=1, le=500),
    agent_service: AgentService = Depends(get_agent_service)
) -> List[AgentResponse]:
    return await agent_service.list_agents(limit=limit)


@router.post(
    "/{agent_id}/reviews",
    status_code=status.HTTP_201_CREATED,
    summary="Review agent",
    description="Leave a 1 to 5 star review for an agent"
)
async def review_agent(
    review_data: ReviewCreate,
    agent_id: UUID = Path(..., description="Agent user ID"),
    current_user: User = Depends(get_current_user),
    agent_service: AgentService = Depends(get_agent_service)
) -> dict:
    """
    Raises:
        NotFoundError: If the user is not an agent
        BadRequestError: If agents review themselves
    """
    review = await agent_service.review_agent(agent_id, current_user, review_data.rating, review_data.comment)
    return {"id": str(review.id), "agent_id": str(review.agent_id), "rating": review.rating}
