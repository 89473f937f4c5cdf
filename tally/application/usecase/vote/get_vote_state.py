"""Get vote state use case."""

from typing import Optional

from pydantic import BaseModel

from tally.application.usecase.parsing import parse_enum, parse_user_id, parse_uuid
from tally.domain.service import VoteService
from tally.domain.value import ResourceType, VoteDirection


class GetVoteStateRequest(BaseModel):
    """Get vote state request."""

    resource_id: str
    resource_type: str = ResourceType.POST.value
    user_id: Optional[str] = None  # Current user ID (if authenticated)


class GetVoteStateResponse(BaseModel):
    """Get vote state response."""

    direction: Optional[VoteDirection]
    score: int
    count_up: int
    count_down: int


class GetVoteStateUseCase:
    """Use case for reading the caller's vote on one resource."""

    def __init__(self, vote_service: VoteService) -> None:
        self.vote_service = vote_service

    async def execute(self, request: GetVoteStateRequest) -> GetVoteStateResponse:
        """Execute get vote state flow.

        Raises:
            InvalidArgumentError: If an ID or enum value is malformed
            NotFoundError: If the resource does not exist
        """
        user_id = parse_user_id(request.user_id)
        resource_type = parse_enum(ResourceType, request.resource_type, "resource_type")
        resource_id = parse_uuid(request.resource_id, "resource_id")

        state = await self.vote_service.get_vote_state(
            user_id, resource_id, resource_type
        )
        return GetVoteStateResponse(
            direction=state.direction,
            score=state.score,
            count_up=state.count_up,
            count_down=state.count_down,
        )
