"""Batch vote state use case."""

from typing import Optional

import logfire
from pydantic import BaseModel

from tally.application.usecase.parsing import parse_enum, parse_user_id
from tally.domain.error import InvalidArgumentError
from tally.domain.service import VoteService
from tally.domain.value import ResourceRef, ResourceType, VoteDirection

# Largest number of resources a single listing view asks about
MAX_BATCH_SIZE = 100


class ResourceItem(BaseModel):
    """One resource in a batch request."""

    resource_id: str
    resource_type: str = ResourceType.POST.value


class GetVoteStatesRequest(BaseModel):
    """Batch vote state request."""

    resources: list[ResourceItem]
    user_id: Optional[str] = None  # Current user ID (if authenticated)


class VoteStateItem(BaseModel):
    """Vote state of one resource."""

    direction: Optional[VoteDirection]
    count_up: int
    count_down: int
    score: int


class GetVoteStatesResponse(BaseModel):
    """Batch vote state response, keyed by the requested resource ID."""

    votes: dict[str, VoteStateItem]


class GetVoteStatesUseCase:
    """Use case for reading vote states of many resources (listing views)."""

    def __init__(self, vote_service: VoteService) -> None:
        """Initialize batch vote state use case.

        Args:
            vote_service: Vote domain service
        """
        self.vote_service = vote_service

    async def execute(self, request: GetVoteStatesRequest) -> GetVoteStatesResponse:
        """Execute batch vote state flow.

        Malformed or unknown resource IDs come back neutral; an unknown
        resource type rejects the whole request.

        Args:
            request: Resources to look up

        Returns:
            An entry for every requested resource ID

        Raises:
            InvalidArgumentError: If a resource type is invalid or the batch is too large
        """
        if len(request.resources) > MAX_BATCH_SIZE:
            raise InvalidArgumentError(
                f"At most {MAX_BATCH_SIZE} resources can be requested at once"
            )

        user_id = parse_user_id(request.user_id)
        refs = [
            ResourceRef(
                resource_id=item.resource_id,
                resource_type=parse_enum(
                    ResourceType, item.resource_type, "resource_type"
                ),
            )
            for item in request.resources
        ]

        states = await self.vote_service.get_vote_states_batch(user_id, refs)
        logfire.info("Batch vote states read", count=len(states))

        return GetVoteStatesResponse(
            votes={
                resource_id: VoteStateItem(
                    direction=state.direction,
                    count_up=state.count_up,
                    count_down=state.count_down,
                    score=state.score,
                )
                for resource_id, state in states.items()
            }
        )
