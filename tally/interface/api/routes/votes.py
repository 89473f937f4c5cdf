"""Vote routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header
from pydantic import BaseModel

from tally.application.usecase.vote import (
    CastVoteRequest,
    CastVoteResponse,
    CastVoteUseCase,
    GetVoteStateRequest,
    GetVoteStateResponse,
    GetVoteStateUseCase,
    GetVoteStatesRequest,
    GetVoteStatesResponse,
    GetVoteStatesUseCase,
    ResourceItem,
)
from tally.domain.service import IdentityService
from tally.domain.value import ResourceType

router = APIRouter(prefix="/vote", tags=["votes"], route_class=DishkaRoute)


class CastVoteAPIRequest(BaseModel):
    """API request for casting a vote."""

    resource_id: str
    resource_type: str
    direction: str


class VoteBatchAPIRequest(BaseModel):
    """API request for the caller's votes on many resources."""

    resources: list[ResourceItem]


@router.post("", response_model=CastVoteResponse)
async def cast_vote(
    request: CastVoteAPIRequest,
    cast_vote_use_case: FromDishka[CastVoteUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> CastVoteResponse:
    """Cast, flip or withdraw a vote.

    Requires a bearer token. Voting the same direction twice withdraws the
    vote; voting the opposite direction flips it.

    Args:
        request: Resource and direction
        cast_vote_use_case: Cast vote use case from DI
        identity_service: Credential validation from DI
        authorization: Bearer credential

    Returns:
        Transition applied and the new score
    """
    user_id = identity_service.authenticate(authorization)

    return await cast_vote_use_case.execute(
        CastVoteRequest(
            resource_id=request.resource_id,
            resource_type=request.resource_type,
            direction=request.direction,
            user_id=str(user_id),
        )
    )


@router.get("/state", response_model=GetVoteStateResponse)
async def get_vote_state(
    resource_id: str,
    get_vote_state_use_case: FromDishka[GetVoteStateUseCase],
    identity_service: FromDishka[IdentityService],
    resource_type: str = ResourceType.POST.value,
    authorization: str | None = Header(default=None),
) -> GetVoteStateResponse:
    """Get the caller's vote and the counters of one resource.

    Anonymous callers get the counters with no direction.
    """
    user_id = identity_service.optional_user(authorization)

    return await get_vote_state_use_case.execute(
        GetVoteStateRequest(
            resource_id=resource_id,
            resource_type=resource_type,
            user_id=str(user_id) if user_id else None,
        )
    )


@router.post("/batch", response_model=GetVoteStatesResponse)
async def get_vote_states(
    request: VoteBatchAPIRequest,
    get_vote_states_use_case: FromDishka[GetVoteStatesUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> GetVoteStatesResponse:
    """Get vote states for a listing view in one call."""
    user_id = identity_service.optional_user(authorization)

    return await get_vote_states_use_case.execute(
        GetVoteStatesRequest(
            resources=request.resources,
            user_id=str(user_id) if user_id else None,
        )
    )
