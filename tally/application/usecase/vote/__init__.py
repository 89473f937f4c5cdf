"""Vote use cases."""

from .cast_vote import CastVoteRequest, CastVoteResponse, CastVoteUseCase
from .get_vote_state import (
    GetVoteStateRequest,
    GetVoteStateResponse,
    GetVoteStateUseCase,
)
from .get_vote_states import (
    GetVoteStatesRequest,
    GetVoteStatesResponse,
    GetVoteStatesUseCase,
    ResourceItem,
    VoteStateItem,
)

__all__ = [
    "CastVoteRequest",
    "CastVoteResponse",
    "CastVoteUseCase",
    "GetVoteStateRequest",
    "GetVoteStateResponse",
    "GetVoteStateUseCase",
    "GetVoteStatesRequest",
    "GetVoteStatesResponse",
    "GetVoteStatesUseCase",
    "ResourceItem",
    "VoteStateItem",
]
