"""Domain value objects for Tally."""

from tally.domain.value.identifiers import CommentId, PostId, UserId, VoteId
from tally.domain.value.types import (
    RankingCursor,
    ResourceRef,
    ResourceType,
    VoteCounter,
    VoteDirection,
    VoteOutcome,
)

__all__ = [
    # Identifiers
    "UserId",
    "PostId",
    "CommentId",
    "VoteId",
    # Types
    "RankingCursor",
    "ResourceRef",
    "ResourceType",
    "VoteCounter",
    "VoteDirection",
    "VoteOutcome",
]
