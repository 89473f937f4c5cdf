"""Vote entity and ledger results.

A vote is one user's current stance on one post or comment. There is no
neutral stored state: a missing record means the user has not voted.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from tally.domain.model.common import DomainModel, utcnow
from tally.domain.value import ResourceType, UserId, VoteDirection, VoteId, VoteOutcome


class Vote(DomainModel):
    """Vote entity.

    Business rules:
    - One vote per user per resource (enforced by a storage unique constraint)
    - Direction is changed in place when the user flips their vote
    - Deleted when the user repeats the same direction
    """

    id: VoteId
    user_id: UserId
    resource_type: ResourceType
    resource_id: UUID  # PostId or CommentId (both are UUIDs)
    direction: VoteDirection
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class VoteResult(DomainModel):
    """Outcome of applying a vote intent."""

    outcome: VoteOutcome
    direction: Optional[VoteDirection]
    score: int
    count_up: int
    count_down: int

    # False when one of the counter adjustments failed after the vote
    # record was written; the aggregate may have drifted until reconciled.
    counters_synced: bool = True


class VoteState(DomainModel):
    """A user's current vote on a resource together with its aggregate."""

    direction: Optional[VoteDirection] = None
    score: int = 0
    count_up: int = 0
    count_down: int = 0
