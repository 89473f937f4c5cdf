"""In-memory vote repository for testing."""

from datetime import datetime
from typing import Optional, Sequence
from uuid import UUID

from tally.domain.error import ConflictError
from tally.domain.model import Vote
from tally.domain.repository.vote import VoteRepository
from tally.domain.value import ResourceType, UserId, VoteDirection, VoteId

from .store import InMemoryStore


class InMemoryVoteRepository(VoteRepository):
    """In-memory implementation of VoteRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    @property
    def _votes(self) -> dict[VoteId, Vote]:
        return self._store.votes

    async def find_by_id(self, vote_id: VoteId) -> Optional[Vote]:
        """Find a vote by ID."""
        return self._votes.get(vote_id)

    async def find_by_user_and_resource(
        self,
        user_id: UserId,
        resource_type: ResourceType,
        resource_id: UUID,
    ) -> Optional[Vote]:
        """Find a vote by user and resource."""
        for vote in self._votes.values():
            if (
                vote.user_id == user_id
                and vote.resource_type == resource_type
                and vote.resource_id == resource_id
            ):
                return vote
        return None

    async def find_by_user_and_resources(
        self,
        user_id: UserId,
        resource_type: ResourceType,
        resource_ids: Sequence[UUID],
    ) -> list[Vote]:
        """Find a user's votes on multiple resources (batch query)."""
        if not resource_ids:
            return []

        wanted = set(resource_ids)
        return [
            v
            for v in self._votes.values()
            if v.user_id == user_id
            and v.resource_type == resource_type
            and v.resource_id in wanted
        ]

    async def save(self, vote: Vote) -> Vote:
        """Save a vote.

        Raises:
            ConflictError: If the user already voted on this resource
        """
        existing = await self.find_by_user_and_resource(
            vote.user_id, vote.resource_type, vote.resource_id
        )
        if existing:
            raise ConflictError("Duplicate vote")

        self._votes[vote.id] = vote
        return vote

    async def update_direction(
        self,
        vote_id: VoteId,
        expected: VoteDirection,
        direction: VoteDirection,
        updated_at: datetime,
    ) -> Optional[Vote]:
        """Compare-and-set the direction of a vote."""
        vote = self._votes.get(vote_id)
        if vote is None or vote.direction != expected:
            return None
        updated = vote.model_copy(update={"direction": direction, "updated_at": updated_at})
        self._votes[vote_id] = updated
        return updated

    async def delete(self, vote_id: VoteId) -> bool:
        """Delete a vote by ID."""
        return self._votes.pop(vote_id, None) is not None

    async def count_by_resource(
        self, resource_type: ResourceType, resource_id: UUID
    ) -> tuple[int, int]:
        """Count up and down votes on a resource."""
        up = down = 0
        for v in self._votes.values():
            if v.resource_type == resource_type and v.resource_id == resource_id:
                if v.direction == VoteDirection.UP:
                    up += 1
                else:
                    down += 1
        return up, down
