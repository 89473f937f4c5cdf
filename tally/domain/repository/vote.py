"""Vote repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from tally.domain.model import Vote
from tally.domain.value import ResourceType, UserId, VoteDirection, VoteId


class VoteRepository(ABC):
    """Repository for Vote entity.

    Defines the contract for vote persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, vote_id: VoteId) -> Optional[Vote]:
        """Find a vote by ID.

        Args:
            vote_id: The vote's unique identifier

        Returns:
            The vote if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_user_and_resource(
        self,
        user_id: UserId,
        resource_type: ResourceType,
        resource_id: UUID,
    ) -> Optional[Vote]:
        """Find a user's vote on a specific resource.

        Args:
            user_id: The user's ID
            resource_type: Type of resource (post or comment)
            resource_id: ID of the resource

        Returns:
            The vote if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_user_and_resources(
        self,
        user_id: UserId,
        resource_type: ResourceType,
        resource_ids: Sequence[UUID],
    ) -> List[Vote]:
        """Find a user's votes on multiple resources (batch query).

        Args:
            user_id: The user's ID
            resource_type: Type of resources (post or comment)
            resource_ids: List of resource IDs to check

        Returns:
            List of votes by the user on the specified resources
        """
        pass

    @abstractmethod
    async def save(self, vote: Vote) -> Vote:
        """Create a vote.

        Args:
            vote: The vote to save

        Returns:
            The saved vote

        Raises:
            ConflictError: If the user already has a vote on this resource
        """
        pass

    @abstractmethod
    async def update_direction(
        self,
        vote_id: VoteId,
        expected: VoteDirection,
        direction: VoteDirection,
        updated_at: datetime,
    ) -> Optional[Vote]:
        """Change a vote's direction if it still has the expected one.

        Args:
            vote_id: The vote ID
            expected: Direction the caller read
            direction: New direction
            updated_at: Modification timestamp

        Returns:
            The updated vote, or None if the vote is gone or was changed
        """
        pass

    @abstractmethod
    async def delete(self, vote_id: VoteId) -> bool:
        """Delete a vote.

        Args:
            vote_id: The vote ID to delete

        Returns:
            True if a vote was deleted, False if it no longer existed
        """
        pass

    @abstractmethod
    async def count_by_resource(
        self, resource_type: ResourceType, resource_id: UUID
    ) -> tuple[int, int]:
        """Count up and down votes on a resource.

        Args:
            resource_type: Type of resource (post or comment)
            resource_id: ID of the resource

        Returns:
            Tuple of (up votes, down votes)
        """
        pass
