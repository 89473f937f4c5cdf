"""Shared contract for repositories of votable resources."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from uuid import UUID

from tally.domain.model import VoteAggregate
from tally.domain.value import VoteCounter


class VotableRepository(ABC):
    """Repository for an entity carrying a vote aggregate (post or comment).

    Counter mutations go through ``increment_counter`` only, which must be
    a single atomic storage operation so that concurrent voters never lose
    an update.
    """

    @abstractmethod
    async def find_by_id(self, resource_id: UUID) -> Optional[VoteAggregate]:
        """Find a resource by ID.

        Args:
            resource_id: The resource's unique identifier

        Returns:
            The resource if found (including soft-deleted ones), None otherwise

        Raises:
            StorageUnavailableError: If the storage call fails
        """
        pass

    @abstractmethod
    async def find_by_ids(self, resource_ids: Sequence[UUID]) -> list[VoteAggregate]:
        """Find several resources in one call (batch query).

        Args:
            resource_ids: IDs to look up; unknown IDs are skipped

        Returns:
            The resources that exist, in no particular order

        Raises:
            StorageUnavailableError: If the storage call fails
        """
        pass

    @abstractmethod
    async def increment_counter(
        self,
        resource_id: UUID,
        counter: VoteCounter,
        delta: int,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ) -> int:
        """Atomically adjust one aggregate counter.

        The new value is clamped to ``[minimum, maximum]`` when bounds are
        given. Only the named field is written.

        Args:
            resource_id: The resource ID
            counter: Counter to adjust
            delta: Signed amount to add
            minimum: Optional floor
            maximum: Optional ceiling

        Returns:
            The counter's value after the adjustment

        Raises:
            NotFoundError: If the resource does not exist
            StorageUnavailableError: If the storage call fails
        """
        pass

    @abstractmethod
    async def set_counters(
        self, resource_id: UUID, count_up: int, count_down: int
    ) -> None:
        """Overwrite the aggregate with recounted values.

        Used by reconciliation only; sets ``score`` to ``count_up - count_down``.

        Args:
            resource_id: The resource ID
            count_up: Recounted up votes
            count_down: Recounted down votes
        """
        pass
