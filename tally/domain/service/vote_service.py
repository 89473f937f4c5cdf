"""Vote ledger domain service.

Applies vote intents as toggle/change/remove transitions and keeps the
aggregate counters of the voted resource in step with the vote records.

Counter adjustments are independent atomic increments (one per field), not a
single transaction: an observer can briefly see ``count_up`` moved while
``score`` has not yet followed. Once a transition has finished, every counter
has been moved and ``score == count_up - count_down`` holds again.
"""

from collections import defaultdict
from typing import Optional, Sequence
from uuid import UUID, uuid4

import logfire

from tally.config import LedgerSettings
from tally.domain.error import (
    ConflictError,
    NotFoundError,
    StorageUnavailableError,
    UnauthenticatedError,
)
from tally.domain.model import Vote, VoteAggregate, VoteResult, VoteState
from tally.domain.repository import (
    CommentRepository,
    PostRepository,
    VotableRepository,
    VoteRepository,
)
from tally.domain.value import (
    ResourceRef,
    ResourceType,
    UserId,
    VoteCounter,
    VoteDirection,
    VoteId,
    VoteOutcome,
)
from tally.util.clock import Clock
from tally.util.retry import retry_read

from .base import Service

CounterAdjustments = list[tuple[VoteCounter, int]]


class VoteService(Service):
    """Domain service for vote operations."""

    def __init__(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
        ledger_settings: LedgerSettings,
        clock: Clock,
    ) -> None:
        """Initialize vote service.

        Args:
            vote_repository: Vote repository
            post_repository: Post repository
            comment_repository: Comment repository
            ledger_settings: Retry configuration for reads
            clock: Time source for vote timestamps
        """
        self.vote_repository = vote_repository
        self.post_repository = post_repository
        self.comment_repository = comment_repository
        self.ledger_settings = ledger_settings
        self.clock = clock

    async def apply_vote(
        self,
        user_id: Optional[UserId],
        resource_id: UUID,
        resource_type: ResourceType,
        direction: VoteDirection,
    ) -> VoteResult:
        """Apply a vote intent.

        - No vote yet: create it (``created``)
        - Same direction as the stored vote: delete it (``removed``)
        - Opposite direction: flip it in place (``changed``)

        Not idempotent: repeating a call toggles the vote off.

        Args:
            user_id: Authenticated caller
            resource_id: Post or comment ID
            resource_type: Type of the resource
            direction: Requested direction

        Returns:
            The transition applied and the resulting aggregate

        Raises:
            UnauthenticatedError: If no caller identity was supplied
            NotFoundError: If the resource does not exist
            ConflictError: If a concurrent request changed this user's vote
            StorageUnavailableError: If writing the vote record failed
        """
        if user_id is None:
            raise UnauthenticatedError("Authentication required to vote")

        with logfire.span(
            "vote_service.apply_vote",
            user_id=str(user_id),
            resource_id=str(resource_id),
            resource_type=resource_type.value,
            direction=direction.value,
        ):
            repository = self._repository_for(resource_type)
            resource = await self._load_resource(repository, resource_type, resource_id)

            existing = await retry_read(
                lambda: self.vote_repository.find_by_user_and_resource(
                    user_id, resource_type, resource_id
                ),
                self.ledger_settings,
            )

            if existing is None:
                await self._create_vote(user_id, resource_id, resource_type, direction)
                outcome = VoteOutcome.CREATED
                final_direction: Optional[VoteDirection] = direction
                adjustments: CounterAdjustments = [
                    (direction.counter, 1),
                    (VoteCounter.SCORE, direction.delta),
                ]
            elif existing.direction == direction:
                await self._remove_vote(existing)
                outcome = VoteOutcome.REMOVED
                final_direction = None
                adjustments = [
                    (direction.counter, -1),
                    (VoteCounter.SCORE, -direction.delta),
                ]
            else:
                await self._flip_vote(existing, direction)
                outcome = VoteOutcome.CHANGED
                final_direction = direction
                adjustments = [
                    (existing.direction.counter, -1),
                    (direction.counter, 1),
                    (VoteCounter.SCORE, 2 * direction.delta),
                ]

            result = await self._adjust_counters(
                repository, resource, adjustments, outcome, final_direction
            )
            logfire.info(
                "Vote applied",
                user_id=str(user_id),
                resource_id=str(resource_id),
                outcome=outcome.value,
                score=result.score,
                counters_synced=result.counters_synced,
            )
            return result

    async def get_vote_state(
        self,
        user_id: Optional[UserId],
        resource_id: UUID,
        resource_type: ResourceType,
    ) -> VoteState:
        """Get a user's vote on a resource and the resource's aggregate.

        Args:
            user_id: Caller (None for anonymous, which always has no vote)
            resource_id: Post or comment ID
            resource_type: Type of the resource

        Returns:
            Current direction (None if not voted) and stored counters

        Raises:
            NotFoundError: If the resource does not exist
        """
        with logfire.span(
            "vote_service.get_vote_state",
            resource_id=str(resource_id),
            resource_type=resource_type.value,
        ):
            repository = self._repository_for(resource_type)
            resource = await self._load_resource(repository, resource_type, resource_id)

            direction = None
            if user_id is not None:
                vote = await retry_read(
                    lambda: self.vote_repository.find_by_user_and_resource(
                        user_id, resource_type, resource_id
                    ),
                    self.ledger_settings,
                )
                direction = vote.direction if vote else None

            return VoteState(
                direction=direction,
                score=resource.score,
                count_up=resource.count_up,
                count_down=resource.count_down,
            )

    async def get_vote_states_batch(
        self,
        user_id: Optional[UserId],
        resources: Sequence[ResourceRef],
    ) -> dict[str, VoteState]:
        """Get vote states for many resources at once (for listing views).

        Always returns an entry for every requested ID. Unknown, deleted or
        malformed IDs get a neutral state. A storage failure while loading
        one resource type is logged and leaves that type's entries neutral
        without affecting the other type.

        Args:
            user_id: Caller (None for anonymous)
            resources: Resources to look up

        Returns:
            Mapping of requested resource ID to state
        """
        with logfire.span(
            "vote_service.get_vote_states_batch",
            user_id=str(user_id) if user_id else None,
            count=len(resources),
        ):
            states = {ref.resource_id: VoteState() for ref in resources}

            # Group parsed IDs by type, remembering the keys they were requested under
            requested: dict[ResourceType, dict[UUID, list[str]]] = defaultdict(
                lambda: defaultdict(list)
            )
            for ref in resources:
                try:
                    parsed = UUID(ref.resource_id)
                except ValueError:
                    logfire.warn(
                        "Malformed resource ID in batch", resource_id=ref.resource_id
                    )
                    continue
                requested[ref.resource_type][parsed].append(ref.resource_id)

            for resource_type, keys_by_id in requested.items():
                try:
                    found = await self._load_states(
                        user_id, resource_type, list(keys_by_id)
                    )
                except StorageUnavailableError as e:
                    logfire.error(
                        "Batch vote state lookup failed, returning neutral states",
                        resource_type=resource_type.value,
                        count=len(keys_by_id),
                        error=str(e),
                    )
                    continue

                for resource_id, state in found.items():
                    for key in keys_by_id[resource_id]:
                        states[key] = state

            return states

    async def _load_states(
        self,
        user_id: Optional[UserId],
        resource_type: ResourceType,
        resource_ids: list[UUID],
    ) -> dict[UUID, VoteState]:
        repository = self._repository_for(resource_type)
        resources = await retry_read(
            lambda: repository.find_by_ids(resource_ids), self.ledger_settings
        )

        directions: dict[UUID, VoteDirection] = {}
        if user_id is not None:
            votes = await retry_read(
                lambda: self.vote_repository.find_by_user_and_resources(
                    user_id, resource_type, resource_ids
                ),
                self.ledger_settings,
            )
            directions = {vote.resource_id: vote.direction for vote in votes}

        return {
            resource.id: VoteState(
                direction=directions.get(resource.id),
                score=resource.score,
                count_up=resource.count_up,
                count_down=resource.count_down,
            )
            for resource in resources
            if not resource.is_deleted
        }

    def _repository_for(self, resource_type: ResourceType) -> VotableRepository:
        if resource_type == ResourceType.POST:
            return self.post_repository
        return self.comment_repository

    async def _load_resource(
        self,
        repository: VotableRepository,
        resource_type: ResourceType,
        resource_id: UUID,
    ) -> VoteAggregate:
        resource = await retry_read(
            lambda: repository.find_by_id(resource_id), self.ledger_settings
        )
        if resource is None or resource.is_deleted:
            logfire.warn(
                "Vote on non-existent resource",
                resource_type=resource_type.value,
                resource_id=str(resource_id),
            )
            raise NotFoundError(resource_type.value.capitalize(), str(resource_id))
        return resource

    async def _create_vote(
        self,
        user_id: UserId,
        resource_id: UUID,
        resource_type: ResourceType,
        direction: VoteDirection,
    ) -> Vote:
        now = self.clock.now()
        vote = Vote(
            id=VoteId(uuid4()),
            user_id=user_id,
            resource_type=resource_type,
            resource_id=resource_id,
            direction=direction,
            created_at=now,
            updated_at=now,
        )
        try:
            return await self.vote_repository.save(vote)
        except ConflictError:
            logfire.warn(
                "Concurrent vote creation lost the race",
                user_id=str(user_id),
                resource_id=str(resource_id),
            )
            raise

    async def _remove_vote(self, vote: Vote) -> None:
        deleted = await self.vote_repository.delete(vote.id)
        if not deleted:
            logfire.warn("Vote disappeared before removal", vote_id=str(vote.id))
            raise ConflictError("Vote was removed by a concurrent request")

    async def _flip_vote(self, vote: Vote, direction: VoteDirection) -> None:
        updated = await self.vote_repository.update_direction(
            vote.id,
            expected=vote.direction,
            direction=direction,
            updated_at=self.clock.now(),
        )
        if updated is None:
            logfire.warn("Vote changed before flip", vote_id=str(vote.id))
            raise ConflictError("Vote was changed by a concurrent request")

    async def _adjust_counters(
        self,
        repository: VotableRepository,
        resource: VoteAggregate,
        adjustments: CounterAdjustments,
        outcome: VoteOutcome,
        direction: Optional[VoteDirection],
    ) -> VoteResult:
        # Start from the snapshot; each successful increment reports the stored value
        values = {
            VoteCounter.COUNT_UP: resource.count_up,
            VoteCounter.COUNT_DOWN: resource.count_down,
            VoteCounter.SCORE: resource.score,
        }
        synced = True

        for counter, delta in adjustments:
            try:
                values[counter] = await repository.increment_counter(
                    resource.id, counter, delta, minimum=counter.minimum
                )
            except (StorageUnavailableError, NotFoundError) as e:
                # The vote record is already written; leave it and let
                # reconciliation repair the aggregate.
                synced = False
                logfire.error(
                    "Counter update failed after vote was recorded",
                    resource_id=str(resource.id),
                    counter=counter.value,
                    delta=delta,
                    error=str(e),
                )

        return VoteResult(
            outcome=outcome,
            direction=direction,
            score=values[VoteCounter.SCORE],
            count_up=values[VoteCounter.COUNT_UP],
            count_down=values[VoteCounter.COUNT_DOWN],
            counters_synced=synced,
        )
