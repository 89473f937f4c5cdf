"""Counter reconciliation domain service."""

from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

import logfire

from tally.config import RankingSettings
from tally.domain.error import NotFoundError
from tally.domain.repository import (
    CommentRepository,
    PostRepository,
    VotableRepository,
    VoteRepository,
)
from tally.domain.value import RankingCursor, ResourceType

from .base import Service


class ReconciliationService(Service):
    """Recounts vote aggregates from the vote records.

    Counter updates that failed after a vote was recorded leave the
    aggregate off by one or two; this sweep puts it back in line.
    """

    def __init__(
        self,
        vote_repository: VoteRepository,
        post_repository: PostRepository,
        comment_repository: CommentRepository,
        ranking_settings: RankingSettings,
    ) -> None:
        self.vote_repository = vote_repository
        self.post_repository = post_repository
        self.comment_repository = comment_repository
        self.settings = ranking_settings

    def _repository_for(self, resource_type: ResourceType) -> VotableRepository:
        if resource_type == ResourceType.POST:
            return self.post_repository
        return self.comment_repository

    async def reconcile(self, resource_type: ResourceType, resource_id: UUID) -> bool:
        """Recount one resource and repair its aggregate if it drifted.

        Args:
            resource_type: Type of the resource
            resource_id: Post or comment ID

        Returns:
            True if the stored counters were rewritten

        Raises:
            NotFoundError: If the resource does not exist
        """
        with logfire.span(
            "reconciliation_service.reconcile",
            resource_type=resource_type.value,
            resource_id=str(resource_id),
        ):
            repository = self._repository_for(resource_type)
            resource = await repository.find_by_id(resource_id)
            if resource is None:
                raise NotFoundError(resource_type.value.capitalize(), str(resource_id))

            count_up, count_down = await self.vote_repository.count_by_resource(
                resource_type, resource_id
            )
            if (
                resource.count_up == count_up
                and resource.count_down == count_down
                and resource.score == count_up - count_down
            ):
                return False

            await repository.set_counters(resource_id, count_up, count_down)
            logfire.warn(
                "Vote counters repaired",
                resource_type=resource_type.value,
                resource_id=str(resource_id),
                stored_up=resource.count_up,
                stored_down=resource.count_down,
                stored_score=resource.score,
                count_up=count_up,
                count_down=count_down,
            )
            return True

    async def reconcile_active_posts(
        self, now: datetime, after: Optional[RankingCursor] = None
    ) -> int:
        """Reconcile every post the ranking engine would process.

        Args:
            now: Time of the sweep
            after: Resume after this position

        Returns:
            Number of posts repaired
        """
        with logfire.span("reconciliation_service.reconcile_active_posts"):
            created_after = now - timedelta(hours=self.settings.active_window_hours)
            checked = repaired = 0

            while True:
                posts = await self.post_repository.find_active(
                    created_after=created_after,
                    time_score_floor=self.settings.time_score_floor,
                    after=after,
                    limit=self.settings.page_size,
                )
                for post in posts:
                    if await self.reconcile(ResourceType.POST, post.id):
                        repaired += 1
                checked += len(posts)

                if len(posts) < self.settings.page_size:
                    break
                last = posts[-1]
                after = RankingCursor(created_at=last.created_at, post_id=last.id)

            logfire.info("Reconciliation sweep finished", checked=checked, repaired=repaired)
            return repaired
