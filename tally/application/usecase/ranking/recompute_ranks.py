"""Recompute ranks use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from tally.config import RankingSettings
from tally.domain.service import RankingEngine, ReconciliationService
from tally.domain.value import PostId, RankingCursor
from tally.util.clock import Clock


class RecomputeRanksRequest(BaseModel):
    """Recompute ranks request."""

    # Resume position from a previous, paused pass
    after_created_at: Optional[datetime] = None
    after_post_id: Optional[UUID] = None

    max_pages: Optional[int] = Field(default=None, ge=1)

    # Time of the pass; pages of one pass must share it
    now: Optional[datetime] = None

    # Diversity scores of the pass being resumed, keyed by post ID
    diversity: Optional[dict[UUID, int]] = None

    # Overrides RankingSettings.reconcile_before_run when set
    reconcile: Optional[bool] = None


class RecomputeRanksResponse(BaseModel):
    """Recompute ranks response."""

    pages: int
    processed: int
    updated: int
    errors: int
    repaired: int
    duration_ms: int
    completed: bool
    now: datetime
    next_created_at: Optional[datetime] = None
    next_post_id: Optional[UUID] = None
    diversity: dict[UUID, int] = {}


class RecomputeRanksUseCase:
    """Use case for the scheduled ranking job."""

    def __init__(
        self,
        ranking_engine: RankingEngine,
        reconciliation_service: ReconciliationService,
        ranking_settings: RankingSettings,
        clock: Clock,
    ) -> None:
        """Initialize recompute ranks use case.

        Args:
            ranking_engine: Ranking engine
            reconciliation_service: Counter reconciliation
            ranking_settings: Ranking configuration
            clock: Time source when the request does not fix one
        """
        self.ranking_engine = ranking_engine
        self.reconciliation_service = reconciliation_service
        self.ranking_settings = ranking_settings
        self.clock = clock

    async def execute(self, request: RecomputeRanksRequest) -> RecomputeRanksResponse:
        """Execute a ranking pass, optionally reconciling counters first.

        Args:
            request: Resume cursor, page limit and reconciliation switch

        Returns:
            Summary of the pass and the cursor to resume from
        """
        cursor = None
        if request.after_created_at and request.after_post_id:
            cursor = RankingCursor(
                created_at=request.after_created_at, post_id=request.after_post_id
            )

        reconcile = (
            request.reconcile
            if request.reconcile is not None
            else self.ranking_settings.reconcile_before_run
        )

        now = request.now or self.clock.now()

        with logfire.span("recompute_ranks.execute", reconcile=reconcile):
            repaired = 0
            if reconcile and cursor is None:
                # Vote counts feed the ranks, so repair them first
                repaired = await self.reconciliation_service.reconcile_active_posts(now)

            diversity = None
            if cursor is not None and request.diversity is not None:
                diversity = {PostId(k): v for k, v in request.diversity.items()}

            summary = await self.ranking_engine.run(
                cursor=cursor,
                max_pages=request.max_pages,
                now=now,
                diversity=diversity,
            )

            return RecomputeRanksResponse(
                pages=summary.pages,
                processed=summary.processed,
                updated=summary.updated,
                errors=summary.errors,
                repaired=repaired,
                duration_ms=summary.duration_ms,
                completed=summary.completed,
                now=now,
                next_created_at=summary.next_cursor.created_at
                if summary.next_cursor
                else None,
                next_post_id=summary.next_cursor.post_id if summary.next_cursor else None,
                diversity=dict(summary.diversity),
            )
