"""Ranking engine domain service."""

import time
from datetime import datetime, timedelta
from typing import Optional, Sequence

import logfire

from tally.config import RankingSettings
from tally.domain.error import StorageUnavailableError
from tally.domain.model import RankingPage, RankingSummary, RankUpdate
from tally.domain.repository import PostRepository
from tally.domain.value import PostId, RankingCursor
from tally.util.clock import Clock

from .base import Service
from .ranking import PostScorer, diversity_scores


class RankingEngine(Service):
    """Periodically recomputes the decayed rank of every active post.

    The pass walks active posts in keyset pages and writes each page with
    one bulk call. A failed write for one post is logged and skipped; since
    ranks are recomputed from scratch each time, the next pass repairs it.
    """

    def __init__(
        self,
        post_repository: PostRepository,
        ranking_settings: RankingSettings,
        clock: Clock,
    ) -> None:
        """Initialize ranking engine.

        Args:
            post_repository: Post repository
            ranking_settings: Decay, weights and paging configuration
            clock: Time source for the pass
        """
        self.post_repository = post_repository
        self.settings = ranking_settings
        self.clock = clock
        self.scorer = PostScorer(ranking_settings)

    def window_start(self, now: datetime) -> datetime:
        """Earliest creation time that is always considered active."""
        return now - timedelta(hours=self.settings.active_window_hours)

    async def run(
        self,
        cursor: Optional[RankingCursor] = None,
        max_pages: Optional[int] = None,
        now: Optional[datetime] = None,
        diversity: Optional[dict[PostId, int]] = None,
    ) -> RankingSummary:
        """Run a ranking pass.

        Args:
            cursor: Resume after this position (None starts from the newest post)
            max_pages: Stop after this many pages (None runs to the end)
            now: Time of the pass; a resumed pass must reuse the original one
            diversity: Diversity scores of the pass being resumed; computed
                when omitted

        Returns:
            Summary of the pass; ``next_cursor`` is set if it stopped early
        """
        started = time.monotonic()
        now = now or self.clock.now()

        with logfire.span(
            "ranking_engine.run",
            now=now.isoformat(),
            resumed=cursor is not None,
            max_pages=max_pages,
        ):
            if diversity is None:
                diversity = await self.diversity_scores(now)

            pages = processed = updated = errors = 0
            while True:
                page = await self.process_page(now, diversity, cursor)
                pages += 1
                processed += page.processed
                updated += page.updated
                errors += page.errors
                cursor = page.next_cursor

                if cursor is None:
                    break
                if max_pages is not None and pages >= max_pages:
                    logfire.info("Ranking pass paused", pages=pages)
                    break

            summary = RankingSummary(
                pages=pages,
                processed=processed,
                updated=updated,
                errors=errors,
                next_cursor=cursor,
                duration_ms=int((time.monotonic() - started) * 1000),
                diversity=diversity,
            )

            if summary.errors:
                logfire.warn(
                    "Ranking pass finished with errors",
                    errors=summary.errors,
                    processed=summary.processed,
                )
            logfire.info(
                "Ranking pass finished",
                pages=summary.pages,
                processed=summary.processed,
                updated=summary.updated,
                errors=summary.errors,
                duration_ms=summary.duration_ms,
                completed=summary.completed,
            )
            return summary

    async def diversity_scores(self, now: datetime) -> dict[PostId, int]:
        """Compute domain diversity for the top posts of the recent window.

        The pool is chosen by net vote score, which the engine never
        writes, so consecutive passes see the same pool.

        Args:
            now: Time of the pass

        Returns:
            Diversity score per pooled post (other posts are absent)
        """
        if self.settings.diversity_pool_size == 0:
            return {}

        with logfire.span("ranking_engine.diversity_scores"):
            try:
                pool = await self.post_repository.find_top_by_score(
                    created_after=self.window_start(now),
                    limit=self.settings.diversity_pool_size,
                )
            except StorageUnavailableError as e:
                # Ranking still works without diversity
                logfire.warn("Diversity pool unavailable", error=str(e))
                return {}

            scores = diversity_scores(pool)
            logfire.debug(
                "Diversity scores calculated",
                pool=len(pool),
                unique=sum(1 for score in scores.values() if score > 0),
            )
            return scores

    async def process_page(
        self,
        now: datetime,
        diversity: dict[PostId, int],
        cursor: Optional[RankingCursor] = None,
    ) -> RankingPage:
        """Rank and write one page of active posts.

        Args:
            now: Time of the pass (fixed for all pages)
            diversity: Diversity scores from ``diversity_scores``
            cursor: Position after which to read

        Returns:
            Page result; ``next_cursor`` is None on the last page
        """
        with logfire.span(
            "ranking_engine.process_page",
            after=str(cursor.post_id) if cursor else None,
        ):
            posts = await self.post_repository.find_active(
                created_after=self.window_start(now),
                time_score_floor=self.settings.time_score_floor,
                after=cursor,
                limit=self.settings.page_size,
            )
            if not posts:
                return RankingPage(processed=0, updated=0, errors=0)

            updates = [
                self.scorer.rank_post(post, now, diversity.get(post.id)) for post in posts
            ]
            updated, errors = await self._write(updates)

            next_cursor = None
            if len(posts) == self.settings.page_size:
                last = posts[-1]
                next_cursor = RankingCursor(created_at=last.created_at, post_id=last.id)

            logfire.info(
                "Ranking page written",
                processed=len(posts),
                updated=updated,
                errors=errors,
                max_rank=max(update.rank for update in updates),
            )
            return RankingPage(
                processed=len(posts),
                updated=updated,
                errors=errors,
                next_cursor=next_cursor,
            )

    async def _write(self, updates: Sequence[RankUpdate]) -> tuple[int, int]:
        """Write a page in bulk, falling back to per-post writes on failure.

        Returns:
            Tuple of (posts updated, posts failed)
        """
        try:
            await self.post_repository.update_ranks(updates)
            return len(updates), 0
        except StorageUnavailableError as e:
            logfire.warn(
                "Bulk rank update failed, retrying per post",
                count=len(updates),
                error=str(e),
            )

        updated = errors = 0
        for update in updates:
            try:
                await self.post_repository.update_ranks([update])
                updated += 1
            except StorageUnavailableError as e:
                errors += 1
                logfire.error(
                    "Rank update failed",
                    post_id=str(update.post_id),
                    error=str(e),
                )
        return updated, errors
