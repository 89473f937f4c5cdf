"""Unit tests for the scheduled ranking script."""

from datetime import timedelta

import pytest

from scripts.run_ranking import run_pass
from tally.config import RankingSettings
from tally.domain.repository import PostRepository
from tally.domain.service.ranking import PostScorer
from tally.domain.value import VoteCounter
from tally.persistence.repository.inmemory import InMemoryPostRepository
from tally.util.clock import Clock
from tests.di import build_test_container
from tests.factories import make_post


class TestRunPass:
    """Tests for the page-per-request ranking loop."""

    @pytest.mark.asyncio
    async def test_pages_share_one_diversity_pool(self, monkeypatch):
        """Votes landing between pages do not reshuffle the pool mid-pass."""
        monkeypatch.setenv("RANKING__PAGE_SIZE", "1")
        container = build_test_container()

        async with container() as request_container:
            post_repo = await request_container.get(PostRepository)
            clock = await request_container.get(Clock)
            now = clock.now()
            older = await post_repo.save(
                make_post(
                    created_at=now - timedelta(hours=1),
                    link="https://same.example/a",
                    count_up=5,
                    score=5,
                )
            )
            newer = await post_repo.save(
                make_post(created_at=now, link="https://same.example/b")
            )

        pool_queries = []
        find_top_by_score = InMemoryPostRepository.find_top_by_score
        update_ranks = InMemoryPostRepository.update_ranks

        async def counting_find_top_by_score(self, created_after, limit):
            pool_queries.append(limit)
            return await find_top_by_score(self, created_after, limit)

        async def voting_update_ranks(self, updates):
            await update_ranks(self, updates)
            if [u.post_id for u in updates] == [newer.id]:
                # The newer post overtakes the older one after page 1
                await self.increment_counter(newer.id, VoteCounter.SCORE, 20)

        monkeypatch.setattr(
            InMemoryPostRepository, "find_top_by_score", counting_find_top_by_score
        )
        monkeypatch.setattr(InMemoryPostRepository, "update_ranks", voting_update_ranks)

        try:
            totals = await run_pass(container, reconcile=False)

            async with container() as request_container:
                post_repo = await request_container.get(PostRepository)
                stored = await post_repo.find_by_id(older.id)
        finally:
            await container.close()

        scorer = PostScorer(RankingSettings())
        assert len(pool_queries) == 1
        assert totals["pages"] == 3
        assert totals["updated"] == 2
        assert totals["errors"] == 0
        assert stored.rank == scorer.rank_post(stored, now, diversity=100).rank

    @pytest.mark.asyncio
    async def test_max_pages_pauses_the_pass(self, monkeypatch):
        monkeypatch.setenv("RANKING__PAGE_SIZE", "1")
        container = build_test_container()

        async with container() as request_container:
            post_repo = await request_container.get(PostRepository)
            clock = await request_container.get(Clock)
            for minutes in range(3):
                await post_repo.save(
                    make_post(created_at=clock.now() - timedelta(minutes=minutes))
                )

        try:
            totals = await run_pass(container, reconcile=False, max_pages=2)
        finally:
            await container.close()

        assert totals["pages"] == 2
        assert totals["processed"] == 2
