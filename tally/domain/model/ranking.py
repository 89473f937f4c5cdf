"""Ranking engine value types."""

from typing import Optional

from tally.domain.model.common import DomainModel
from tally.domain.value import PostId, RankingCursor


class RankUpdate(DomainModel):
    """New ranking values for one post."""

    post_id: PostId
    time_score: int
    rank: float


class RankingPage(DomainModel):
    """Result of processing one page of active posts."""

    processed: int
    updated: int
    errors: int
    next_cursor: Optional[RankingCursor] = None


class RankingSummary(DomainModel):
    """Summary of a ranking pass."""

    pages: int = 0
    processed: int = 0
    updated: int = 0
    errors: int = 0
    next_cursor: Optional[RankingCursor] = None
    duration_ms: int = 0
    # Pool chosen at the start of the pass, carried to resumed runs
    diversity: dict[PostId, int] = {}

    @property
    def completed(self) -> bool:
        """True when the pass reached the end of the active posts."""
        return self.next_cursor is None
