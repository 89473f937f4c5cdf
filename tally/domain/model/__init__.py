"""Domain model entities for Tally."""

from tally.domain.model.comment import Comment
from tally.domain.model.common import VoteAggregate
from tally.domain.model.post import Post
from tally.domain.model.ranking import RankingPage, RankingSummary, RankUpdate
from tally.domain.model.vote import Vote, VoteResult, VoteState

__all__ = [
    "Comment",
    "Post",
    "RankUpdate",
    "RankingPage",
    "RankingSummary",
    "Vote",
    "VoteAggregate",
    "VoteResult",
    "VoteState",
]
