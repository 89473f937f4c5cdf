"""Domain services."""

from .base import Service
from .comment_service import CommentService
from .identity_service import IdentityService
from .post_service import PostService
from .ranking import PostScorer
from .ranking_service import RankingEngine
from .reconciliation_service import ReconciliationService
from .vote_service import VoteService

__all__ = [
    "CommentService",
    "IdentityService",
    "PostScorer",
    "PostService",
    "RankingEngine",
    "ReconciliationService",
    "Service",
    "VoteService",
]
