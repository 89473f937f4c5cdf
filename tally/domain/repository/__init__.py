"""Repository interfaces for Tally domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from tally.domain.repository.comment import CommentRepository
from tally.domain.repository.post import PostRepository, PostSortOrder
from tally.domain.repository.votable import VotableRepository
from tally.domain.repository.vote import VoteRepository

__all__ = [
    "CommentRepository",
    "PostRepository",
    "PostSortOrder",
    "VotableRepository",
    "VoteRepository",
]
