"""PostgreSQL repository implementations."""

from tally.persistence.repository.comment import PostgresCommentRepository
from tally.persistence.repository.post import PostgresPostRepository
from tally.persistence.repository.vote import PostgresVoteRepository

__all__ = [
    "PostgresPostRepository",
    "PostgresCommentRepository",
    "PostgresVoteRepository",
]
