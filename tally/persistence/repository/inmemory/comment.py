"""In-memory comment repository for testing."""

from typing import Optional, Sequence

from tally.domain.model import Comment
from tally.domain.repository.comment import CommentRepository
from tally.domain.value import CommentId, PostId

from .store import InMemoryStore
from .votable import InMemoryVotableMixin


class InMemoryCommentRepository(InMemoryVotableMixin[Comment], CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    resource_name = "comment"

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()
        self._items = self._store.comments

    @property
    def _comments(self) -> dict[CommentId, Comment]:
        return self._store.comments

    async def find_by_id(self, resource_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._comments.get(resource_id)

    async def find_by_ids(self, resource_ids: Sequence[CommentId]) -> list[Comment]:
        """Find several comments."""
        return [self._comments[i] for i in set(resource_ids) if i in self._comments]

    async def find_by_post(
        self, post_id: PostId, include_deleted: bool = False
    ) -> list[Comment]:
        """Find all comments for a post, oldest first."""
        comments = [
            c
            for c in self._comments.values()
            if c.post_id == post_id and (include_deleted or c.deleted_at is None)
        ]
        comments.sort(key=lambda c: (c.created_at, c.id))
        return comments

    async def save(self, comment: Comment) -> Comment:
        """Save a comment."""
        self._comments[comment.id] = comment
        return comment
