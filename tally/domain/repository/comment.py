"""Comment repository interface."""

from abc import abstractmethod
from typing import List, Optional, Sequence

from tally.domain.model import Comment
from tally.domain.repository.votable import VotableRepository
from tally.domain.value import CommentId, PostId


class CommentRepository(VotableRepository):
    """Repository for Comment entity."""

    @abstractmethod
    async def find_by_id(self, resource_id: CommentId) -> Optional[Comment]:
        pass

    @abstractmethod
    async def find_by_ids(self, resource_ids: Sequence[CommentId]) -> List[Comment]:
        pass

    @abstractmethod
    async def find_by_post(
        self, post_id: PostId, include_deleted: bool = False
    ) -> List[Comment]:
        """Find all comments on a post, oldest first.

        Args:
            post_id: The post's ID
            include_deleted: Whether to include soft-deleted comments

        Returns:
            List of comments on the post
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update).

        Args:
            comment: The comment to save

        Returns:
            The saved comment
        """
        pass
