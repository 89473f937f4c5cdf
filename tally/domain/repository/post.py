"""Post repository interface."""

from abc import abstractmethod
from datetime import datetime
from enum import Enum
from typing import List, Optional, Sequence

from tally.domain.model import Post, RankUpdate
from tally.domain.repository.votable import VotableRepository
from tally.domain.value import PostId, RankingCursor


class PostSortOrder(str, Enum):
    """Sort order for post listings."""

    RANK = "rank"  # Sort by rank DESC, then created_at DESC
    RECENT = "recent"  # Sort by created_at DESC


class PostRepository(VotableRepository):
    """Repository for Post aggregate.

    Defines the contract for post persistence operations.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, resource_id: PostId) -> Optional[Post]:
        pass

    @abstractmethod
    async def find_by_ids(self, resource_ids: Sequence[PostId]) -> List[Post]:
        pass

    @abstractmethod
    async def find_all(
        self,
        sort: PostSortOrder = PostSortOrder.RANK,
        limit: int = 30,
        offset: int = 0,
    ) -> List[Post]:
        """Find non-deleted posts with pagination.

        Args:
            sort: Sort order (rank or recent)
            limit: Maximum number of posts to return
            offset: Number of posts to skip

        Returns:
            List of posts
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count non-deleted posts."""
        pass

    @abstractmethod
    async def find_active(
        self,
        created_after: datetime,
        time_score_floor: int,
        after: Optional[RankingCursor] = None,
        limit: int = 1000,
    ) -> List[Post]:
        """Find one page of posts the ranking engine should process.

        A post is active when it is not deleted and either was created after
        ``created_after`` or still has a time score above the floor.
        Pages follow (created_at DESC, id DESC) keyset order.

        Args:
            created_after: Start of the recent window
            time_score_floor: Posts at or below this time score are fully decayed
            after: Cursor of the last post of the previous page
            limit: Page size

        Returns:
            Up to ``limit`` active posts after the cursor
        """
        pass

    @abstractmethod
    async def find_top_by_score(
        self,
        created_after: datetime,
        limit: int,
    ) -> List[Post]:
        """Find recent non-deleted posts with the highest net vote score.

        Ties are broken by newest first, then by ID.

        Args:
            created_after: Start of the recent window
            limit: Number of posts

        Returns:
            Up to ``limit`` posts ordered by score DESC
        """
        pass

    @abstractmethod
    async def update_ranks(self, updates: Sequence[RankUpdate]) -> None:
        """Write ranking values for many posts in one bulk call.

        Only ``time_score`` and ``rank`` are written.

        Args:
            updates: New values per post

        Raises:
            StorageUnavailableError: If the bulk write fails
        """
        pass

    @abstractmethod
    async def save(self, post: Post) -> Post:
        """Save a post (create or update).

        Args:
            post: The post to save

        Returns:
            The saved post
        """
        pass

    @abstractmethod
    async def soft_delete(self, post_id: PostId, deleted_at: datetime) -> bool:
        """Mark a post as deleted.

        Votes on the post are left in place.

        Args:
            post_id: The post ID
            deleted_at: Deletion timestamp

        Returns:
            True if the post was found and not already deleted
        """
        pass

    @abstractmethod
    async def increment_comment_count(self, post_id: PostId) -> None:
        """Atomically increment the post's comment count by 1.

        Args:
            post_id: The post ID
        """
        pass
