"""PostgreSQL implementation of Comment repository."""

from typing import List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tally.domain.model import Comment
from tally.domain.repository import CommentRepository
from tally.domain.value import CommentId, PostId
from tally.persistence.database import savepoint, storage_errors
from tally.persistence.mappers import comment_to_dict, row_to_comment
from tally.persistence.repository.votable import PostgresVotableMixin
from tally.persistence.tables import comments_table


class PostgresCommentRepository(PostgresVotableMixin, CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    table = comments_table
    resource_name = "comment"

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, resource_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == resource_id)
        with storage_errors("comment.find_by_id"):
            result = await self.session.execute(stmt)
            row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_by_ids(self, resource_ids: Sequence[CommentId]) -> List[Comment]:
        """Find several comments in one query."""
        if not resource_ids:
            return []

        stmt = select(comments_table).where(comments_table.c.id.in_(resource_ids))
        with storage_errors("comment.find_by_ids"):
            result = await self.session.execute(stmt)
            rows = result.fetchall()
        return [row_to_comment(row._asdict()) for row in rows]

    async def find_by_post(
        self,
        post_id: PostId,
        include_deleted: bool = False,
    ) -> List[Comment]:
        """Find all comments for a post, oldest first."""
        stmt = select(comments_table).where(comments_table.c.post_id == post_id)

        if not include_deleted:
            stmt = stmt.where(comments_table.c.deleted_at.is_(None))

        stmt = stmt.order_by(comments_table.c.created_at, comments_table.c.id)

        with storage_errors("comment.find_by_post"):
            result = await self.session.execute(stmt)
            rows = result.fetchall()
        return [row_to_comment(row._asdict()) for row in rows]

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or update)."""
        existing = await self.find_by_id(comment.id)
        comment_dict = comment_to_dict(comment)

        if existing:
            stmt = (
                comments_table.update()
                .where(comments_table.c.id == comment.id)
                .values(**comment_dict)
            )
        else:
            stmt = comments_table.insert().values(**comment_dict)

        async with savepoint(self.session, "comment.save"):
            await self.session.execute(stmt)
        return comment
