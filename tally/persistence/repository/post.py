"""PostgreSQL implementation of Post repository."""

from datetime import datetime
from typing import List, Optional, Sequence

import logfire
from sqlalchemy import bindparam, desc, func, or_, select, tuple_, update
from sqlalchemy.ext.asyncio import AsyncSession

from tally.domain.model import Post, RankUpdate
from tally.domain.repository.post import PostRepository, PostSortOrder
from tally.domain.value import PostId, RankingCursor
from tally.persistence.database import savepoint, storage_errors
from tally.persistence.mappers import post_to_dict, row_to_post
from tally.persistence.repository.votable import PostgresVotableMixin
from tally.persistence.tables import posts_table


class PostgresPostRepository(PostgresVotableMixin, PostRepository):
    """PostgreSQL implementation of PostRepository."""

    table = posts_table
    resource_name = "post"

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, resource_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        with logfire.span("post_repository.find_by_id", post_id=str(resource_id)):
            stmt = select(posts_table).where(posts_table.c.id == resource_id)
            with storage_errors("post.find_by_id"):
                result = await self.session.execute(stmt)
                row = result.fetchone()

            if not row:
                logfire.warn("Post not found", post_id=str(resource_id))
                return None
            return row_to_post(row._asdict())

    async def find_by_ids(self, resource_ids: Sequence[PostId]) -> List[Post]:
        """Find several posts in one query."""
        if not resource_ids:
            return []

        stmt = select(posts_table).where(posts_table.c.id.in_(resource_ids))
        with storage_errors("post.find_by_ids"):
            result = await self.session.execute(stmt)
            rows = result.fetchall()
        return [row_to_post(row._asdict()) for row in rows]

    async def find_all(
        self,
        sort: PostSortOrder = PostSortOrder.RANK,
        limit: int = 30,
        offset: int = 0,
    ) -> List[Post]:
        """Find non-deleted posts with pagination."""
        with logfire.span(
            "post_repository.find_all", sort=sort.value, limit=limit, offset=offset
        ):
            stmt = select(posts_table).where(posts_table.c.deleted_at.is_(None))

            if sort == PostSortOrder.RANK:
                stmt = stmt.order_by(
                    desc(posts_table.c.rank),
                    desc(posts_table.c.created_at),
                    desc(posts_table.c.id),
                )
            else:
                stmt = stmt.order_by(
                    desc(posts_table.c.created_at), desc(posts_table.c.id)
                )

            stmt = stmt.limit(limit).offset(offset)

            with storage_errors("post.find_all"):
                result = await self.session.execute(stmt)
                rows = result.fetchall()

            logfire.info("Found posts", count=len(rows))
            return [row_to_post(row._asdict()) for row in rows]

    async def count(self) -> int:
        """Count non-deleted posts."""
        stmt = (
            select(func.count())
            .select_from(posts_table)
            .where(posts_table.c.deleted_at.is_(None))
        )
        with storage_errors("post.count"):
            result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def find_active(
        self,
        created_after: datetime,
        time_score_floor: int,
        after: Optional[RankingCursor] = None,
        limit: int = 1000,
    ) -> List[Post]:
        """Find one keyset page of posts for the ranking pass."""
        with logfire.span(
            "post_repository.find_active",
            created_after=created_after.isoformat(),
            after=str(after.post_id) if after else None,
            limit=limit,
        ):
            stmt = select(posts_table).where(
                posts_table.c.deleted_at.is_(None),
                or_(
                    posts_table.c.created_at >= created_after,
                    posts_table.c.time_score > time_score_floor,
                ),
            )
            if after is not None:
                stmt = stmt.where(
                    tuple_(posts_table.c.created_at, posts_table.c.id)
                    < tuple_(after.created_at, after.post_id)
                )
            stmt = stmt.order_by(
                desc(posts_table.c.created_at), desc(posts_table.c.id)
            ).limit(limit)

            with storage_errors("post.find_active"):
                result = await self.session.execute(stmt)
                rows = result.fetchall()
            return [row_to_post(row._asdict()) for row in rows]

    async def find_top_by_score(
        self,
        created_after: datetime,
        limit: int,
    ) -> List[Post]:
        """Find recent posts with the highest net vote score."""
        stmt = (
            select(posts_table)
            .where(
                posts_table.c.deleted_at.is_(None),
                posts_table.c.created_at >= created_after,
            )
            .order_by(
                desc(posts_table.c.score),
                desc(posts_table.c.created_at),
                desc(posts_table.c.id),
            )
            .limit(limit)
        )
        with storage_errors("post.find_top_by_score"):
            result = await self.session.execute(stmt)
            rows = result.fetchall()
        return [row_to_post(row._asdict()) for row in rows]

    async def update_ranks(self, updates: Sequence[RankUpdate]) -> None:
        """Write ranking values with one executemany UPDATE."""
        if not updates:
            return

        with logfire.span("post_repository.update_ranks", count=len(updates)):
            stmt = (
                update(posts_table)
                .where(posts_table.c.id == bindparam("b_id"))
                .values(
                    time_score=bindparam("b_time_score"),
                    rank=bindparam("b_rank"),
                )
            )
            params = [
                {
                    "b_id": update_.post_id,
                    "b_time_score": update_.time_score,
                    "b_rank": update_.rank,
                }
                for update_ in updates
            ]
            async with savepoint(self.session, "post.update_ranks"):
                await self.session.execute(stmt, params)

    async def save(self, post: Post) -> Post:
        """Save a post (create or update)."""
        with logfire.span("post_repository.save", post_id=str(post.id)):
            existing = await self.find_by_id(post.id)
            post_dict = post_to_dict(post)

            if existing:
                logfire.info("Updating existing post", post_id=str(post.id))
                stmt = (
                    posts_table.update()
                    .where(posts_table.c.id == post.id)
                    .values(**post_dict)
                )
            else:
                logfire.info("Inserting new post", post_id=str(post.id))
                stmt = posts_table.insert().values(**post_dict)

            async with savepoint(self.session, "post.save"):
                await self.session.execute(stmt)
            return post

    async def soft_delete(self, post_id: PostId, deleted_at: datetime) -> bool:
        """Mark a post as deleted unless it already is."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id, posts_table.c.deleted_at.is_(None))
            .values(deleted_at=deleted_at)
            .returning(posts_table.c.id)
        )
        async with savepoint(self.session, "post.soft_delete"):
            result = await self.session.execute(stmt)
            row = result.fetchone()
        return row is not None

    async def increment_comment_count(self, post_id: PostId) -> None:
        """Atomically increment comment count by 1."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(comment_count=posts_table.c.comment_count + 1)
        )
        async with savepoint(self.session, "post.increment_comment_count"):
            await self.session.execute(stmt)
