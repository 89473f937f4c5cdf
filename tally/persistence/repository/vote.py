"""PostgreSQL implementation of Vote repository."""

from datetime import datetime
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tally.domain.model import Vote
from tally.domain.repository import VoteRepository
from tally.domain.value import ResourceType, UserId, VoteDirection, VoteId
from tally.persistence.database import savepoint, storage_errors
from tally.persistence.mappers import row_to_vote, vote_to_dict
from tally.persistence.tables import votes_table


class PostgresVoteRepository(VoteRepository):
    """PostgreSQL implementation of VoteRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, vote_id: VoteId) -> Optional[Vote]:
        """Find a vote by ID."""
        stmt = select(votes_table).where(votes_table.c.id == vote_id)
        with storage_errors("vote.find_by_id"):
            result = await self.session.execute(stmt)
            row = result.fetchone()
        return row_to_vote(row._asdict()) if row else None

    async def find_by_user_and_resource(
        self,
        user_id: UserId,
        resource_type: ResourceType,
        resource_id: UUID,
    ) -> Optional[Vote]:
        """Find a user's vote on a specific resource."""
        stmt = select(votes_table).where(
            and_(
                votes_table.c.user_id == user_id,
                votes_table.c.resource_type == resource_type.value,
                votes_table.c.resource_id == resource_id,
            )
        )
        with storage_errors("vote.find_by_user_and_resource"):
            result = await self.session.execute(stmt)
            row = result.fetchone()
        return row_to_vote(row._asdict()) if row else None

    async def find_by_user_and_resources(
        self,
        user_id: UserId,
        resource_type: ResourceType,
        resource_ids: Sequence[UUID],
    ) -> List[Vote]:
        """Find a user's votes on multiple resources (batch query)."""
        if not resource_ids:
            return []

        stmt = select(votes_table).where(
            and_(
                votes_table.c.user_id == user_id,
                votes_table.c.resource_type == resource_type.value,
                votes_table.c.resource_id.in_(resource_ids),
            )
        )
        with storage_errors("vote.find_by_user_and_resources"):
            result = await self.session.execute(stmt)
            rows = result.fetchall()
        return [row_to_vote(row._asdict()) for row in rows]

    async def save(self, vote: Vote) -> Vote:
        """Insert a vote; the unique constraint rejects a second one."""
        stmt = insert(votes_table).values(**vote_to_dict(vote))
        async with savepoint(self.session, "vote.save"):
            await self.session.execute(stmt)
        return vote

    async def update_direction(
        self,
        vote_id: VoteId,
        expected: VoteDirection,
        direction: VoteDirection,
        updated_at: datetime,
    ) -> Optional[Vote]:
        """Compare-and-set the direction of a vote."""
        stmt = (
            update(votes_table)
            .where(
                votes_table.c.id == vote_id,
                votes_table.c.direction == expected.value,
            )
            .values(direction=direction.value, updated_at=updated_at)
            .returning(votes_table)
        )
        async with savepoint(self.session, "vote.update_direction"):
            result = await self.session.execute(stmt)
            row = result.fetchone()
        return row_to_vote(row._asdict()) if row else None

    async def delete(self, vote_id: VoteId) -> bool:
        """Delete a vote."""
        stmt = (
            delete(votes_table)
            .where(votes_table.c.id == vote_id)
            .returning(votes_table.c.id)
        )
        async with savepoint(self.session, "vote.delete"):
            result = await self.session.execute(stmt)
            row = result.fetchone()
        return row is not None

    async def count_by_resource(
        self, resource_type: ResourceType, resource_id: UUID
    ) -> tuple[int, int]:
        """Count up and down votes on a resource."""
        stmt = (
            select(votes_table.c.direction, func.count())
            .where(
                votes_table.c.resource_type == resource_type.value,
                votes_table.c.resource_id == resource_id,
            )
            .group_by(votes_table.c.direction)
        )
        with storage_errors("vote.count_by_resource"):
            result = await self.session.execute(stmt)
            counts = {direction: count for direction, count in result.fetchall()}
        return (
            counts.get(VoteDirection.UP.value, 0),
            counts.get(VoteDirection.DOWN.value, 0),
        )
