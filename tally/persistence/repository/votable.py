"""Counter operations shared by the PostgreSQL post and comment repositories."""

from typing import ClassVar, Optional
from uuid import UUID

import logfire
from sqlalchemy import Table, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from tally.domain.error import NotFoundError
from tally.domain.value import VoteCounter
from tally.persistence.database import savepoint


class PostgresVotableMixin:
    """Atomic aggregate counter updates against a table with vote columns."""

    table: ClassVar[Table]
    resource_name: ClassVar[str]
    session: AsyncSession

    async def increment_counter(
        self,
        resource_id: UUID,
        counter: VoteCounter,
        delta: int,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ) -> int:
        """Adjust one counter with a single ``UPDATE ... RETURNING``."""
        column = self.table.c[counter.value]
        value = column + delta
        if minimum is not None:
            value = func.greatest(value, minimum)
        if maximum is not None:
            value = func.least(value, maximum)

        stmt = (
            update(self.table)
            .where(self.table.c.id == resource_id)
            .values({column: value})
            .returning(column)
        )
        async with savepoint(self.session, f"{self.resource_name}.increment_counter"):
            result = await self.session.execute(stmt)
            new_value = result.scalar_one_or_none()

        if new_value is None:
            raise NotFoundError(self.resource_name.capitalize(), str(resource_id))

        logfire.debug(
            "Counter adjusted",
            resource_id=str(resource_id),
            counter=counter.value,
            delta=delta,
            value=new_value,
        )
        return new_value

    async def set_counters(
        self, resource_id: UUID, count_up: int, count_down: int
    ) -> None:
        """Overwrite all three counters in one statement."""
        stmt = (
            update(self.table)
            .where(self.table.c.id == resource_id)
            .values(
                count_up=count_up,
                count_down=count_down,
                score=count_up - count_down,
            )
        )
        async with savepoint(self.session, f"{self.resource_name}.set_counters"):
            await self.session.execute(stmt)
