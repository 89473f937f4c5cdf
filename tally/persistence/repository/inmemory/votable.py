"""Counter operations shared by the in-memory post and comment repositories."""

from typing import Generic, Optional, TypeVar
from uuid import UUID

from tally.domain.error import NotFoundError
from tally.domain.model import VoteAggregate
from tally.domain.value import VoteCounter

T = TypeVar("T", bound=VoteAggregate)


class InMemoryVotableMixin(Generic[T]):
    """Counter updates against a dict of frozen models.

    Each update replaces the stored model without awaiting in between,
    so it is atomic with respect to other coroutines.
    """

    resource_name: str
    _items: dict

    async def increment_counter(
        self,
        resource_id: UUID,
        counter: VoteCounter,
        delta: int,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
    ) -> int:
        item: Optional[T] = self._items.get(resource_id)
        if item is None:
            raise NotFoundError(self.resource_name.capitalize(), str(resource_id))

        value = getattr(item, counter.value) + delta
        if minimum is not None:
            value = max(value, minimum)
        if maximum is not None:
            value = min(value, maximum)

        self._items[resource_id] = item.model_copy(update={counter.value: value})
        return value

    async def set_counters(
        self, resource_id: UUID, count_up: int, count_down: int
    ) -> None:
        item: Optional[T] = self._items.get(resource_id)
        if item is None:
            return
        self._items[resource_id] = item.model_copy(
            update={
                "count_up": count_up,
                "count_down": count_down,
                "score": count_up - count_down,
            }
        )
