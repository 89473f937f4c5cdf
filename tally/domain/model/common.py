"""Base model for all domain entities."""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class DomainModel(BaseModel):
    """Base class for all domain models.

    Provides common configuration for immutability and custom types.
    """

    model_config = ConfigDict(
        frozen=True,  # All domain models are immutable
        arbitrary_types_allowed=True,  # Allow custom value objects
    )


class VoteAggregate(DomainModel):
    """Vote counters carried by every votable resource.

    ``score`` is kept as its own atomically adjusted counter rather than
    derived on read; every transition moves it together with the
    directional counters so that ``score == count_up - count_down``.
    """

    id: UUID
    count_up: int = 0
    count_down: int = 0
    score: int = 0
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
