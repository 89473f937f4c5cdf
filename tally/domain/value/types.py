"""Domain value objects for Tally.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from datetime import datetime
from enum import Enum
from uuid import UUID

from tally.domain.value.common import ValueObject


class VoteDirection(str, Enum):
    """Stance of a vote.

    Stored as a direction, applied to aggregates as a signed delta.
    """

    UP = "up"
    DOWN = "down"

    @property
    def delta(self) -> int:
        """Signed contribution of this direction to the net score."""
        return 1 if self is VoteDirection.UP else -1

    @property
    def counter(self) -> "VoteCounter":
        """Aggregate counter tracking votes in this direction."""
        return VoteCounter.COUNT_UP if self is VoteDirection.UP else VoteCounter.COUNT_DOWN


class ResourceType(str, Enum):
    """Type of entity that can be voted on."""

    POST = "post"
    COMMENT = "comment"


class VoteOutcome(str, Enum):
    """Transition applied by a vote intent."""

    CREATED = "created"
    CHANGED = "changed"
    REMOVED = "removed"


class VoteCounter(str, Enum):
    """Aggregate counters adjusted by vote transitions."""

    COUNT_UP = "count_up"
    COUNT_DOWN = "count_down"
    SCORE = "score"

    @property
    def minimum(self) -> int | None:
        """Floor enforced by storage on atomic adjustments."""
        return None if self is VoteCounter.SCORE else 0


class ResourceRef(ValueObject):
    """Reference to a votable resource as supplied by a caller.

    The id is kept as given so batch results can be keyed by it even when
    it is malformed.
    """

    resource_id: str
    resource_type: ResourceType


class RankingCursor(ValueObject):
    """Keyset position in the (created_at desc, id desc) ordering of posts."""

    created_at: datetime
    post_id: UUID
