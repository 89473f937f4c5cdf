"""Post aggregate root.

Posts are top-level submissions: a link, a text, or both. They carry the
vote aggregate and the inputs and outputs of the ranking engine.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from tally.domain.model.common import VoteAggregate, utcnow
from tally.domain.value import PostId, UserId

TIME_SCORE_SEED = 100


class Post(VoteAggregate):
    """Post aggregate root.

    Quality signals (0-100) are produced by an external enhancement
    pipeline and may be absent; ranking must work without them.
    """

    id: PostId
    author_id: UserId
    title: str = Field(min_length=1, max_length=300)
    link: Optional[str] = None
    text: Optional[str] = Field(default=None, max_length=10000)
    comment_count: int = Field(default=0, ge=0)

    # Ranking state
    time_score: int = TIME_SCORE_SEED
    rank: float = 0.0

    # Optional quality signals
    relevancy_score: Optional[int] = Field(default=None, ge=0, le=100)
    quality_score: Optional[int] = Field(default=None, ge=0, le=100)
    spelling_score: Optional[int] = Field(default=None, ge=0, le=100)
    spam_score: Optional[int] = Field(default=None, ge=0, le=100)
    safety_score: Optional[int] = Field(default=None, ge=0, le=100)
    sensation_score: Optional[int] = Field(default=None, ge=0, le=100)

    created_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def validate_content(self) -> "Post":
        """A post needs a link or a text body."""
        if not self.link and not self.text:
            raise ValueError("Either link or text is required")
        return self
