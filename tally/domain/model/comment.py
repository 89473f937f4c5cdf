"""Comment entity.

Comments point back to their post by id; a post does not hold its
comments, they are queried by filter.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from tally.domain.model.common import VoteAggregate, utcnow
from tally.domain.value import CommentId, PostId, UserId


class Comment(VoteAggregate):
    """Comment entity.

    Represents a comment on a post or a reply to another comment.
    """

    id: CommentId
    post_id: PostId
    author_id: UserId
    text: str = Field(min_length=1, max_length=10000)
    parent_id: Optional[CommentId] = None
    created_at: datetime = Field(default_factory=utcnow)
