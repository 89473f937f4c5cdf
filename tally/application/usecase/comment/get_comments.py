"""Get comments use case."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from tally.application.usecase.parsing import parse_user_id, parse_uuid
from tally.domain.service import CommentService, VoteService
from tally.domain.value import PostId, ResourceRef, ResourceType, VoteDirection


class CommentItem(BaseModel):
    """Comment item in response."""

    comment_id: str
    post_id: str
    author_id: str
    text: str
    parent_id: Optional[str]
    count_up: int
    count_down: int
    score: int
    created_at: datetime
    vote: Optional[VoteDirection]  # The caller's vote, if any


class GetCommentsRequest(BaseModel):
    """Get comments request."""

    post_id: str  # UUID string
    user_id: Optional[str] = None  # Current user ID (if authenticated)


class GetCommentsResponse(BaseModel):
    """Get comments response."""

    post_id: str
    comments: list[CommentItem]
    total: int


class GetCommentsUseCase:
    """Use case for reading a post's comments, oldest first."""

    def __init__(
        self, comment_service: CommentService, vote_service: VoteService
    ) -> None:
        """Initialize get comments use case.

        Args:
            comment_service: Comment domain service
            vote_service: Vote service for the caller's vote directions
        """
        self.comment_service = comment_service
        self.vote_service = vote_service

    async def execute(self, request: GetCommentsRequest) -> GetCommentsResponse:
        """Execute get comments flow.

        Args:
            request: Post ID and optional caller

        Returns:
            Comments with the caller's vote on each

        Raises:
            InvalidArgumentError: If the post ID is malformed
            NotFoundError: If the post does not exist
        """
        post_id = PostId(parse_uuid(request.post_id, "post_id"))
        user_id = parse_user_id(request.user_id)

        comments = await self.comment_service.get_comments_for_post(post_id)

        directions: dict[str, Optional[VoteDirection]] = {}
        if user_id is not None and comments:
            states = await self.vote_service.get_vote_states_batch(
                user_id,
                [
                    ResourceRef(resource_id=str(c.id), resource_type=ResourceType.COMMENT)
                    for c in comments
                ],
            )
            directions = {key: state.direction for key, state in states.items()}

        items = [
            CommentItem(
                comment_id=str(c.id),
                post_id=str(c.post_id),
                author_id=str(c.author_id),
                text=c.text,
                parent_id=str(c.parent_id) if c.parent_id else None,
                count_up=c.count_up,
                count_down=c.count_down,
                score=c.score,
                created_at=c.created_at,
                vote=directions.get(str(c.id)),
            )
            for c in comments
        ]

        return GetCommentsResponse(
            post_id=str(post_id), comments=items, total=len(items)
        )
