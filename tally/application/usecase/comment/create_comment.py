"""Create comment use case."""

from datetime import datetime
from typing import Optional

import logfire
from pydantic import BaseModel, ValidationError

from tally.application.usecase.parsing import parse_user_id, parse_uuid
from tally.domain.error import InvalidArgumentError, UnauthenticatedError
from tally.domain.service import CommentService
from tally.domain.value import CommentId, PostId


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    post_id: str  # UUID string
    text: str
    author_id: Optional[str] = None  # User ID from authenticated user
    parent_id: Optional[str] = None  # UUID string for replies


class CreateCommentResponse(BaseModel):
    """Create comment response."""

    comment_id: str
    post_id: str
    parent_id: Optional[str]
    text: str
    created_at: datetime


class CreateCommentUseCase:
    """Use case for commenting on a post or replying to a comment."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: CreateCommentRequest) -> CreateCommentResponse:
        """Execute create comment flow.

        Args:
            request: Create comment request

        Returns:
            Created comment

        Raises:
            UnauthenticatedError: If no author is given
            InvalidArgumentError: If an ID is malformed or the text is invalid
            NotFoundError: If the post or parent comment does not exist
        """
        author_id = parse_user_id(request.author_id)
        if author_id is None:
            raise UnauthenticatedError("Authentication required to comment")

        post_id = PostId(parse_uuid(request.post_id, "post_id"))
        parent_id = (
            CommentId(parse_uuid(request.parent_id, "parent_id"))
            if request.parent_id
            else None
        )

        with logfire.span("create_comment.execute", post_id=str(post_id)):
            try:
                comment = await self.comment_service.create_comment(
                    post_id=post_id,
                    author_id=author_id,
                    text=request.text,
                    parent_id=parent_id,
                )
            except ValidationError as e:
                raise InvalidArgumentError(
                    "; ".join(error["msg"] for error in e.errors())
                )

            return CreateCommentResponse(
                comment_id=str(comment.id),
                post_id=str(comment.post_id),
                parent_id=str(comment.parent_id) if comment.parent_id else None,
                text=comment.text,
                created_at=comment.created_at,
            )
