"""Create post use case."""

from datetime import datetime
from typing import Optional

import logfire
from pydantic import BaseModel, ValidationError

from tally.application.usecase.parsing import parse_user_id
from tally.domain.error import InvalidArgumentError, UnauthenticatedError
from tally.domain.service import PostService


class CreatePostRequest(BaseModel):
    """Create post request."""

    title: str
    author_id: Optional[str] = None  # User ID from authenticated user
    link: Optional[str] = None
    text: Optional[str] = None


class CreatePostResponse(BaseModel):
    """Create post response."""

    post_id: str
    title: str
    link: Optional[str]
    text: Optional[str]
    score: int
    time_score: int
    rank: float
    created_at: datetime


class CreatePostUseCase:
    """Use case for creating a new post."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize create post use case.

        Args:
            post_service: Post domain service
        """
        self.post_service = post_service

    async def execute(self, request: CreatePostRequest) -> CreatePostResponse:
        """Execute create post flow.

        Args:
            request: Create post request

        Returns:
            Created post with its seeded rank

        Raises:
            UnauthenticatedError: If no author is given
            InvalidArgumentError: If the post fails validation
        """
        author_id = parse_user_id(request.author_id)
        if author_id is None:
            raise UnauthenticatedError("Authentication required to create posts")

        with logfire.span("create_post.execute", title=request.title):
            try:
                post = await self.post_service.create_post(
                    author_id=author_id,
                    title=request.title,
                    link=request.link,
                    text=request.text,
                )
            except ValidationError as e:
                raise InvalidArgumentError(
                    "; ".join(error["msg"] for error in e.errors())
                )

            return CreatePostResponse(
                post_id=str(post.id),
                title=post.title,
                link=post.link,
                text=post.text,
                score=post.score,
                time_score=post.time_score,
                rank=post.rank,
                created_at=post.created_at,
            )
