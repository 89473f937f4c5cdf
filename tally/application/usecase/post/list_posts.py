"""List posts use case."""

from datetime import datetime
from typing import Optional

import logfire
from pydantic import BaseModel, Field

from tally.application.usecase.parsing import parse_user_id
from tally.domain.repository import PostSortOrder
from tally.domain.service import PostService, VoteService
from tally.domain.value import ResourceRef, ResourceType, VoteDirection


class PostListItem(BaseModel):
    """Post list item in response."""

    post_id: str
    author_id: str
    title: str
    link: Optional[str]
    text: Optional[str]
    count_up: int
    count_down: int
    score: int
    comment_count: int
    time_score: int
    rank: float
    created_at: datetime
    vote: Optional[VoteDirection]  # The caller's vote, if any


class ListPostsRequest(BaseModel):
    """List posts request."""

    sort: PostSortOrder = PostSortOrder.RANK
    limit: int = Field(default=30, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
    user_id: Optional[str] = None  # Current user ID (if authenticated)


class ListPostsResponse(BaseModel):
    """List posts response."""

    posts: list[PostListItem]
    total: int
    limit: int
    offset: int


class ListPostsUseCase:
    """Use case for the ranked and recent post listings."""

    def __init__(self, post_service: PostService, vote_service: VoteService) -> None:
        """Initialize list posts use case.

        Args:
            post_service: Post domain service
            vote_service: Vote service for the caller's vote directions
        """
        self.post_service = post_service
        self.vote_service = vote_service

    async def execute(self, request: ListPostsRequest) -> ListPostsResponse:
        """Execute list posts flow.

        Args:
            request: Sort order, pagination and optional caller

        Returns:
            Page of posts with the caller's vote on each
        """
        with logfire.span(
            "list_posts.execute",
            sort=request.sort.value,
            limit=request.limit,
            offset=request.offset,
        ):
            user_id = parse_user_id(request.user_id)
            posts, total = await self.post_service.list_posts(
                sort=request.sort, limit=request.limit, offset=request.offset
            )

            # One batch lookup for the whole page
            directions: dict[str, Optional[VoteDirection]] = {}
            if user_id is not None and posts:
                states = await self.vote_service.get_vote_states_batch(
                    user_id,
                    [
                        ResourceRef(resource_id=str(post.id), resource_type=ResourceType.POST)
                        for post in posts
                    ],
                )
                directions = {key: state.direction for key, state in states.items()}

            items = [
                PostListItem(
                    post_id=str(post.id),
                    author_id=str(post.author_id),
                    title=post.title,
                    link=post.link,
                    text=post.text,
                    count_up=post.count_up,
                    count_down=post.count_down,
                    score=post.score,
                    comment_count=post.comment_count,
                    time_score=post.time_score,
                    rank=post.rank,
                    created_at=post.created_at,
                    vote=directions.get(str(post.id)),
                )
                for post in posts
            ]

            return ListPostsResponse(
                posts=items,
                total=total,
                limit=request.limit,
                offset=request.offset,
            )
