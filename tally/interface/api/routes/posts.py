"""Post routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, Query, status
from pydantic import BaseModel

from tally.application.usecase.post import (
    CreatePostRequest,
    CreatePostResponse,
    CreatePostUseCase,
    DeletePostRequest,
    DeletePostResponse,
    DeletePostUseCase,
    ListPostsRequest,
    ListPostsResponse,
    ListPostsUseCase,
)
from tally.domain.repository import PostSortOrder
from tally.domain.service import IdentityService

router = APIRouter(prefix="/posts", tags=["posts"], route_class=DishkaRoute)


class CreatePostAPIRequest(BaseModel):
    """API request for creating a post."""

    title: str
    link: str | None = None
    text: str | None = None


@router.post("", response_model=CreatePostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: CreatePostAPIRequest,
    create_post_use_case: FromDishka[CreatePostUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> CreatePostResponse:
    """Create a new post.

    Requires authentication.

    Args:
        request: Post creation data
        create_post_use_case: Create post use case from DI
        identity_service: Credential validation from DI
        authorization: Bearer credential

    Returns:
        Created post details
    """
    user_id = identity_service.authenticate(authorization)

    return await create_post_use_case.execute(
        CreatePostRequest(
            title=request.title,
            author_id=str(user_id),
            link=request.link,
            text=request.text,
        )
    )


@router.get("", response_model=ListPostsResponse)
async def list_posts(
    list_posts_use_case: FromDishka[ListPostsUseCase],
    identity_service: FromDishka[IdentityService],
    sort: PostSortOrder = Query(default=PostSortOrder.RANK),
    limit: int = Query(default=30, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    authorization: str | None = Header(default=None),
) -> ListPostsResponse:
    """List posts by rank or recency.

    Signed-in callers also get their own vote on each post.
    """
    user_id = identity_service.optional_user(authorization)

    return await list_posts_use_case.execute(
        ListPostsRequest(
            sort=sort,
            limit=limit,
            offset=offset,
            user_id=str(user_id) if user_id else None,
        )
    )


@router.delete("/{post_id}", response_model=DeletePostResponse)
async def delete_post(
    post_id: str,
    delete_post_use_case: FromDishka[DeletePostUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> DeletePostResponse:
    """Soft delete a post. Only its author may do so."""
    user_id = identity_service.authenticate(authorization)

    return await delete_post_use_case.execute(
        DeletePostRequest(post_id=post_id, user_id=str(user_id))
    )
