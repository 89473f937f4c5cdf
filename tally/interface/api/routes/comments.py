"""Comment routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, status
from pydantic import BaseModel

from tally.application.usecase.comment import (
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    GetCommentsRequest,
    GetCommentsResponse,
    GetCommentsUseCase,
)
from tally.domain.service import IdentityService

router = APIRouter(prefix="/posts", tags=["comments"], route_class=DishkaRoute)


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    text: str
    parent_id: str | None = None


@router.post(
    "/{post_id}/comments",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: str,
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> CreateCommentResponse:
    """Comment on a post, or reply to a comment when ``parent_id`` is set.

    Requires authentication.

    Args:
        post_id: Post UUID
        request: Comment text and optional parent
        create_comment_use_case: Create comment use case from DI
        identity_service: Credential validation from DI
        authorization: Bearer credential

    Returns:
        Created comment
    """
    user_id = identity_service.authenticate(authorization)

    return await create_comment_use_case.execute(
        CreateCommentRequest(
            post_id=post_id,
            text=request.text,
            author_id=str(user_id),
            parent_id=request.parent_id,
        )
    )


@router.get("/{post_id}/comments", response_model=GetCommentsResponse)
async def get_comments(
    post_id: str,
    get_comments_use_case: FromDishka[GetCommentsUseCase],
    identity_service: FromDishka[IdentityService],
    authorization: str | None = Header(default=None),
) -> GetCommentsResponse:
    """Get a post's comments, oldest first."""
    user_id = identity_service.optional_user(authorization)

    return await get_comments_use_case.execute(
        GetCommentsRequest(post_id=post_id, user_id=str(user_id) if user_id else None)
    )
