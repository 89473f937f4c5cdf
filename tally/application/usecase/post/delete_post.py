"""Delete post use case."""

from typing import Optional

from pydantic import BaseModel

from tally.application.usecase.parsing import parse_user_id, parse_uuid
from tally.domain.error import UnauthenticatedError
from tally.domain.service import PostService
from tally.domain.value import PostId


class DeletePostRequest(BaseModel):
    """Delete post request."""

    post_id: str
    user_id: Optional[str] = None  # User ID from authenticated user


class DeletePostResponse(BaseModel):
    """Delete post response."""

    post_id: str
    deleted: bool


class DeletePostUseCase:
    """Use case for soft deleting one's own post."""

    def __init__(self, post_service: PostService) -> None:
        self.post_service = post_service

    async def execute(self, request: DeletePostRequest) -> DeletePostResponse:
        """Execute delete post flow.

        Raises:
            UnauthenticatedError: If no user is given
            InvalidArgumentError: If the post ID is malformed
            NotFoundError: If the post does not exist
            NotAuthorizedError: If the caller is not the author
        """
        user_id = parse_user_id(request.user_id)
        if user_id is None:
            raise UnauthenticatedError("Authentication required to delete posts")
        post_id = PostId(parse_uuid(request.post_id, "post_id"))

        await self.post_service.delete_post(post_id, user_id)
        return DeletePostResponse(post_id=str(post_id), deleted=True)
