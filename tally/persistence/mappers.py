"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from tally.domain.model import Comment, Post, Vote
from tally.domain.value import (
    CommentId,
    PostId,
    ResourceType,
    UserId,
    VoteDirection,
    VoteId,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_post(row: Dict[str, Any]) -> Post:
    """Convert database row to Post domain model.

    Args:
        row: Database row as dict

    Returns:
        Post domain model
    """
    return Post(
        id=PostId(_uuid(row["id"])),
        author_id=UserId(_uuid(row["author_id"])),
        title=row["title"],
        link=row.get("link"),
        text=row.get("text"),
        count_up=row["count_up"],
        count_down=row["count_down"],
        score=row["score"],
        comment_count=row["comment_count"],
        time_score=row["time_score"],
        rank=row["rank"],
        relevancy_score=row.get("relevancy_score"),
        quality_score=row.get("quality_score"),
        spelling_score=row.get("spelling_score"),
        spam_score=row.get("spam_score"),
        safety_score=row.get("safety_score"),
        sensation_score=row.get("sensation_score"),
        created_at=row["created_at"],
        deleted_at=row.get("deleted_at"),
    )


def post_to_dict(post: Post) -> Dict[str, Any]:
    """Convert Post domain model to database dict.

    Args:
        post: Post domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return post.model_dump()


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model.

    Args:
        row: Database row as dict

    Returns:
        Comment domain model
    """
    return Comment(
        id=CommentId(_uuid(row["id"])),
        post_id=PostId(_uuid(row["post_id"])),
        author_id=UserId(_uuid(row["author_id"])),
        text=row["text"],
        parent_id=CommentId(_uuid(row["parent_id"])) if row.get("parent_id") else None,
        count_up=row["count_up"],
        count_down=row["count_down"],
        score=row["score"],
        created_at=row["created_at"],
        deleted_at=row.get("deleted_at"),
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict.

    Args:
        comment: Comment domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return comment.model_dump()


def row_to_vote(row: Dict[str, Any]) -> Vote:
    """Convert database row to Vote domain model.

    Args:
        row: Database row as dict

    Returns:
        Vote domain model
    """
    return Vote(
        id=VoteId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        resource_type=ResourceType(row["resource_type"]),
        resource_id=_uuid(row["resource_id"]),
        direction=VoteDirection(row["direction"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def vote_to_dict(vote: Vote) -> Dict[str, Any]:
    """Convert Vote domain model to database dict.

    Args:
        vote: Vote domain model

    Returns:
        Dict suitable for database insertion
    """
    return {
        "id": vote.id,
        "user_id": vote.user_id,
        "resource_type": vote.resource_type.value,
        "resource_id": vote.resource_id,
        "direction": vote.direction.value,
        "created_at": vote.created_at,
        "updated_at": vote.updated_at,
    }
