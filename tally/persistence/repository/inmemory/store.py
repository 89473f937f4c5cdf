"""Shared state for the in-memory repositories."""

from dataclasses import dataclass, field

from tally.domain.model import Comment, Post, Vote
from tally.domain.value import CommentId, PostId, VoteId


@dataclass
class InMemoryStore:
    """Tables backing the in-memory repositories.

    One store is shared by all repositories of a container so that state
    written in one request is visible to the next.
    """

    posts: dict[PostId, Post] = field(default_factory=dict)
    comments: dict[CommentId, Comment] = field(default_factory=dict)
    votes: dict[VoteId, Vote] = field(default_factory=dict)
