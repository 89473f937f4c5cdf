"""SQLAlchemy table definitions for Tally.

These tables are used with SQLAlchemy Core and mapped to pydantic domain
models by hand. They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# POSTS TABLE
# ============================================================================
posts_table = Table(
    "posts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("author_id", UUID, nullable=False),  # Users live in the identity provider
    Column("title", String(300), nullable=False),
    Column("link", Text, nullable=True),
    Column("text", Text, nullable=True),
    # Vote aggregate
    Column("count_up", Integer, nullable=False, server_default="0"),
    Column("count_down", Integer, nullable=False, server_default="0"),
    Column("score", Integer, nullable=False, server_default="0"),
    Column("comment_count", Integer, nullable=False, server_default="0"),
    # Ranking state
    Column("time_score", Integer, nullable=False, server_default="100"),
    Column("rank", Float, nullable=False, server_default="0"),
    # Quality signals from the enhancement pipeline
    Column("relevancy_score", Integer, nullable=True),
    Column("quality_score", Integer, nullable=True),
    Column("spelling_score", Integer, nullable=True),
    Column("spam_score", Integer, nullable=True),
    Column("safety_score", Integer, nullable=True),
    Column("sensation_score", Integer, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint(
        "(link IS NOT NULL OR text IS NOT NULL)",
        name="link_or_text_required",
    ),
    CheckConstraint("count_up >= 0", name="posts_count_up_non_negative"),
    CheckConstraint("count_down >= 0", name="posts_count_down_non_negative"),
)

# Ranked listing and the ranking pass keyset
Index("idx_posts_rank", posts_table.c.rank.desc(), posts_table.c.created_at.desc())
Index("idx_posts_created_at_id", posts_table.c.created_at.desc(), posts_table.c.id.desc())
Index("idx_posts_score", posts_table.c.score.desc())
Index("idx_posts_deleted_at", posts_table.c.deleted_at)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("post_id", UUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    Column(
        "parent_id", UUID, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    ),
    Column("author_id", UUID, nullable=False),
    Column("text", Text, nullable=False),
    # Vote aggregate
    Column("count_up", Integer, nullable=False, server_default="0"),
    Column("count_down", Integer, nullable=False, server_default="0"),
    Column("score", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("count_up >= 0", name="comments_count_up_non_negative"),
    CheckConstraint("count_down >= 0", name="comments_count_down_non_negative"),
)

Index("idx_comments_post_id", comments_table.c.post_id)
Index("idx_comments_parent_id", comments_table.c.parent_id)
Index("idx_comments_created_at", comments_table.c.created_at)

# ============================================================================
# VOTES TABLE
# ============================================================================
votes_table = Table(
    "votes",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, nullable=False),
    Column(
        "resource_type",
        Enum("post", "comment", name="resource_type", create_type=False),
        nullable=False,
    ),
    Column("resource_id", UUID, nullable=False),
    Column(
        "direction",
        Enum("up", "down", name="vote_direction", create_type=False),
        nullable=False,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("user_id", "resource_type", "resource_id", name="unique_vote"),
)

Index("idx_votes_resource", votes_table.c.resource_type, votes_table.c.resource_id)
