"""initial_schema

Create the Tally schema:
- Posts (vote aggregate, ranking state, quality signals)
- Comments (threaded by parent_id)
- Votes (one row per user and resource, up or down)

Users live in the identity provider; author and voter IDs are not foreign keys.

Revision ID: 3f1c9a7d2b60
Revises:
Create Date: 2026-10-18 09:12:44.318204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b60"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Enable required extensions
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE resource_type AS ENUM ('post', 'comment');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE vote_direction AS ENUM ('up', 'down');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # POSTS table
    # ========================================================================
    op.create_table(
        "posts",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(length=300), nullable=False),
        sa.Column("link", sa.Text(), nullable=True),
        sa.Column("text", sa.Text(), nullable=True),
        sa.Column("count_up", sa.Integer(), server_default="0", nullable=False),
        sa.Column("count_down", sa.Integer(), server_default="0", nullable=False),
        sa.Column("score", sa.Integer(), server_default="0", nullable=False),
        sa.Column("comment_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("time_score", sa.Integer(), server_default="100", nullable=False),
        sa.Column("rank", sa.Float(), server_default="0", nullable=False),
        sa.Column("relevancy_score", sa.Integer(), nullable=True),
        sa.Column("quality_score", sa.Integer(), nullable=True),
        sa.Column("spelling_score", sa.Integer(), nullable=True),
        sa.Column("spam_score", sa.Integer(), nullable=True),
        sa.Column("safety_score", sa.Integer(), nullable=True),
        sa.Column("sensation_score", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("deleted_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "(link IS NOT NULL OR text IS NOT NULL)",
            name="link_or_text_required",
        ),
        sa.CheckConstraint("count_up >= 0", name="posts_count_up_non_negative"),
        sa.CheckConstraint("count_down >= 0", name="posts_count_down_non_negative"),
    )
    op.create_index(
        "idx_posts_rank", "posts", [sa.text("rank DESC"), sa.text("created_at DESC")]
    )
    op.create_index(
        "idx_posts_created_at_id",
        "posts",
        [sa.text("created_at DESC"), sa.text("id DESC")],
    )
    op.create_index("idx_posts_score", "posts", [sa.text("score DESC")])
    op.create_index("idx_posts_deleted_at", "posts", ["deleted_at"])

    # ========================================================================
    # COMMENTS table
    # ========================================================================
    op.create_table(
        "comments",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("post_id", sa.UUID(), nullable=False),
        sa.Column("parent_id", sa.UUID(), nullable=True),
        sa.Column("author_id", sa.UUID(), nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("count_up", sa.Integer(), server_default="0", nullable=False),
        sa.Column("count_down", sa.Integer(), server_default="0", nullable=False),
        sa.Column("score", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("deleted_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["post_id"], ["posts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["parent_id"], ["comments.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("count_up >= 0", name="comments_count_up_non_negative"),
        sa.CheckConstraint(
            "count_down >= 0", name="comments_count_down_non_negative"
        ),
    )
    op.create_index("idx_comments_post_id", "comments", ["post_id"])
    op.create_index("idx_comments_parent_id", "comments", ["parent_id"])
    op.create_index("idx_comments_created_at", "comments", ["created_at"])

    # ========================================================================
    # VOTES table
    # ========================================================================
    op.create_table(
        "votes",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column(
            "resource_type",
            postgresql.ENUM("post", "comment", name="resource_type", create_type=False),
            nullable=False,
        ),
        sa.Column("resource_id", sa.UUID(), nullable=False),
        sa.Column(
            "direction",
            postgresql.ENUM("up", "down", name="vote_direction", create_type=False),
            nullable=False,
        ),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "resource_type", "resource_id", name="unique_vote"
        ),
    )
    op.create_index("idx_votes_resource", "votes", ["resource_type", "resource_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("idx_votes_resource", table_name="votes")
    op.drop_table("votes")

    op.drop_index("idx_comments_created_at", table_name="comments")
    op.drop_index("idx_comments_parent_id", table_name="comments")
    op.drop_index("idx_comments_post_id", table_name="comments")
    op.drop_table("comments")

    op.drop_index("idx_posts_deleted_at", table_name="posts")
    op.drop_index("idx_posts_score", table_name="posts")
    op.drop_index("idx_posts_created_at_id", table_name="posts")
    op.drop_index("idx_posts_rank", table_name="posts")
    op.drop_table("posts")

    op.execute("DROP TYPE IF EXISTS vote_direction")
    op.execute("DROP TYPE IF EXISTS resource_type")
