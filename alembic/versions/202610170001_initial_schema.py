"""Preference records and roommate posts

Revision ID: 202610170001
Revises:
Create Date: 2026-10-17 00:01:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "202610170001"
down_revision = None
branch_labels = None
depends_on = None

post_status_enum = sa.Enum(
    "looking",
    "matched",
    "inactive",
    name="post_status",
)


def upgrade() -> None:
    op.create_table(
        "preference_records",
        sa.Column("owner_id", sa.String(length=36), primary_key=True),
        sa.Column("answers", sa.JSON(), nullable=False),
        sa.Column("is_complete", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "roommate_posts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("owner_id", sa.String(length=36), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("status", post_status_enum, nullable=False, server_default="looking"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_roommate_posts_owner_id", "roommate_posts", ["owner_id"])
    op.create_index(
        "ix_roommate_posts_status_created_at", "roommate_posts", ["status", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_roommate_posts_status_created_at", table_name="roommate_posts")
    op.drop_index("ix_roommate_posts_owner_id", table_name="roommate_posts")
    op.drop_table("roommate_posts")
    op.drop_table("preference_records")
    post_status_enum.drop(op.get_bind(), checkfirst=True)
