"""Create submissions table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `submissions` table holding every form submission.
How:   UUID primary key generated by the application, JSONB image list,
       TIMESTAMP WITH TIME ZONE creation time.

Rollback: downgrade() drops the table (destructive).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the submissions table and its created_at index."""
    op.create_table(
        "submissions",
        sa.Column(
            "id",
            sa.Uuid(as_uuid=True),
            nullable=False,
            comment="Store-generated unique identifier",
        ),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("age", sa.Text(), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column(
            "images",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
            comment="Absolute URLs of the uploaded attachments, in receipt order",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this submission was stored (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # find_all() reads in insertion order
    op.create_index("idx_submissions_created_at", "submissions", ["created_at"])


def downgrade() -> None:
    """Drop the submissions table. All submissions are lost."""
    op.drop_index("idx_submissions_created_at", table_name="submissions")
    op.drop_table("submissions")
