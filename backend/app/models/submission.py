"""
FormDrop Backend: Submission SQLAlchemy Model
===============================================

What:  ORM model representing the `submissions` table.
Why:   Maps Python objects to rows for type-safe database operations.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Written by SubmissionRepository, read by the query endpoint.

Table Design:
    - UUID primary key generated in Python (works on PostgreSQL and SQLite)
    - name / age / message / email stored verbatim as text; age is NOT numeric
    - images: JSON array of absolute attachment URLs, in upload order
      (JSONB on PostgreSQL)
    - created_at: UTC with timezone, assigned at insert
"""

import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import JSON, DateTime, Index, Text, Uuid, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Submission(Base):
    """
    A stored form submission.

    Lifecycle:
        Created once per successful intake, never updated, never deleted.
    """

    __tablename__ = "submissions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Store-generated unique identifier",
    )

    name: Mapped[str] = mapped_column(Text, nullable=False)

    # Free text: "30", "thirty" and "30 years" are all accepted
    age: Mapped[str] = mapped_column(Text, nullable=False)

    message: Mapped[str] = mapped_column(Text, nullable=False)

    # Not validated as an address, and not length-capped
    email: Mapped[str] = mapped_column(Text, nullable=False)

    images: Mapped[List[str]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        comment="Absolute URLs of the uploaded attachments, in receipt order",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When this submission was stored (UTC)",
    )

    __table_args__ = (
        Index("idx_submissions_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<Submission(id={self.id}, images={len(self.images or [])}, "
            f"created_at='{self.created_at}')>"
        )
