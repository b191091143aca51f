"""
FormDrop Backend: Submission Repository
=========================================

What:  Append-only access to the submissions table.
How:   Wraps one AsyncSession (one per request, from get_db_session).
Who:   SubmissionService is the only caller.

Operations:
    save(record)  → INSERT + COMMIT, returns the stored row
    find_all()    → SELECT * ORDER BY created_at

There is deliberately no update or delete.
"""

import logging
from typing import List

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.exceptions import StorageError
from app.models.submission import Submission
from app.schemas.submission import SubmissionRecord

logger = logging.getLogger(__name__)


class SubmissionRepository:
    """Store adapter for Submission rows."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save(self, record: SubmissionRecord) -> Submission:
        """
        Insert one submission and commit it right away.

        Why commit here (not at the end of the request):
            The notification step runs after this call. If it fails, the
            request ends with an error and get_db_session() rolls back; an
            uncommitted insert would vanish with it.

        Raises:
            StorageError if the store is unreachable or rejects the write.
        """
        submission = Submission(
            name=record.name,
            age=record.age,
            message=record.message,
            email=record.email,
            images=list(record.images),
        )
        try:
            self.session.add(submission)
            await self.session.commit()
            await self.session.refresh(submission)
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to save submission: %s", str(e))
            await self._safe_rollback()
            raise StorageError(
                message="Failed to save submission",
                context={"error_type": type(e).__name__},
            )

        logger.info("Submission stored: %s (%d images)", submission.id, len(submission.images))
        return submission

    async def find_all(self) -> List[Submission]:
        """
        Return every stored submission in insertion order.

        Raises:
            StorageError("Failed to fetch data") on any store error.
        """
        try:
            result = await self.session.execute(
                select(Submission).order_by(Submission.created_at)
            )
            return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            logger.error("Failed to fetch submissions: %s", str(e))
            raise StorageError(
                message="Failed to fetch data",
                context={"error_type": type(e).__name__},
            )

    async def _safe_rollback(self) -> None:
        try:
            await self.session.rollback()
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Rollback after failed save also failed: %s", str(e))


def get_repository(db: AsyncSession = Depends(get_db_session)) -> SubmissionRepository:
    """FastAPI dependency: a repository bound to the request's session."""
    return SubmissionRepository(db)
