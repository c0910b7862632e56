"""
Submission status history repository for database operations.
"""

from typing import Optional, Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from portal.db.repositories.base_repository import BaseRepository
from portal.models.submission import SubmissionStatusHistory


class SubmissionStatusHistoryRepository(BaseRepository[SubmissionStatusHistory]):
    """Repository for submission status history operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(SubmissionStatusHistory, session)

    async def list_by_submission(self, submission_id: UUID):
        """List status history for a submission, oldest first."""
        result = await self.session.execute(
            select(SubmissionStatusHistory)
            .options(selectinload(SubmissionStatusHistory.changed_by_user))
            .where(SubmissionStatusHistory.submission_id == submission_id)
            .order_by(SubmissionStatusHistory.changed_at)
        )
        return list(result.scalars().all())

    async def latest_changed_by(self, submission_id: UUID, to_statuses: Sequence[str]) -> Optional[UUID]:
        """Who made the most recent change into one of ``to_statuses``."""
        result = await self.session.execute(
            select(SubmissionStatusHistory.changed_by)
            .where(
                SubmissionStatusHistory.submission_id == submission_id,
                func.lower(SubmissionStatusHistory.to_status).in_(list(to_statuses)),
            )
            .order_by(SubmissionStatusHistory.changed_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
