"""
Payment repository for database operations.
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from portal.db.repositories.base_repository import BaseRepository
from portal.models.submission import Payment


class PaymentRepository(BaseRepository[Payment]):
    """Repository for payment operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Payment, session)

    async def get_by_submission(self, submission_id: UUID) -> Optional[Payment]:
        result = await self.session.execute(
            select(Payment).where(Payment.submission_id == submission_id)
        )
        return result.scalar_one_or_none()

    async def list_by_contractor(self, contractor_id: UUID) -> List[Payment]:
        result = await self.session.execute(
            select(Payment)
            .where(Payment.contractor_id == contractor_id)
            .order_by(Payment.paid_at.desc())
        )
        return list(result.scalars().all())
