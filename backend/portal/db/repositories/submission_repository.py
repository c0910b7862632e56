"""
Submission repository for database operations.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional, List, Sequence, Tuple
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import func, select, update
from sqlalchemy.orm import selectinload

from portal.db.repositories.base_repository import BaseRepository
from portal.models.submission import Submission


class SubmissionRepository(BaseRepository[Submission]):
    """Repository for submission operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Submission, session)

    def _base_query(self):
        """Base query with contractor, manager and project eager loaded."""
        return select(Submission).options(
            selectinload(Submission.contractor),
            selectinload(Submission.manager),
            selectinload(Submission.project),
        )

    async def get(self, id: UUID) -> Optional[Submission]:
        """Get submission by ID, always reading the current row."""
        result = await self.session.execute(
            self._base_query()
            .where(Submission.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_status(self, id: UUID) -> Optional[str]:
        """Current stored status, bypassing the identity map."""
        result = await self.session.execute(
            select(Submission.status).where(Submission.id == id)
        )
        return result.scalar_one_or_none()

    async def list_all(self, skip: int = 0, limit: Optional[int] = None) -> List[Submission]:
        result = await self.session.execute(
            self._base_query()
            .order_by(Submission.submitted_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_for_contractor(self, contractor_id: UUID, skip: int = 0, limit: Optional[int] = None) -> List[Submission]:
        """Submissions created by one contractor."""
        result = await self.session.execute(
            self._base_query()
            .where(Submission.contractor_id == contractor_id)
            .order_by(Submission.submitted_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_for_manager(self, manager_id: UUID, skip: int = 0, limit: Optional[int] = None) -> List[Submission]:
        """Submissions assigned to one manager."""
        result = await self.session.execute(
            self._base_query()
            .where(Submission.manager_id == manager_id)
            .order_by(Submission.submitted_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def get_status_and_paid_at(self, id: UUID) -> Tuple[Optional[str], Optional[datetime]]:
        """Current stored status and ``paid_at``, bypassing the identity map."""
        result = await self.session.execute(
            select(Submission.status, Submission.paid_at).where(Submission.id == id)
        )
        row = result.one_or_none()
        return (row.status, row.paid_at) if row else (None, None)

    async def list_invoice_numbers(self, year_prefix: str) -> List[str]:
        """Invoice numbers already issued that start with ``year_prefix``."""
        result = await self.session.execute(
            select(Submission.invoice_number).where(Submission.invoice_number.like(f"{year_prefix}%"))
        )
        return [n for n in result.scalars().all() if n]

    async def count_by_statuses(self, statuses: Sequence[str]) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(Submission)
            .where(func.lower(Submission.status).in_(list(statuses)))
        )
        return result.scalar_one()

    async def sum_approved_between(self, start: datetime, end: datetime, statuses: Sequence[str]) -> Decimal:
        """Total amount of submissions in ``statuses`` approved within ``[start, end)``."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(Submission.total_amount), 0))
            .where(
                func.lower(Submission.status).in_(list(statuses)),
                Submission.approved_at >= start,
                Submission.approved_at < end,
            )
        )
        return Decimal(str(result.scalar_one()))

    async def list_statuses_for_period(self, contractor_id: UUID, work_period: str) -> List[str]:
        """Stored statuses of a contractor's submissions for one work period."""
        result = await self.session.execute(
            select(Submission.status)
            .where(Submission.contractor_id == contractor_id, Submission.work_period == work_period)
        )
        return list(result.scalars().all())

    async def compare_and_set(
        self,
        id: UUID,
        expected_statuses: Sequence[str],
        values: Dict[str, Any],
        require_unpaid: bool = False,
    ) -> bool:
        """
        Apply ``values`` only if the stored status is still one of ``expected_statuses``.

        ``require_unpaid`` also demands ``paid_at IS NULL``, since an ``approved``
        row with ``paid_at`` set reads as paid.
        Returns False when another writer changed the status first.
        """
        conditions = [Submission.id == id, func.lower(Submission.status).in_(list(expected_statuses))]
        if require_unpaid:
            conditions.append(Submission.paid_at.is_(None))
        result = await self.session.execute(
            update(Submission)
            .where(*conditions)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount == 1
