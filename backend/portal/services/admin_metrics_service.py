"""
Admin dashboard metrics service.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from portal.services.base_service import BaseService
from portal.db.repositories.submission_repository import SubmissionRepository
from portal.db.repositories.user_repository import UserRepository
from portal.domain.entities import SubmissionStatus, UserRole
from portal.domain.status_mapping import storage_spellings
from portal.models.user import User
from portal.schemas.admin import AdminMetricsResponse

logger = logging.getLogger(__name__)


def month_window(now: datetime):
    """``[start of month, start of next month)`` in UTC for ``now``."""
    start = now.astimezone(timezone.utc).replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


class AdminMetricsService(BaseService):
    """Service for admin dashboard figures."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.submission_repo = SubmissionRepository(session)
        self.user_repo = UserRepository(session)

    async def get_metrics(self, actor: User, now: Optional[datetime] = None) -> AdminMetricsResponse:
        """
        Pending submissions, active contractors and the value approved this month.

        The approved value counts submissions approved during the current
        calendar month, including those already paid.
        """
        self._require_role(actor, UserRole.ADMIN)
        start, end = month_window(now or datetime.now(timezone.utc))

        pending = await self.submission_repo.count_by_statuses(storage_spellings(SubmissionStatus.PENDING))
        contractors = await self.user_repo.count(role=UserRole.CONTRACTOR, is_active=True)
        approved_value = await self.submission_repo.sum_approved_between(
            start,
            end,
            storage_spellings(SubmissionStatus.APPROVED) + storage_spellings(SubmissionStatus.PAID),
        )
        return AdminMetricsResponse(
            month=f"{start.year:04d}-{start.month:02d}",
            pending_submissions=pending,
            active_contractors=contractors,
            approved_value_this_month=approved_value.quantize(Decimal("0.01")),
        )
