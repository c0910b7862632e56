"""
Time-off calendar repository for database operations.
"""

from datetime import date
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_

from portal.db.repositories.base_repository import BaseRepository
from portal.models.time_off import TimeOffEntry


class TimeOffRepository(BaseRepository[TimeOffEntry]):
    """Repository for time-off entries."""

    def __init__(self, session: AsyncSession):
        super().__init__(TimeOffEntry, session)

    async def list_overlapping(self, range_start: date, range_end: date) -> List[TimeOffEntry]:
        """Entries whose range overlaps [range_start, range_end]; NULL end_date is ongoing."""
        query = (
            select(TimeOffEntry)
            .where(
                and_(
                    TimeOffEntry.start_date <= range_end,
                    or_(TimeOffEntry.end_date.is_(None), TimeOffEntry.end_date >= range_start),
                )
            )
            .order_by(TimeOffEntry.start_date, TimeOffEntry.name)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
