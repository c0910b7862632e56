"""
Time-off calendar service with business logic.
"""

import logging
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.config import settings
from portal.services.base_service import BaseService
from portal.db.mappers import time_off_to_domain
from portal.db.repositories.time_off_repository import TimeOffRepository
from portal.db.repositories.user_repository import UserRepository
from portal.domain.calendar import blocked_dates, count_affected_contractors, entries_affecting
from portal.domain.entities import TimeOffEntry, UserRole, period_bounds
from portal.domain.errors import NotFoundError, ValidationError
from portal.domain.filters import parse_month
from portal.models.user import User
from portal.schemas.time_off import BlockedDaysResponse, TimeOffCreate, TimeOffResponse, TimeOffUpdate

logger = logging.getLogger(__name__)

# Longest window a blocked-days query may span
MAX_BLOCKED_WINDOW_DAYS = 366


def _to_response(entry: TimeOffEntry, affected_count: int) -> TimeOffResponse:
    return TimeOffResponse(
        id=entry.id,
        name=entry.name,
        type=entry.type,
        description=entry.description,
        start_date=entry.start_date,
        end_date=entry.end_date,
        scope=entry.scope,
        roles=list(entry.roles),
        affected_count=affected_count,
    )


class TimeOffService(BaseService):
    """Service for holiday and time-off calendar operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.time_off_repo = TimeOffRepository(session)
        self.user_repo = UserRepository(session)

    async def _responses(self, entries: List[TimeOffEntry]) -> List[TimeOffResponse]:
        contractors = await self.user_repo.list_by_role(UserRole.CONTRACTOR, active_only=True)
        return [_to_response(e, count_affected_contractors(e, contractors)) for e in entries]

    async def _load(self, entry_id: UUID) -> TimeOffEntry:
        row = await self.time_off_repo.get(entry_id)
        if not row:
            raise NotFoundError("TimeOffEntry", entry_id)
        return time_off_to_domain(row)

    async def create_entry(self, entry_data: TimeOffCreate, actor: User) -> TimeOffResponse:
        """Create a time-off entry (admin only)."""
        self._require_role(actor, UserRole.ADMIN)
        entry = TimeOffEntry(
            id=None,
            name=entry_data.name,
            type=entry_data.type,
            description=entry_data.description,
            start_date=entry_data.start_date,
            end_date=entry_data.end_date,
            scope=entry_data.scope,
            roles=tuple(entry_data.roles),
        )
        row = await self.time_off_repo.create(
            name=entry.name.strip(),
            type=entry.type,
            description=entry.description,
            start_date=entry.start_date,
            end_date=entry.end_date,
            scope=entry.scope,
            roles=list(entry.roles),
            created_by=actor.id,
        )
        await self.session.commit()
        logger.info("Time-off entry created", extra={"entry_id": str(row.id), "entry_name": row.name})
        return (await self._responses([time_off_to_domain(row)]))[0]

    async def get_entry(self, entry_id: UUID) -> TimeOffResponse:
        return (await self._responses([await self._load(entry_id)]))[0]

    async def update_entry(self, entry_id: UUID, entry_data: TimeOffUpdate, actor: User) -> TimeOffResponse:
        """Update a time-off entry (admin only); the merged entry must still be valid."""
        self._require_role(actor, UserRole.ADMIN)
        current = await self._load(entry_id)
        changes = entry_data.model_dump(exclude_unset=True)
        if "roles" in changes and changes["roles"] is not None:
            changes["roles"] = tuple(getattr(r, "value", r) for r in changes["roles"])
        merged = TimeOffEntry(
            id=current.id,
            name=changes.get("name", current.name),
            type=changes.get("type", current.type) or current.type,
            description=changes.get("description", current.description),
            start_date=changes.get("start_date", current.start_date) or current.start_date,
            end_date=changes.get("end_date", current.end_date),
            scope=changes.get("scope", current.scope) or current.scope,
            roles=changes.get("roles", current.roles) or (),
        )
        await self.time_off_repo.update(
            entry_id,
            name=merged.name.strip(),
            type=merged.type,
            description=merged.description,
            start_date=merged.start_date,
            end_date=merged.end_date,
            scope=merged.scope,
            roles=list(merged.roles),
        )
        await self.session.commit()
        logger.info("Time-off entry updated", extra={"entry_id": str(entry_id)})
        return (await self._responses([merged]))[0]

    async def delete_entry(self, entry_id: UUID, actor: User) -> None:
        self._require_role(actor, UserRole.ADMIN)
        if not await self.time_off_repo.delete(entry_id):
            raise NotFoundError("TimeOffEntry", entry_id)
        await self.session.commit()
        logger.info("Time-off entry deleted", extra={"entry_id": str(entry_id)})

    async def list_for_month(self, month: Optional[str] = None, today: Optional[date] = None) -> List[TimeOffResponse]:
        """Entries overlapping a calendar month; defaults to the current month."""
        parsed = parse_month(month) if month else None
        if month and parsed is None:
            raise ValidationError("month", f"unrecognised month {month!r}")
        if parsed is None:
            today = today or date.today()
            parsed = (today.year, today.month)
        start, end = period_bounds(f"{parsed[0]:04d}-{parsed[1]:02d}")
        rows = await self.time_off_repo.list_overlapping(start, end)
        return await self._responses(entries_affecting((time_off_to_domain(r) for r in rows), start, end))

    async def list_upcoming(self, days: Optional[int] = None, today: Optional[date] = None) -> List[TimeOffResponse]:
        """Entries overlapping the next ``days`` days, including today."""
        today = today or date.today()
        horizon = today + timedelta(days=days if days is not None else settings.UPCOMING_TIME_OFF_DAYS)
        rows = await self.time_off_repo.list_overlapping(today, horizon)
        return await self._responses(entries_affecting((time_off_to_domain(r) for r in rows), today, horizon))

    async def blocked_days(self, actor: User, start: date, end: date) -> BlockedDaysResponse:
        """Days in ``[start, end]`` on which ``actor`` cannot log work."""
        if end < start:
            raise ValidationError("end", "must not be before start")
        if (end - start).days > MAX_BLOCKED_WINDOW_DAYS:
            raise ValidationError("end", f"window may span at most {MAX_BLOCKED_WINDOW_DAYS} days")
        rows = await self.time_off_repo.list_overlapping(start, end)
        days = blocked_dates((time_off_to_domain(r) for r in rows), actor.role, start, end)
        return BlockedDaysResponse(start=start, end=end, dates=sorted(days))
