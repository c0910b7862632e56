"""
Time-off calendar controller.
"""

from datetime import date
from typing import Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from portal.controllers.base_controller import BaseController
from portal.services.time_off_service import TimeOffService
from portal.models.user import User
from portal.schemas.time_off import (
    BlockedDaysResponse,
    TimeOffCreate,
    TimeOffListResponse,
    TimeOffResponse,
    TimeOffUpdate,
)


class TimeOffController(BaseController):
    """Controller for time-off calendar operations."""

    def __init__(self, session: AsyncSession):
        self.time_off_service = TimeOffService(session)

    async def create_entry(self, entry_data: TimeOffCreate, actor: User) -> TimeOffResponse:
        return await self.time_off_service.create_entry(entry_data, actor)

    async def get_entry(self, entry_id: UUID) -> TimeOffResponse:
        return await self.time_off_service.get_entry(entry_id)

    async def update_entry(self, entry_id: UUID, entry_data: TimeOffUpdate, actor: User) -> TimeOffResponse:
        return await self.time_off_service.update_entry(entry_id, entry_data, actor)

    async def delete_entry(self, entry_id: UUID, actor: User) -> None:
        await self.time_off_service.delete_entry(entry_id, actor)

    async def list_for_month(self, month: Optional[str] = None) -> TimeOffListResponse:
        items = await self.time_off_service.list_for_month(month)
        return TimeOffListResponse(items=items, total=len(items))

    async def list_upcoming(self, days: Optional[int] = None) -> TimeOffListResponse:
        items = await self.time_off_service.list_upcoming(days)
        return TimeOffListResponse(items=items, total=len(items))

    async def blocked_days(self, actor: User, start: date, end: date) -> BlockedDaysResponse:
        return await self.time_off_service.blocked_days(actor, start, end)
