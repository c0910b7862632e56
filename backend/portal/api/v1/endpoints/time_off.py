"""
Time-off calendar API endpoints.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from portal.api.v1.middleware import require_actor
from portal.controllers.time_off_controller import TimeOffController
from portal.db.session import get_db
from portal.models.user import User
from portal.schemas.time_off import (
    BlockedDaysResponse,
    TimeOffCreate,
    TimeOffListResponse,
    TimeOffResponse,
    TimeOffUpdate,
)

router = APIRouter()


@router.get("", response_model=TimeOffListResponse)
async def list_time_off(
    month: Optional[str] = Query(None, description="YYYY-MM; defaults to the current month"),
    db: AsyncSession = Depends(get_db),
) -> TimeOffListResponse:
    """List time-off entries overlapping a month."""
    controller = TimeOffController(db)
    return await controller.list_for_month(month)


@router.get("/upcoming", response_model=TimeOffListResponse)
async def list_upcoming_time_off(
    days: Optional[int] = Query(None, ge=0, le=366),
    db: AsyncSession = Depends(get_db),
) -> TimeOffListResponse:
    controller = TimeOffController(db)
    return await controller.list_upcoming(days)


@router.get("/me/blocked-days", response_model=BlockedDaysResponse)
async def get_my_blocked_days(
    start: date = Query(...),
    end: date = Query(...),
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> BlockedDaysResponse:
    """Days in the window the current user cannot log work."""
    controller = TimeOffController(db)
    return await controller.blocked_days(actor, start, end)


@router.post("", response_model=TimeOffResponse, status_code=status.HTTP_201_CREATED)
async def create_time_off(
    entry_data: TimeOffCreate,
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> TimeOffResponse:
    controller = TimeOffController(db)
    return await controller.create_entry(entry_data, actor)


@router.get("/{entry_id}", response_model=TimeOffResponse)
async def get_time_off(
    entry_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> TimeOffResponse:
    controller = TimeOffController(db)
    return await controller.get_entry(entry_id)


@router.put("/{entry_id}", response_model=TimeOffResponse)
async def update_time_off(
    entry_id: UUID,
    entry_data: TimeOffUpdate,
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> TimeOffResponse:
    controller = TimeOffController(db)
    return await controller.update_entry(entry_id, entry_data, actor)


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_off(
    entry_id: UUID,
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
):
    controller = TimeOffController(db)
    await controller.delete_entry(entry_id, actor)
