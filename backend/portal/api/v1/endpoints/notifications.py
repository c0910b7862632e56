"""
Notification API endpoints for the current user.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from portal.api.v1.middleware import require_actor
from portal.controllers.notification_controller import NotificationController
from portal.db.session import get_db
from portal.models.user import User
from portal.schemas.notification import NotificationListResponse, UnreadCountResponse

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread_only: bool = Query(False),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> NotificationListResponse:
    controller = NotificationController(db)
    return await controller.list_notifications(actor, unread_only, skip, limit)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> UnreadCountResponse:
    controller = NotificationController(db)
    return await controller.unread_count(actor)


@router.post("/read-all", response_model=UnreadCountResponse)
async def mark_all_notifications_read(
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> UnreadCountResponse:
    controller = NotificationController(db)
    return await controller.mark_all_read(actor)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_notification_read(
    notification_id: UUID,
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
):
    controller = NotificationController(db)
    await controller.mark_read(notification_id, actor)
