"""
Notification controller.
"""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from portal.controllers.base_controller import BaseController
from portal.services.notification_service import NotificationService
from portal.models.user import User
from portal.schemas.notification import NotificationListResponse, UnreadCountResponse


class NotificationController(BaseController):
    """Controller for the current user's notifications."""

    def __init__(self, session: AsyncSession):
        self.notification_service = NotificationService(session)

    async def list_notifications(
        self,
        actor: User,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> NotificationListResponse:
        return await self.notification_service.list_notifications(actor.id, unread_only, skip, limit)

    async def unread_count(self, actor: User) -> UnreadCountResponse:
        return UnreadCountResponse(count=await self.notification_service.unread_count(actor.id))

    async def mark_read(self, notification_id: UUID, actor: User) -> None:
        await self.notification_service.mark_read(notification_id, actor.id)

    async def mark_all_read(self, actor: User) -> UnreadCountResponse:
        await self.notification_service.mark_all_read(actor.id)
        return UnreadCountResponse(count=0)
