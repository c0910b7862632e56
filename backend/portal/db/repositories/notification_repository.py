"""
Notification repository for database operations.
"""

from typing import List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func

from portal.db.repositories.base_repository import BaseRepository
from portal.models.notification import Notification


class NotificationRepository(BaseRepository[Notification]):
    """Repository for in-app notifications."""

    def __init__(self, session: AsyncSession):
        super().__init__(Notification, session)

    async def list_for_recipient(
        self,
        recipient_id: UUID,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> List[Notification]:
        query = select(Notification).where(Notification.recipient_id == recipient_id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        result = await self.session.execute(
            query.order_by(Notification.created_at.desc()).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def count_for_recipient(self, recipient_id: UUID, unread_only: bool = False) -> int:
        query = select(func.count()).select_from(Notification).where(Notification.recipient_id == recipient_id)
        if unread_only:
            query = query.where(Notification.is_read.is_(False))
        result = await self.session.execute(query)
        return result.scalar_one()

    async def count_unread(self, recipient_id: UUID) -> int:
        return await self.count_for_recipient(recipient_id, unread_only=True)

    async def mark_read(self, notification_id: UUID, recipient_id: UUID) -> bool:
        result = await self.session.execute(
            update(Notification)
            .where(Notification.id == notification_id, Notification.recipient_id == recipient_id)
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount > 0

    async def mark_all_read(self, recipient_id: UUID) -> int:
        result = await self.session.execute(
            update(Notification)
            .where(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        await self.session.flush()
        return result.rowcount
