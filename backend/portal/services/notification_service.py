"""
Notification service - turns lifecycle events into in-app notifications.
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from portal.services.base_service import BaseService
from portal.db.repositories.notification_repository import NotificationRepository
from portal.domain.entities import TransitionAction
from portal.domain.errors import NotFoundError
from portal.domain.events import SubmissionEvent
from portal.models.notification import Notification
from portal.schemas.notification import NotificationListResponse, NotificationResponse

logger = logging.getLogger(__name__)

_TITLES = {
    TransitionAction.APPROVE: "Submission approved",
    TransitionAction.REJECT: "Submission rejected",
    TransitionAction.REQUEST_CLARIFICATION: "Clarification requested",
    TransitionAction.RESUBMIT: "Clarification answered",
    TransitionAction.REJECT_TO_CONTRACTOR: "Submission returned to contractor",
    TransitionAction.MARK_PAID: "Payment sent",
}


def recipients_for(event: SubmissionEvent) -> List[UUID]:
    """
    Who hears about an event.

    Clarification requests go to the assigned manager. Every other outcome goes
    to the contractor, and a manager's clarification answer also goes to the
    admins who asked for it. The actor is never notified of their own action.
    """
    if event.action == TransitionAction.REQUEST_CLARIFICATION:
        candidates = [event.manager_id]
    elif event.action == TransitionAction.RESUBMIT:
        candidates = [event.contractor_id, *event.clarification_requested_by]
    else:
        candidates = [event.contractor_id]
    recipients = []
    for r in candidates:
        if r is not None and r != event.actor_id and r not in recipients:
            recipients.append(r)
    return recipients


class NotificationService(BaseService):
    """Service for in-app notifications."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.notification_repo = NotificationRepository(session)

    async def publish(self, event: SubmissionEvent) -> List[Notification]:
        """Store one notification per recipient. Does not commit."""
        title = _TITLES.get(event.action, event.name)
        message = event.note or f"Submission is now {event.to_status.value.replace('_', ' ').lower()}."
        created = []
        for recipient_id in recipients_for(event):
            created.append(
                await self.notification_repo.create(
                    recipient_id=recipient_id,
                    event_type=event.name,
                    submission_id=event.submission_id,
                    actor_id=event.actor_id,
                    title=title,
                    message=message,
                )
            )
        logger.info(
            "Published submission event",
            extra={
                "event": event.name,
                "submission_id": str(event.submission_id),
                "recipients": len(created),
            },
        )
        return created

    async def list_notifications(
        self,
        recipient_id: UUID,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> NotificationListResponse:
        items = await self.notification_repo.list_for_recipient(recipient_id, unread_only, skip, limit)
        return NotificationListResponse(
            items=[NotificationResponse.model_validate(n) for n in items],
            total=await self.notification_repo.count_for_recipient(recipient_id, unread_only),
        )

    async def unread_count(self, recipient_id: UUID) -> int:
        return await self.notification_repo.count_unread(recipient_id)

    async def mark_read(self, notification_id: UUID, recipient_id: UUID) -> None:
        if not await self.notification_repo.mark_read(notification_id, recipient_id):
            raise NotFoundError("Notification", notification_id)
        await self.session.commit()

    async def mark_all_read(self, recipient_id: UUID) -> int:
        count = await self.notification_repo.mark_all_read(recipient_id)
        await self.session.commit()
        return count
