"""
Notification Pydantic schemas.
"""

from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class NotificationResponse(BaseModel):
    """Response schema for notification."""
    id: UUID
    event_type: str
    submission_id: Optional[UUID] = None
    actor_id: Optional[UUID] = None
    title: str
    message: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class NotificationListResponse(BaseModel):
    items: List[NotificationResponse]
    total: int


class UnreadCountResponse(BaseModel):
    count: int
