"""
Time-off calendar model for holidays and special days off.
"""

from sqlalchemy import Column, String, Text, Date, DateTime, JSON, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
import uuid

from portal.db.base import Base, utcnow
from portal.domain.entities import TimeOffScope


class TimeOffEntry(Base):
    """Holiday or time-off range; ``end_date`` NULL means ongoing."""

    __tablename__ = "time_off_entries"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False, default="HOLIDAY")
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=True, index=True)
    scope = Column(SQLEnum(TimeOffScope), nullable=False, default=TimeOffScope.ALL)
    roles = Column(JSON, nullable=False, default=list)
    created_by = Column(UUID(as_uuid=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
