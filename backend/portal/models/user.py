"""
User model: portal actors and their access.
"""

from sqlalchemy import Column, String, Boolean, Numeric, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid

from portal.db.base import Base, utcnow
from portal.domain.entities import ContractorType, UserRole


class User(Base):
    """Admin, manager or contractor account."""

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    full_name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.CONTRACTOR, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    manager_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True)

    # Contract terms (contractors only)
    contractor_type = Column(SQLEnum(ContractorType), nullable=False, default=ContractorType.HOURLY)
    hourly_rate = Column(Numeric(12, 2), nullable=True)
    overtime_rate = Column(Numeric(12, 2), nullable=True)
    monthly_rate = Column(Numeric(12, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    manager = relationship("User", remote_side=[id], foreign_keys=[manager_id])
