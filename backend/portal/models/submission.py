"""
Submission models for monthly timesheets, their audit trail and payments.
"""

from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Numeric, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid

from portal.db.base import Base, utcnow
from portal.domain.entities import ContractorType


class Submission(Base):
    """One contractor timesheet for one work period (YYYY-MM).

    ``status`` holds the storage spelling from ``portal.domain.status_mapping``.
    """

    __tablename__ = "submissions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    contractor_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    manager_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True)
    project_id = Column(UUID(as_uuid=True), ForeignKey("projects.id"), nullable=True, index=True)

    work_period = Column(String(7), nullable=False, index=True)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    project_name = Column(String(255), nullable=True)
    description = Column(Text, nullable=False)
    regular_hours = Column(Numeric(10, 2), nullable=False, default=0)
    overtime_hours = Column(Numeric(10, 2), nullable=False, default=0)
    overtime_description = Column(Text, nullable=True)
    contractor_type = Column(SQLEnum(ContractorType), nullable=False, default=ContractorType.HOURLY)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)

    status = Column(String(32), nullable=False, default="pending", index=True)
    rejection_reason = Column(Text, nullable=True)
    admin_note = Column(Text, nullable=True)
    manager_note = Column(Text, nullable=True)
    approved_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    rejected_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)

    submitted_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    invoice_number = Column(String(32), nullable=True, unique=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    contractor = relationship("User", foreign_keys=[contractor_id])
    manager = relationship("User", foreign_keys=[manager_id])
    project = relationship("Project", foreign_keys=[project_id])
    status_history = relationship(
        "SubmissionStatusHistory",
        back_populates="submission",
        cascade="all, delete-orphan",
        order_by="SubmissionStatusHistory.changed_at",
    )
    payments = relationship("Payment", back_populates="submission")


class SubmissionStatusHistory(Base):
    """Audit trail for submission status changes."""

    __tablename__ = "submission_status_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    submission_id = Column(UUID(as_uuid=True), ForeignKey("submissions.id", ondelete="CASCADE"), nullable=False, index=True)
    from_status = Column(String(32), nullable=True)
    to_status = Column(String(32), nullable=False)
    action = Column(String(32), nullable=False)
    note = Column(Text, nullable=True)
    changed_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True)
    changed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    submission = relationship("Submission", back_populates="status_history")
    changed_by_user = relationship("User", foreign_keys=[changed_by])


class Payment(Base):
    """Payment issued when an approved submission is marked paid."""

    __tablename__ = "payments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    submission_id = Column(UUID(as_uuid=True), ForeignKey("submissions.id"), nullable=False, unique=True, index=True)
    contractor_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    admin_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    invoice_number = Column(String(32), nullable=True, index=True)
    status = Column(String(16), nullable=False, default="PAID")
    paid_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    submission = relationship("Submission", back_populates="payments")
