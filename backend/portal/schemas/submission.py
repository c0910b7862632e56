"""
Submission Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from decimal import Decimal

from portal.domain.entities import ContractorType, SubmissionStatus, TransitionAction


class SubmissionCreate(BaseModel):
    """Contractor's new submission for one work period."""
    work_period: str = Field(..., pattern=r"^\d{4}-\d{2}$", description="Calendar month YYYY-MM")
    regular_hours: Decimal = Field(..., gt=0)
    overtime_hours: Decimal = Field(default=Decimal("0"), ge=0)
    overtime_description: Optional[str] = Field(None, max_length=4000)
    description: str = Field(..., min_length=1, max_length=4000)
    project_id: Optional[UUID] = None


class TransitionRequest(BaseModel):
    """Generic status change request."""
    action: TransitionAction
    note: Optional[str] = Field(None, max_length=4000)

    @field_validator("action", mode="before")
    @classmethod
    def _normalize_action(cls, value):
        if isinstance(value, str):
            return value.strip().upper().replace("-", "_")
        return value


class NoteRequest(BaseModel):
    """Body for actions that carry a reason or note."""
    note: Optional[str] = Field(None, max_length=4000)


class SubmissionResponse(BaseModel):
    """Response schema for submission."""
    id: UUID
    contractor_id: UUID
    contractor_name: str = ""
    contractor_email: str = ""
    manager_id: Optional[UUID] = None
    manager_name: str = ""
    project_id: Optional[UUID] = None
    project_name: str = ""
    contractor_type: ContractorType
    work_period: str
    period_start: str
    period_end: str
    regular_hours: Decimal
    overtime_hours: Decimal
    overtime_description: Optional[str] = None
    description: str
    total_amount: Decimal
    status: SubmissionStatus
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    invoice_number: Optional[str] = None
    rejection_reason: Optional[str] = None
    admin_note: Optional[str] = None
    manager_note: Optional[str] = None
    allowed_actions: List[TransitionAction] = []


class SubmissionListResponse(BaseModel):
    """Schema for submission list response."""
    items: List[SubmissionResponse]
    total: int


class SubmissionStatusHistoryResponse(BaseModel):
    """Response schema for status history entry."""
    id: UUID
    submission_id: UUID
    from_status: Optional[SubmissionStatus] = None
    to_status: SubmissionStatus
    action: str
    note: Optional[str] = None
    changed_by: Optional[UUID] = None
    changed_by_name: Optional[str] = None
    changed_at: datetime


class PaymentResponse(BaseModel):
    """Response schema for payment."""
    id: UUID
    submission_id: UUID
    contractor_id: UUID
    admin_id: Optional[UUID] = None
    amount: Decimal
    invoice_number: Optional[str] = None
    status: str
    paid_at: datetime

    class Config:
        from_attributes = True
