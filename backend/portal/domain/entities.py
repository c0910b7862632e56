"""
Domain entities for the submission lifecycle and time-off calendar.

Plain data holders with construction-time validation only; all state changes
go through ``portal.domain.transitions``.
"""

import calendar
import enum
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple
from uuid import UUID

from portal.domain.errors import ValidationError


class SubmissionStatus(str, enum.Enum):
    """Submission lifecycle states."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    NEEDS_CLARIFICATION = "NEEDS_CLARIFICATION"
    PAID = "PAID"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({SubmissionStatus.REJECTED, SubmissionStatus.PAID})


class UserRole(str, enum.Enum):
    """Portal roles."""
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    CONTRACTOR = "CONTRACTOR"


class TransitionAction(str, enum.Enum):
    """Actions an approver can take on a submission."""
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    REQUEST_CLARIFICATION = "REQUEST_CLARIFICATION"
    RESUBMIT = "RESUBMIT"
    REJECT_TO_CONTRACTOR = "REJECT_TO_CONTRACTOR"
    MARK_PAID = "MARK_PAID"


class ContractorType(str, enum.Enum):
    """How a contractor is paid."""
    HOURLY = "HOURLY"
    FIXED = "FIXED"


class TimeOffScope(str, enum.Enum):
    """Who a time-off entry applies to."""
    ALL = "ALL"
    ROLES = "ROLES"


_WORK_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_work_period(value: Any) -> Tuple[int, int]:
    """Return ``(year, month)`` for a ``YYYY-MM`` string or a date."""
    if isinstance(value, (date, datetime)):
        return value.year, value.month
    match = _WORK_PERIOD_RE.match(str(value or "").strip())
    if not match:
        raise ValidationError("work_period", "must be a calendar month in YYYY-MM format")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError("work_period", "month must be between 01 and 12")
    return year, month


def period_bounds(work_period: str) -> Tuple[date, date]:
    """First and last day of a ``YYYY-MM`` work period."""
    year, month = parse_work_period(work_period)
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def _as_hours(name: str, value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        hours = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(name, "must be a number")
    if not hours.is_finite():
        raise ValidationError(name, "must be a number")
    if hours < 0:
        raise ValidationError(name, "must not be negative")
    return hours


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


@dataclass(frozen=True)
class Submission:
    """A contractor's timesheet for one work period."""

    id: UUID
    contractor_id: UUID
    work_period: str
    regular_hours: Decimal
    description: str
    status: SubmissionStatus = SubmissionStatus.PENDING
    overtime_hours: Decimal = Decimal("0")
    overtime_description: Optional[str] = None
    total_amount: Decimal = Decimal("0")
    submitted_at: Optional[datetime] = None
    manager_id: Optional[UUID] = None
    project_id: Optional[UUID] = None

    # Denormalised display fields, used by the filter layer
    contractor_name: str = ""
    contractor_email: str = ""
    project_name: str = ""
    manager_name: str = ""
    contractor_type: ContractorType = ContractorType.HOURLY

    rejection_reason: Optional[str] = None
    admin_note: Optional[str] = None
    manager_note: Optional[str] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[UUID] = None
    rejected_by: Optional[UUID] = None
    paid_at: Optional[datetime] = None
    invoice_number: Optional[str] = None

    def __post_init__(self):
        parse_work_period(self.work_period)
        regular = _as_hours("regular_hours", self.regular_hours)
        overtime = _as_hours("overtime_hours", self.overtime_hours)
        if regular <= 0:
            raise ValidationError("regular_hours", "must be greater than zero")
        if _blank(self.description):
            raise ValidationError("description", "is required")
        if overtime > 0 and _blank(self.overtime_description):
            raise ValidationError("overtime_description", "is required when overtime hours are logged")
        # Frozen dataclass: normalise numeric fields in place
        object.__setattr__(self, "regular_hours", regular)
        object.__setattr__(self, "overtime_hours", overtime)
        object.__setattr__(self, "total_amount", Decimal(str(self.total_amount or 0)))
        try:
            status = SubmissionStatus(str(getattr(self.status, "value", self.status)).upper())
        except ValueError:
            raise ValidationError("status", f"unknown status {self.status!r}")
        try:
            contractor_type = ContractorType(str(getattr(self.contractor_type, "value", self.contractor_type)).upper())
        except ValueError:
            raise ValidationError("contractor_type", "must be HOURLY or FIXED")
        object.__setattr__(self, "status", status)
        object.__setattr__(self, "contractor_type", contractor_type)

    @property
    def period_start(self) -> date:
        return period_bounds(self.work_period)[0]

    @property
    def period_end(self) -> date:
        return period_bounds(self.work_period)[1]

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.overtime_hours


@dataclass(frozen=True)
class TimeOffEntry:
    """A holiday or special time-off range on the admin calendar."""

    id: Optional[UUID]
    name: str
    start_date: date
    end_date: Optional[date] = None
    scope: TimeOffScope = TimeOffScope.ALL
    roles: Tuple[str, ...] = field(default_factory=tuple)
    type: str = "HOLIDAY"
    description: Optional[str] = None
    affected_count: int = 0

    def __post_init__(self):
        if _blank(self.name):
            raise ValidationError("name", "is required")
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValidationError("end_date", "must not be before start_date")
        try:
            scope = TimeOffScope(str(getattr(self.scope, "value", self.scope)).upper())
        except ValueError:
            raise ValidationError("scope", "must be ALL or ROLES")
        roles = tuple(
            str(getattr(r, "value", r)).strip().upper() for r in (self.roles or ()) if str(getattr(r, "value", r)).strip()
        )
        if scope == TimeOffScope.ROLES and not roles:
            raise ValidationError("roles", "at least one role is required when scope is ROLES")
        object.__setattr__(self, "scope", scope)
        object.__setattr__(self, "roles", roles)
