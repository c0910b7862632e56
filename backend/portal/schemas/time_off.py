"""
Time-off calendar Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date
from uuid import UUID

from portal.domain.entities import TimeOffScope, UserRole


class TimeOffBase(BaseModel):
    """Base time-off schema with common fields."""
    name: str = Field(..., min_length=1, max_length=255)
    type: str = Field("HOLIDAY", max_length=50)
    description: Optional[str] = Field(None, max_length=2000)
    start_date: date
    end_date: Optional[date] = None
    scope: TimeOffScope = TimeOffScope.ALL
    roles: List[UserRole] = []

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        if self.scope == TimeOffScope.ROLES and not self.roles:
            raise ValueError("roles are required when scope is ROLES")
        return self


class TimeOffCreate(TimeOffBase):
    """Schema for creating a time-off entry."""
    pass


class TimeOffUpdate(BaseModel):
    """Schema for updating a time-off entry (all fields optional)."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=2000)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    scope: Optional[TimeOffScope] = None
    roles: Optional[List[UserRole]] = None


class TimeOffResponse(BaseModel):
    """Schema for time-off response."""
    id: UUID
    name: str
    type: str
    description: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    scope: TimeOffScope
    roles: List[str] = []
    affected_count: int = 0


class TimeOffListResponse(BaseModel):
    """Schema for time-off list response."""
    items: List[TimeOffResponse]
    total: int


class BlockedDaysResponse(BaseModel):
    """Days the current user cannot bill in a window."""
    start: date
    end: date
    dates: List[date]
