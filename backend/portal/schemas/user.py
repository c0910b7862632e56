"""
User access-management schemas.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from decimal import Decimal
from uuid import UUID

from portal.domain.entities import ContractorType, UserRole


class UserCreate(BaseModel):
    """Schema for creating a portal user."""
    full_name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    role: UserRole = UserRole.CONTRACTOR
    manager_id: Optional[UUID] = None
    contractor_type: ContractorType = ContractorType.HOURLY
    hourly_rate: Optional[Decimal] = Field(None, ge=0)
    overtime_rate: Optional[Decimal] = Field(None, ge=0)
    monthly_rate: Optional[Decimal] = Field(None, ge=0)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.strip().lower()


class UserActiveUpdate(BaseModel):
    """Enable or disable portal access."""
    is_active: bool


class UserResponse(BaseModel):
    """Response schema for user."""
    id: UUID
    full_name: str
    email: str
    role: UserRole
    is_active: bool
    manager_id: Optional[UUID] = None
    contractor_type: ContractorType

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    items: List[UserResponse]
    total: int
