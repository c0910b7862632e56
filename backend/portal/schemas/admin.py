"""
Admin dashboard Pydantic schemas.
"""

from decimal import Decimal
from pydantic import BaseModel, Field


class AdminMetricsResponse(BaseModel):
    """Headline numbers for the admin dashboard."""
    month: str = Field(..., description="Calendar month the value figure covers, YYYY-MM")
    pending_submissions: int
    active_contractors: int
    approved_value_this_month: Decimal
