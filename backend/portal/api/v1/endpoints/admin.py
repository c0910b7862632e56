"""
Admin dashboard endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.v1.middleware import require_actor
from portal.controllers.admin_controller import AdminController
from portal.db.session import get_db
from portal.models.user import User
from portal.schemas.admin import AdminMetricsResponse

router = APIRouter()


@router.get("/metrics", response_model=AdminMetricsResponse)
async def get_admin_metrics(
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> AdminMetricsResponse:
    """Dashboard figures: pending submissions, active contractors, value approved this month."""
    controller = AdminController(db)
    return await controller.get_metrics(actor)
