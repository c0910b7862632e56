"""
Admin dashboard controller.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from portal.controllers.base_controller import BaseController
from portal.services.admin_metrics_service import AdminMetricsService
from portal.models.user import User
from portal.schemas.admin import AdminMetricsResponse


class AdminController(BaseController):
    """Controller for admin dashboard operations."""

    def __init__(self, session: AsyncSession):
        self.metrics_service = AdminMetricsService(session)

    async def get_metrics(self, actor: User) -> AdminMetricsResponse:
        return await self.metrics_service.get_metrics(actor)
