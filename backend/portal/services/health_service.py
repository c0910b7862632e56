"""
Health service.
Reports uptime and database reachability.
"""

import logging
import time

from sqlalchemy.exc import SQLAlchemyError

from portal.core.config import settings
from portal.services.base_service import BaseService
from portal.db.repositories.health_repository import HealthRepository
from portal.schemas.health import HealthResponse

logger = logging.getLogger(__name__)


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self):
        self.start_time = time.time()

    async def get_health(self) -> HealthResponse:
        """
        Get system health status.

        Returns:
            HealthResponse with status, uptime, and checks
        """
        uptime_seconds = int(time.time() - self.start_time)
        uptime_str = f"PT{uptime_seconds}S"  # ISO 8601 duration format

        checks = {}

        # Resolve the session factory at call time so tests can rebind it
        from portal.db import session as db_session

        if db_session.async_session_maker is None:
            db_session.create_sessionmaker()

        try:
            async with db_session.async_session_maker() as session:
                repo = HealthRepository(session=session)
                db_status = await repo.check_database()
                checks["database"] = "ok" if db_status else "error"
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database health check failed", extra={"error": str(e)})
            checks["database"] = f"error: {str(e)}"

        status = "ok" if all(check == "ok" for check in checks.values()) else "degraded"

        return HealthResponse(
            status=status,
            version=settings.VERSION,
            uptime=uptime_str,
            checks=checks,
        )
