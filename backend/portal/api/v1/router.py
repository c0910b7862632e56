"""
API v1 router that aggregates all endpoint routers.
All routes require an authenticated actor except health.
"""

from fastapi import APIRouter, Depends
from portal.api.v1.middleware import require_actor

from portal.api.v1.endpoints import (
    admin,
    health,
    submissions,
    time_off,
    notifications,
    users,
)

api_router = APIRouter()

# Public routes (no authentication required)
api_router.include_router(health.router, tags=["health"])

# Protected routes (authentication required for all endpoints)
# Authentication is enforced via dependency injection at the router level
api_router.include_router(
    submissions.router,
    prefix="/submissions",
    tags=["submissions"],
    dependencies=[Depends(require_actor)],
)
api_router.include_router(
    time_off.router,
    prefix="/time-off",
    tags=["time-off"],
    dependencies=[Depends(require_actor)],
)
api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["notifications"],
    dependencies=[Depends(require_actor)],
)
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_actor)],
)
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_actor)],
)
