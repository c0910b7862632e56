"""
User access-management endpoints (admin only).
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from portal.api.v1.middleware import require_actor
from portal.controllers.user_controller import UserController
from portal.db.session import get_db
from portal.models.user import User
from portal.schemas.user import UserActiveUpdate, UserCreate, UserListResponse, UserResponse

router = APIRouter()


@router.get("", response_model=UserListResponse)
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> UserListResponse:
    controller = UserController(db)
    return await controller.list_users(actor, skip=skip, limit=limit)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    controller = UserController(db)
    return await controller.create_user(user_data, actor)


@router.patch("/{user_id}/active", response_model=UserResponse)
async def set_user_active(
    user_id: UUID,
    update: UserActiveUpdate,
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> UserResponse:
    """Enable or disable a user's portal access."""
    controller = UserController(db)
    return await controller.set_active(user_id, update.is_active, actor)
