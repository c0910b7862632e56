"""
User access-management controller.
"""

from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from portal.controllers.base_controller import BaseController
from portal.services.user_service import UserService
from portal.models.user import User
from portal.schemas.user import UserCreate, UserListResponse, UserResponse


class UserController(BaseController):
    """Controller for user operations."""

    def __init__(self, session: AsyncSession):
        self.user_service = UserService(session)

    async def create_user(self, user_data: UserCreate, actor: User) -> UserResponse:
        return await self.user_service.create_user(user_data, actor)

    async def list_users(self, actor: User, skip: int = 0, limit: int = 100) -> UserListResponse:
        return await self.user_service.list_users(actor, skip=skip, limit=limit)

    async def set_active(self, user_id: UUID, is_active: bool, actor: User) -> UserResponse:
        return await self.user_service.set_active(user_id, is_active, actor)
