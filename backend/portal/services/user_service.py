"""
User access-management service.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from portal.services.base_service import BaseService
from portal.db.repositories.user_repository import UserRepository
from portal.domain.entities import UserRole
from portal.domain.errors import NotFoundError, ValidationError
from portal.models.user import User
from portal.schemas.user import UserCreate, UserListResponse, UserResponse

logger = logging.getLogger(__name__)


class UserService(BaseService):
    """Service for user operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)

    async def get_actor(self, user_id: UUID):
        """User row for an authenticated id, or None."""
        return await self.user_repo.get(user_id)

    async def create_user(self, user_data: UserCreate, actor: User) -> UserResponse:
        self._require_role(actor, UserRole.ADMIN)
        if await self.user_repo.get_by_email(user_data.email):
            raise ValidationError("email", f"{user_data.email} is already registered")
        if user_data.manager_id:
            manager = await self.user_repo.get(user_data.manager_id)
            if not manager or manager.role not in (UserRole.MANAGER, UserRole.ADMIN):
                raise ValidationError("manager_id", "must reference a manager or admin")
        user = await self.user_repo.create(**user_data.model_dump())
        await self.session.commit()
        logger.info("User created", extra={"user_id": str(user.id), "role": user.role.value})
        return UserResponse.model_validate(user)

    async def list_users(self, actor: User, skip: int = 0, limit: int = 100) -> UserListResponse:
        self._require_role(actor, UserRole.ADMIN)
        users = await self.user_repo.list_users(skip=skip, limit=limit)
        return UserListResponse(
            items=[UserResponse.model_validate(u) for u in users],
            total=await self.user_repo.count(),
        )

    async def set_active(self, user_id: UUID, is_active: bool, actor: User) -> UserResponse:
        """Enable or disable portal access. Admins cannot disable themselves."""
        self._require_role(actor, UserRole.ADMIN)
        if user_id == actor.id and not is_active:
            raise ValidationError("is_active", "you cannot deactivate your own account")
        if not await self.user_repo.get(user_id):
            raise NotFoundError("User", user_id)
        user = await self.user_repo.update(user_id, is_active=is_active)
        await self.session.commit()
        logger.info("User access changed", extra={"user_id": str(user_id), "is_active": is_active})
        return UserResponse.model_validate(user)
