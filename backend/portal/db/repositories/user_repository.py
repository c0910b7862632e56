"""
User repository for database operations.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from portal.db.repositories.base_repository import BaseRepository
from portal.domain.entities import UserRole
from portal.models.user import User


class UserRepository(BaseRepository[User]):
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def list_by_role(self, role: UserRole, active_only: bool = False) -> List[User]:
        query = select(User).where(User.role == role)
        if active_only:
            query = query.where(User.is_active.is_(True))
        result = await self.session.execute(query.order_by(User.full_name))
        return list(result.scalars().all())

    async def list_users(self, skip: int = 0, limit: int = 100) -> List[User]:
        result = await self.session.execute(
            select(User).order_by(User.full_name).offset(skip).limit(limit)
        )
        return list(result.scalars().all())
