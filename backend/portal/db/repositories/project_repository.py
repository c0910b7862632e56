"""
Project repository for database operations.
"""

from typing import Optional, List
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from portal.db.repositories.base_repository import BaseRepository
from portal.models.project import Project


class ProjectRepository(BaseRepository[Project]):
    """Repository for project operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Project, session)

    async def get_by_name(self, name: str) -> Optional[Project]:
        result = await self.session.execute(
            select(Project).where(Project.name == name)
        )
        return result.scalar_one_or_none()

    async def list_active(self) -> List[Project]:
        result = await self.session.execute(
            select(Project).where(Project.is_active.is_(True)).order_by(Project.name)
        )
        return list(result.scalars().all())
