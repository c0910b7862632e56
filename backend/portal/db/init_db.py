"""
Database initialization and bootstrapping.
Creates tables for local development and seeds the first admin account.
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from portal.db.base import Base
from portal.db.repositories.user_repository import UserRepository
from portal.domain.entities import UserRole
from portal.core.logging import get_logger
from portal.models import User  # registers every table on Base.metadata

logger = get_logger(__name__)


async def create_tables(engine: AsyncEngine) -> None:
    """
    Create all database tables.
    Intended for local development and tests; production schemas are managed
    outside the application.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialized", extra={"tables": len(Base.metadata.tables)})


async def seed_initial_admin(session: AsyncSession, email: str, full_name: str) -> Optional[User]:
    """
    Create the first ADMIN user if no user has ``email`` yet.

    Returns the created user, or None when the account already exists.
    """
    repo = UserRepository(session)
    if await repo.get_by_email(email):
        logger.info("Initial admin already present", extra={"email": email})
        return None
    admin = await repo.create(
        full_name=full_name,
        email=email.strip().lower(),
        role=UserRole.ADMIN,
        is_active=True,
    )
    await session.commit()
    logger.info("Initial admin created", extra={"user_id": str(admin.id)})
    return admin
