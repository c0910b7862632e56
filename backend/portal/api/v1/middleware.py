"""
API middleware for authentication and common concerns.
Centralized actor resolution for all protected routes.

The portal sits behind an identity gateway that authenticates the user and
forwards their id in a request header (``settings.ACTOR_HEADER``).
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from portal.core.config import settings
from portal.db.session import get_db
from portal.db.repositories.user_repository import UserRepository
from portal.models.user import User

actor_header = APIKeyHeader(name=settings.ACTOR_HEADER, auto_error=False)


async def require_actor(
    actor_id: str = Depends(actor_header),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Centralized authentication dependency.
    This should be used as a dependency on all protected routes.

    Usage:
        @router.get("/endpoint")
        async def my_endpoint(
            actor: User = Depends(require_actor)
        ):
            ...

    Returns:
        Current authenticated User

    Raises:
        HTTPException: 401 if the header is missing or names no user,
            403 if the user has been deactivated
    """
    if not actor_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        user_id = UUID(actor_id.strip())
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user id",
        )

    user = await UserRepository(db).get(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user
