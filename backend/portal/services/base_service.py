"""
Base service class.
Services contain business logic and coordinate repositories.
"""

from abc import ABC

from portal.domain.entities import UserRole
from portal.domain.errors import PermissionDeniedError


class BaseService(ABC):
    """Base service class for all services."""

    @staticmethod
    def _require_role(actor, *roles: UserRole) -> None:
        """Raise PermissionDeniedError unless ``actor.role`` is one of ``roles``."""
        if actor is None or actor.role not in roles:
            allowed = ", ".join(r.value for r in roles)
            raise PermissionDeniedError(f"This action requires one of: {allowed}")
