"""
Typed domain errors for the submission lifecycle.

Every error carries a machine-readable ``code`` and structured attributes so
callers catch by type and never parse messages. No framework imports here;
the HTTP mapping lives in ``portal.core.exceptions``.

    PortalError
    +-- ValidationError               malformed submission / entry data
    +-- InvalidTransitionError        status change not permitted
    +-- ConcurrentModificationError   compare-and-set lost a race
    +-- PersistenceError              the store failed to commit
    +-- NotFoundError
    +-- PermissionDeniedError
"""

from typing import Any, Dict, Optional


class PortalError(Exception):
    """Base class for all portal domain errors."""

    code: str = "PORTAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_details(self) -> Dict[str, Any]:
        """Structured payload safe to return to API clients."""
        return {}


class ValidationError(PortalError):
    """Submission or calendar data failed a precondition."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")

    def to_details(self) -> Dict[str, Any]:
        return {"field": self.field}


class InvalidTransitionError(PortalError):
    """
    A status transition was refused.

    ``reason`` is one of ``TERMINAL_STATE``, ``NOT_ALLOWED_FROM_STATE``,
    ``ROLE_NOT_PERMITTED``, ``NOTE_REQUIRED``, ``UNKNOWN_ACTION`` or
    ``UNKNOWN_ROLE``.
    """

    code = "INVALID_TRANSITION"

    TERMINAL_STATE = "TERMINAL_STATE"
    NOT_ALLOWED_FROM_STATE = "NOT_ALLOWED_FROM_STATE"
    ROLE_NOT_PERMITTED = "ROLE_NOT_PERMITTED"
    NOTE_REQUIRED = "NOTE_REQUIRED"
    UNKNOWN_ACTION = "UNKNOWN_ACTION"
    UNKNOWN_ROLE = "UNKNOWN_ROLE"

    def __init__(self, from_status: Any, action: Any, reason: str, message: Optional[str] = None):
        self.from_status = from_status
        self.action = action
        self.reason = reason
        super().__init__(
            message or f"Cannot {_label(action)} a submission in status {_label(from_status)} ({reason})"
        )

    def to_details(self) -> Dict[str, Any]:
        return {
            "from_status": _label(self.from_status),
            "action": _label(self.action),
            "reason": self.reason,
        }


class ConcurrentModificationError(PortalError):
    """The submission's status changed between read and write."""

    code = "CONCURRENT_MODIFICATION"

    def __init__(self, submission_id: Any, expected_status: Any, actual_status: Any = None):
        self.submission_id = submission_id
        self.expected_status = expected_status
        self.actual_status = actual_status
        super().__init__(
            f"Submission {submission_id} is no longer {_label(expected_status)}"
            + (f" (now {_label(actual_status)})" if actual_status is not None else "")
        )

    def to_details(self) -> Dict[str, Any]:
        return {
            "submission_id": str(self.submission_id),
            "expected_status": _label(self.expected_status),
            "actual_status": _label(self.actual_status) if self.actual_status is not None else None,
        }


class PersistenceError(PortalError):
    """The underlying store failed to commit a change."""

    code = "PERSISTENCE_ERROR"


class NotFoundError(PortalError):
    """A referenced record does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")

    def to_details(self) -> Dict[str, Any]:
        return {"entity": self.entity, "id": str(self.entity_id)}


class PermissionDeniedError(PortalError):
    """The actor may not perform the requested operation."""

    code = "PERMISSION_DENIED"


def _label(value: Any) -> str:
    return getattr(value, "value", None) or str(value)
