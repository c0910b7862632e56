"""
Submission lifecycle domain.
Pure, storage-independent rules: entities, transitions, filtering, calendar math.
"""

from portal.domain.calendar import (
    affects_contractor,
    applies_to_role,
    blocked_dates,
    count_affected_contractors,
    is_affecting_range,
)
from portal.domain.entities import (
    ContractorType,
    Submission,
    SubmissionStatus,
    TimeOffEntry,
    TimeOffScope,
    TransitionAction,
    UserRole,
)
from portal.domain.errors import (
    ConcurrentModificationError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    PortalError,
    ValidationError,
)
from portal.domain.filters import SubmissionFilter, SubmissionSort, filter_submissions
from portal.domain.transitions import (
    StatusTransition,
    TransitionChanges,
    TransitionResult,
    build_changes,
    validate_transition,
)

__all__ = [
    "ContractorType",
    "Submission",
    "SubmissionStatus",
    "TimeOffEntry",
    "TimeOffScope",
    "TransitionAction",
    "UserRole",
    "ConcurrentModificationError",
    "InvalidTransitionError",
    "NotFoundError",
    "PermissionDeniedError",
    "PersistenceError",
    "PortalError",
    "ValidationError",
    "SubmissionFilter",
    "SubmissionSort",
    "filter_submissions",
    "StatusTransition",
    "TransitionChanges",
    "TransitionResult",
    "build_changes",
    "validate_transition",
    "affects_contractor",
    "applies_to_role",
    "blocked_dates",
    "count_affected_contractors",
    "is_affecting_range",
]
