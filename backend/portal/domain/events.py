"""
Lifecycle events emitted once per applied transition.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from portal.domain.entities import SubmissionStatus, TransitionAction
from portal.domain.transitions import StatusTransition


@dataclass(frozen=True)
class SubmissionEvent:
    name: str
    submission_id: UUID
    actor_id: Optional[UUID]
    contractor_id: UUID
    manager_id: Optional[UUID]
    action: TransitionAction
    from_status: SubmissionStatus
    to_status: SubmissionStatus
    occurred_at: datetime
    note: Optional[str] = None
    # Admins who asked for the clarification a RESUBMIT answers
    clarification_requested_by: Tuple[UUID, ...] = ()


def event_for(
    transition: StatusTransition,
    occurred_at: datetime,
    clarification_requested_by: Tuple[UUID, ...] = (),
) -> SubmissionEvent:
    submission = transition.submission
    return SubmissionEvent(
        name=transition.event,
        submission_id=submission.id,
        actor_id=transition.actor_id,
        contractor_id=submission.contractor_id,
        manager_id=submission.manager_id,
        action=transition.action,
        from_status=transition.from_status,
        to_status=transition.to_status,
        occurred_at=occurred_at,
        note=transition.note,
        clarification_requested_by=tuple(clarification_requested_by),
    )
