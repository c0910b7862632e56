"""
Submission status transitions.

``validate_transition`` decides whether an actor may take an action on a
submission and returns a ``TransitionResult``; ``build_changes`` turns an
accepted ``StatusTransition`` into the field mutations to persist. Both are
pure: no I/O, no clock reads unless a timestamp is passed in.

    PENDING --APPROVE (MANAGER, ADMIN)--------------------> APPROVED
    PENDING --REJECT (MANAGER, ADMIN, reason)-------------> REJECTED
    PENDING --REQUEST_CLARIFICATION (ADMIN, note)---------> NEEDS_CLARIFICATION
    NEEDS_CLARIFICATION --RESUBMIT (MANAGER, note)--------> APPROVED
    NEEDS_CLARIFICATION --REJECT_TO_CONTRACTOR (MANAGER, note) --> REJECTED
    APPROVED --MARK_PAID (ADMIN, MANAGER)-----------------> PAID

REJECTED and PAID are terminal.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, FrozenSet, Optional, Union
from uuid import UUID

from portal.domain.entities import (
    Submission,
    SubmissionStatus,
    TransitionAction,
    UserRole,
)
from portal.domain.errors import InvalidTransitionError


@dataclass(frozen=True)
class TransitionRule:
    """One edge of the lifecycle graph."""
    from_status: SubmissionStatus
    action: TransitionAction
    to_status: SubmissionStatus
    roles: FrozenSet[UserRole]
    note_required: bool = False
    event: str = ""


_MANAGER_OR_ADMIN = frozenset({UserRole.MANAGER, UserRole.ADMIN})

TRANSITION_RULES = (
    TransitionRule(
        SubmissionStatus.PENDING, TransitionAction.APPROVE, SubmissionStatus.APPROVED,
        _MANAGER_OR_ADMIN, event="SubmissionApproved",
    ),
    TransitionRule(
        SubmissionStatus.PENDING, TransitionAction.REJECT, SubmissionStatus.REJECTED,
        _MANAGER_OR_ADMIN, note_required=True, event="SubmissionRejected",
    ),
    TransitionRule(
        SubmissionStatus.PENDING, TransitionAction.REQUEST_CLARIFICATION, SubmissionStatus.NEEDS_CLARIFICATION,
        frozenset({UserRole.ADMIN}), note_required=True, event="SubmissionClarificationRequested",
    ),
    TransitionRule(
        SubmissionStatus.NEEDS_CLARIFICATION, TransitionAction.RESUBMIT, SubmissionStatus.APPROVED,
        frozenset({UserRole.MANAGER}), note_required=True, event="SubmissionApproved",
    ),
    TransitionRule(
        SubmissionStatus.NEEDS_CLARIFICATION, TransitionAction.REJECT_TO_CONTRACTOR, SubmissionStatus.REJECTED,
        frozenset({UserRole.MANAGER}), note_required=True, event="SubmissionRejected",
    ),
    TransitionRule(
        SubmissionStatus.APPROVED, TransitionAction.MARK_PAID, SubmissionStatus.PAID,
        _MANAGER_OR_ADMIN, event="SubmissionPaid",
    ),
)

_RULES_BY_EDGE = {(rule.from_status, rule.action): rule for rule in TRANSITION_RULES}


@dataclass(frozen=True)
class StatusTransition:
    """An accepted, not yet persisted, status change."""
    submission: Submission
    action: TransitionAction
    from_status: SubmissionStatus
    to_status: SubmissionStatus
    actor_role: UserRole
    actor_id: Optional[UUID] = None
    note: Optional[str] = None
    event: str = ""

    @property
    def submission_id(self) -> UUID:
        return self.submission.id


@dataclass(frozen=True)
class TransitionResult:
    """Either an accepted transition or the reason it was refused."""
    transition: Optional[StatusTransition] = None
    error: Optional[InvalidTransitionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> StatusTransition:
        """Return the transition or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.transition


@dataclass(frozen=True)
class PaymentDraft:
    """Payment record to create alongside APPROVED -> PAID."""
    submission_id: UUID
    contractor_id: UUID
    amount: Decimal
    paid_at: datetime
    paid_by: Optional[UUID] = None


@dataclass(frozen=True)
class TransitionChanges:
    """Field mutations for one transition, keyed by submission attribute."""
    fields: Dict[str, Any] = field(default_factory=dict)
    payment: Optional[PaymentDraft] = None


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value or "").strip().upper().replace("-", "_").replace(" ", "_"))
    except ValueError:
        return None


def validate_transition(
    submission: Submission,
    action: Union[TransitionAction, str],
    actor_role: Union[UserRole, str],
    note: Optional[str] = None,
    actor_id: Optional[UUID] = None,
) -> TransitionResult:
    """
    Check whether ``actor_role`` may take ``action`` on ``submission``.

    Never raises for a refused transition; the refusal is returned in
    ``TransitionResult.error``.
    """
    current = submission.status
    parsed_action = _coerce(TransitionAction, action)
    if parsed_action is None:
        return TransitionResult(error=InvalidTransitionError(current, action, InvalidTransitionError.UNKNOWN_ACTION))

    if current.is_terminal:
        return TransitionResult(
            error=InvalidTransitionError(current, parsed_action, InvalidTransitionError.TERMINAL_STATE)
        )

    role = _coerce(UserRole, actor_role)
    if role is None:
        return TransitionResult(
            error=InvalidTransitionError(current, parsed_action, InvalidTransitionError.UNKNOWN_ROLE)
        )

    rule = _RULES_BY_EDGE.get((current, parsed_action))
    if rule is None:
        return TransitionResult(
            error=InvalidTransitionError(current, parsed_action, InvalidTransitionError.NOT_ALLOWED_FROM_STATE)
        )
    if role not in rule.roles:
        return TransitionResult(
            error=InvalidTransitionError(current, parsed_action, InvalidTransitionError.ROLE_NOT_PERMITTED)
        )

    cleaned_note = note.strip() if isinstance(note, str) else None
    if rule.note_required and not cleaned_note:
        return TransitionResult(
            error=InvalidTransitionError(current, parsed_action, InvalidTransitionError.NOTE_REQUIRED)
        )

    return TransitionResult(
        transition=StatusTransition(
            submission=submission,
            action=parsed_action,
            from_status=current,
            to_status=rule.to_status,
            actor_role=role,
            actor_id=actor_id,
            note=cleaned_note or None,
            event=rule.event,
        )
    )


def allowed_actions(submission: Submission, actor_role: Union[UserRole, str]) -> list:
    """Actions ``actor_role`` could take on ``submission`` right now (ignoring notes)."""
    role = _coerce(UserRole, actor_role)
    if role is None or submission.status.is_terminal:
        return []
    return [
        rule.action
        for rule in TRANSITION_RULES
        if rule.from_status == submission.status and role in rule.roles
    ]


def build_changes(transition: StatusTransition, now: Optional[datetime] = None) -> TransitionChanges:
    """Field mutations (who, when, why) that persist ``transition``. Hours and amounts never change."""
    now = now or datetime.now(timezone.utc)
    action = transition.action
    fields: Dict[str, Any] = {"status": transition.to_status}
    payment = None

    if action == TransitionAction.APPROVE:
        fields.update(rejection_reason=None, approved_at=now, approved_by=transition.actor_id)
    elif action == TransitionAction.REJECT:
        fields.update(rejection_reason=transition.note, rejected_by=transition.actor_id)
    elif action == TransitionAction.REQUEST_CLARIFICATION:
        fields.update(admin_note=transition.note)
    elif action == TransitionAction.RESUBMIT:
        fields.update(
            admin_note=None,
            manager_note=transition.note,
            rejection_reason=None,
            approved_at=now,
            approved_by=transition.actor_id,
        )
    elif action == TransitionAction.REJECT_TO_CONTRACTOR:
        fields.update(rejection_reason=transition.note, rejected_by=transition.actor_id)
    elif action == TransitionAction.MARK_PAID:
        fields.update(paid_at=now)
        submission = transition.submission
        payment = PaymentDraft(
            submission_id=submission.id,
            contractor_id=submission.contractor_id,
            amount=submission.total_amount,
            paid_at=now,
            paid_by=transition.actor_id,
        )

    return TransitionChanges(fields=fields, payment=payment)


def apply_changes(submission: Submission, changes: TransitionChanges) -> Submission:
    """Return a copy of ``submission`` with ``changes`` applied."""
    return replace(submission, **changes.fields)
