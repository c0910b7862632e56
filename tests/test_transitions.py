"""
Status transition validator and change builder tests.
"""

from datetime import datetime, timezone
from decimal import Decimal
from itertools import product
from uuid import uuid4

import pytest

from portal.domain.entities import Submission, SubmissionStatus, TransitionAction, UserRole
from portal.domain.errors import InvalidTransitionError
from portal.domain.transitions import (
    TRANSITION_RULES,
    allowed_actions,
    apply_changes,
    build_changes,
    validate_transition,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

# (from, action) -> (to, roles, note required)
EXPECTED = {
    (SubmissionStatus.PENDING, TransitionAction.APPROVE): (
        SubmissionStatus.APPROVED, {UserRole.MANAGER, UserRole.ADMIN}, False,
    ),
    (SubmissionStatus.PENDING, TransitionAction.REJECT): (
        SubmissionStatus.REJECTED, {UserRole.MANAGER, UserRole.ADMIN}, True,
    ),
    (SubmissionStatus.PENDING, TransitionAction.REQUEST_CLARIFICATION): (
        SubmissionStatus.NEEDS_CLARIFICATION, {UserRole.ADMIN}, True,
    ),
    (SubmissionStatus.NEEDS_CLARIFICATION, TransitionAction.RESUBMIT): (
        SubmissionStatus.APPROVED, {UserRole.MANAGER}, True,
    ),
    (SubmissionStatus.NEEDS_CLARIFICATION, TransitionAction.REJECT_TO_CONTRACTOR): (
        SubmissionStatus.REJECTED, {UserRole.MANAGER}, True,
    ),
    (SubmissionStatus.APPROVED, TransitionAction.MARK_PAID): (
        SubmissionStatus.PAID, {UserRole.MANAGER, UserRole.ADMIN}, False,
    ),
}


def make_submission(status=SubmissionStatus.PENDING, **kwargs) -> Submission:
    values = dict(
        id=uuid4(),
        contractor_id=uuid4(),
        manager_id=uuid4(),
        work_period="2026-01",
        regular_hours=Decimal("160"),
        description="Feature work",
        total_amount=Decimal("12000.00"),
        status=status,
    )
    values.update(kwargs)
    return Submission(**values)


@pytest.mark.parametrize(
    "status,action,role",
    list(product(SubmissionStatus, TransitionAction, UserRole)),
)
def test_transition_grid(status, action, role):
    """Every (state, action, role) combination matches the lifecycle table."""
    submission = make_submission(status)
    result = validate_transition(submission, action, role, note="Checked with the client")

    expected = EXPECTED.get((status, action))
    if status.is_terminal:
        assert not result.ok
        assert result.error.reason == InvalidTransitionError.TERMINAL_STATE
    elif expected is None:
        assert not result.ok
        assert result.error.reason == InvalidTransitionError.NOT_ALLOWED_FROM_STATE
    elif role not in expected[1]:
        assert not result.ok
        assert result.error.reason == InvalidTransitionError.ROLE_NOT_PERMITTED
    else:
        assert result.ok
        assert result.transition.to_status == expected[0]
        assert result.transition.from_status == status


def test_rule_table_matches_expected_edges():
    edges = {(r.from_status, r.action): (r.to_status, set(r.roles), r.note_required) for r in TRANSITION_RULES}
    assert edges == EXPECTED


@pytest.mark.parametrize(
    "status,action,role",
    [(status, action, roles) for (status, action), (_, roles, needs_note) in EXPECTED.items() if needs_note],
)
@pytest.mark.parametrize("note", [None, "", "   "])
def test_missing_note_is_refused(status, action, role, note):
    for actor_role in role:
        result = validate_transition(make_submission(status), action, actor_role, note=note)
        assert not result.ok
        assert result.error.reason == InvalidTransitionError.NOTE_REQUIRED


def test_contractor_can_never_act():
    for status, action in EXPECTED:
        result = validate_transition(make_submission(status), action, UserRole.CONTRACTOR, note="x")
        assert result.error.reason == InvalidTransitionError.ROLE_NOT_PERMITTED


def test_terminal_state_checked_before_role():
    result = validate_transition(
        make_submission(SubmissionStatus.PAID, paid_at=NOW), TransitionAction.APPROVE, UserRole.CONTRACTOR,
    )
    assert result.error.reason == InvalidTransitionError.TERMINAL_STATE


def test_strings_are_accepted_case_insensitively():
    result = validate_transition(make_submission(), "approve", "manager")
    assert result.ok
    assert result.transition.action == TransitionAction.APPROVE
    assert result.transition.actor_role == UserRole.MANAGER


def test_unknown_action_and_role_are_refused():
    submission = make_submission()
    assert validate_transition(submission, "archive", UserRole.ADMIN).error.reason == InvalidTransitionError.UNKNOWN_ACTION
    assert validate_transition(submission, "approve", "auditor").error.reason == InvalidTransitionError.UNKNOWN_ROLE


def test_unwrap_raises_carried_error():
    result = validate_transition(make_submission(), TransitionAction.REJECT, UserRole.MANAGER)
    with pytest.raises(InvalidTransitionError) as exc_info:
        result.unwrap()
    assert exc_info.value.from_status == SubmissionStatus.PENDING
    assert exc_info.value.action == TransitionAction.REJECT


def test_note_is_trimmed():
    result = validate_transition(make_submission(), TransitionAction.REJECT, UserRole.ADMIN, note="  Wrong month  ")
    assert result.transition.note == "Wrong month"


def test_event_names():
    names = {
        (r.from_status, r.action): r.event for r in TRANSITION_RULES
    }
    assert names[(SubmissionStatus.PENDING, TransitionAction.APPROVE)] == "SubmissionApproved"
    assert names[(SubmissionStatus.PENDING, TransitionAction.REJECT)] == "SubmissionRejected"
    assert names[(SubmissionStatus.PENDING, TransitionAction.REQUEST_CLARIFICATION)] == "SubmissionClarificationRequested"
    assert names[(SubmissionStatus.APPROVED, TransitionAction.MARK_PAID)] == "SubmissionPaid"


def test_approve_clears_rejection_reason_and_records_approver():
    actor_id = uuid4()
    submission = make_submission(rejection_reason="old")
    transition = validate_transition(submission, TransitionAction.APPROVE, UserRole.MANAGER, actor_id=actor_id).unwrap()

    changes = build_changes(transition, NOW)

    assert changes.fields == {
        "status": SubmissionStatus.APPROVED,
        "rejection_reason": None,
        "approved_at": NOW,
        "approved_by": actor_id,
    }
    assert changes.payment is None


def test_reject_stores_reason():
    transition = validate_transition(make_submission(), TransitionAction.REJECT, UserRole.ADMIN, note="Duplicate").unwrap()
    changes = build_changes(transition, NOW)
    assert changes.fields["status"] == SubmissionStatus.REJECTED
    assert changes.fields["rejection_reason"] == "Duplicate"


def test_clarification_round_trip():
    submission = make_submission()
    asked = validate_transition(
        submission, TransitionAction.REQUEST_CLARIFICATION, UserRole.ADMIN, note="Why 40h overtime?"
    ).unwrap()
    submission = apply_changes(submission, build_changes(asked, NOW))
    assert submission.status == SubmissionStatus.NEEDS_CLARIFICATION
    assert submission.admin_note == "Why 40h overtime?"

    answered = validate_transition(
        submission, TransitionAction.RESUBMIT, UserRole.MANAGER, note="Release weekend, agreed upfront"
    ).unwrap()
    submission = apply_changes(submission, build_changes(answered, NOW))

    assert submission.status == SubmissionStatus.APPROVED
    assert submission.admin_note is None
    assert submission.manager_note == "Release weekend, agreed upfront"
    assert submission.approved_at == NOW


def test_mark_paid_produces_payment_draft():
    actor_id = uuid4()
    submission = make_submission(SubmissionStatus.APPROVED, approved_at=NOW)
    transition = validate_transition(submission, TransitionAction.MARK_PAID, UserRole.ADMIN, actor_id=actor_id).unwrap()

    changes = build_changes(transition, NOW)

    assert changes.fields == {"status": SubmissionStatus.PAID, "paid_at": NOW}
    assert changes.payment.amount == Decimal("12000.00")
    assert changes.payment.contractor_id == submission.contractor_id
    assert changes.payment.paid_by == actor_id


def test_changes_never_touch_hours_or_amounts():
    for (status, action), (_, roles, _) in EXPECTED.items():
        submission = make_submission(status)
        transition = validate_transition(submission, action, next(iter(roles)), note="ok").unwrap()
        fields = build_changes(transition, NOW).fields
        assert not {"regular_hours", "overtime_hours", "total_amount"} & set(fields)


def test_allowed_actions():
    pending = make_submission()
    assert allowed_actions(pending, UserRole.ADMIN) == [
        TransitionAction.APPROVE,
        TransitionAction.REJECT,
        TransitionAction.REQUEST_CLARIFICATION,
    ]
    assert allowed_actions(pending, UserRole.MANAGER) == [TransitionAction.APPROVE, TransitionAction.REJECT]
    assert allowed_actions(pending, UserRole.CONTRACTOR) == []
    assert allowed_actions(make_submission(SubmissionStatus.REJECTED, rejection_reason="x"), UserRole.ADMIN) == []
