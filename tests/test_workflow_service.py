"""
Submission workflow service tests against an in-memory database.
"""

from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from portal.db.repositories.payment_repository import PaymentRepository
from portal.db.repositories.submission_repository import SubmissionRepository
from portal.db.repositories.submission_status_history_repository import SubmissionStatusHistoryRepository
from portal.domain.entities import SubmissionStatus, TransitionAction, UserRole
from portal.domain.events import SubmissionEvent
from portal.domain.errors import ConcurrentModificationError, InvalidTransitionError, PersistenceError
from portal.domain.transitions import validate_transition
from portal.models import Notification
from portal.services.notification_service import NotificationService, recipients_for
from portal.services.submission_workflow_service import SubmissionWorkflowService

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class RecordingNotifier:
    """Collects published events instead of storing notifications."""

    def __init__(self):
        self.events = []

    async def publish(self, event):
        self.events.append(event)
        return []


class FailingNotifier:
    async def publish(self, event):
        raise OperationalError("INSERT INTO notifications", {}, Exception("disk I/O error"))


@pytest.fixture
async def people(make_user):
    manager = await make_user(UserRole.MANAGER)
    admin = await make_user(UserRole.ADMIN)
    contractor = await make_user(UserRole.CONTRACTOR, manager_id=manager.id)
    return contractor, manager, admin


@pytest.mark.asyncio
async def test_approve_updates_row_and_writes_history(test_db_session, make_submission, people):
    contractor, manager, _ = people
    row = await make_submission(contractor, manager)
    notifier = RecordingNotifier()
    service = SubmissionWorkflowService(test_db_session, notifier=notifier)

    updated = await service.perform_action(row.id, TransitionAction.APPROVE, manager)

    assert updated.status == SubmissionStatus.APPROVED
    assert updated.approved_by == manager.id
    assert await SubmissionRepository(test_db_session).get_status(row.id) == "approved"

    history = await SubmissionStatusHistoryRepository(test_db_session).list_by_submission(row.id)
    assert [(h.from_status, h.to_status, h.action) for h in history] == [("pending", "approved", "APPROVE")]
    assert history[0].changed_by == manager.id

    assert len(notifier.events) == 1
    assert notifier.events[0].name == "SubmissionApproved"
    assert notifier.events[0].actor_id == manager.id


@pytest.mark.asyncio
async def test_mark_paid_creates_exactly_one_payment(test_db_session, make_submission, people):
    contractor, manager, admin = people
    row = await make_submission(contractor, manager, status=SubmissionStatus.APPROVED, total_amount=Decimal("4321.50"))
    service = SubmissionWorkflowService(test_db_session, notifier=RecordingNotifier())

    updated = await service.perform_action(row.id, "mark_paid", admin)

    assert updated.status == SubmissionStatus.PAID
    assert updated.paid_at is not None
    payment = await PaymentRepository(test_db_session).get_by_submission(row.id)
    assert payment.amount == Decimal("4321.50")
    assert payment.admin_id == admin.id
    assert payment.contractor_id == contractor.id

    with pytest.raises(InvalidTransitionError) as exc_info:
        await service.perform_action(row.id, TransitionAction.MARK_PAID, admin)
    assert exc_info.value.reason == InvalidTransitionError.TERMINAL_STATE
    assert len(await PaymentRepository(test_db_session).list_by_contractor(contractor.id)) == 1


@pytest.mark.asyncio
async def test_stale_transition_raises_concurrent_modification(test_db_session, make_submission, people):
    contractor, manager, admin = people
    row = await make_submission(contractor, manager)
    submission_id = row.id
    service = SubmissionWorkflowService(test_db_session, notifier=RecordingNotifier())

    snapshot = await service.load(submission_id)
    stale_reject = validate_transition(snapshot, TransitionAction.REJECT, UserRole.ADMIN, note="dup", actor_id=admin.id)
    await service.perform_action(submission_id, TransitionAction.APPROVE, manager)

    with pytest.raises(ConcurrentModificationError) as exc_info:
        await service.apply_transition(stale_reject.unwrap(), NOW)

    assert exc_info.value.expected_status == SubmissionStatus.PENDING
    assert exc_info.value.actual_status == SubmissionStatus.APPROVED
    current = await service.load(submission_id)
    assert current.status == SubmissionStatus.APPROVED
    assert current.rejection_reason is None
    history = await SubmissionStatusHistoryRepository(test_db_session).list_by_submission(submission_id)
    assert len(history) == 1


@pytest.mark.asyncio
async def test_store_failure_rolls_back_and_raises_persistence_error(test_db_session, make_submission, people):
    contractor, manager, _ = people
    row = await make_submission(contractor, manager)
    submission_id = row.id
    service = SubmissionWorkflowService(test_db_session, notifier=FailingNotifier())

    with pytest.raises(PersistenceError):
        await service.perform_action(submission_id, TransitionAction.APPROVE, manager)

    assert await SubmissionRepository(test_db_session).get_status(submission_id) == "pending"
    assert await SubmissionStatusHistoryRepository(test_db_session).list_by_submission(submission_id) == []


@pytest.mark.asyncio
async def test_refused_transition_writes_nothing(test_db_session, make_submission, people):
    contractor, manager, _ = people
    row = await make_submission(contractor, manager)
    notifier = RecordingNotifier()
    service = SubmissionWorkflowService(test_db_session, notifier=notifier)

    with pytest.raises(InvalidTransitionError) as exc_info:
        await service.perform_action(row.id, TransitionAction.REQUEST_CLARIFICATION, manager, note="why?")

    assert exc_info.value.reason == InvalidTransitionError.ROLE_NOT_PERMITTED
    assert notifier.events == []
    assert await SubmissionRepository(test_db_session).get_status(row.id) == "pending"


@pytest.mark.asyncio
async def test_clarification_round_trip_notifications(test_db_session, make_submission, people):
    contractor, manager, admin = people
    row = await make_submission(contractor, manager)
    service = SubmissionWorkflowService(test_db_session)

    await service.perform_action(row.id, TransitionAction.REQUEST_CLARIFICATION, admin, note="Explain overtime")
    await service.perform_action(row.id, TransitionAction.RESUBMIT, manager, note="Release weekend")

    result = await test_db_session.execute(select(Notification))
    delivered = {(n.event_type, n.recipient_id): n for n in result.scalars().all()}
    assert set(delivered) == {
        ("SubmissionClarificationRequested", manager.id),
        ("SubmissionApproved", contractor.id),
        ("SubmissionApproved", admin.id),
    }
    assert delivered[("SubmissionClarificationRequested", manager.id)].message == "Explain overtime"
    assert delivered[("SubmissionApproved", admin.id)].message == "Release weekend"

    notification_service = NotificationService(test_db_session)
    assert await notification_service.unread_count(manager.id) == 1
    assert await notification_service.unread_count(admin.id) == 1
    await notification_service.mark_all_read(manager.id)
    assert await notification_service.unread_count(manager.id) == 0


@pytest.mark.asyncio
async def test_clarification_answer_without_history_goes_to_active_admins(
    test_db_session, make_user, make_submission, people
):
    contractor, manager, admin = people
    other_admin = await make_user(UserRole.ADMIN)
    await make_user(UserRole.ADMIN, is_active=False)
    row = await make_submission(contractor, manager, status=SubmissionStatus.NEEDS_CLARIFICATION)
    notifier = RecordingNotifier()
    service = SubmissionWorkflowService(test_db_session, notifier=notifier)

    await service.perform_action(row.id, TransitionAction.RESUBMIT, manager, note="Client signed off")

    event = notifier.events[0]
    assert set(event.clarification_requested_by) == {admin.id, other_admin.id}
    assert set(recipients_for(event)) == {contractor.id, admin.id, other_admin.id}


def test_resubmit_recipients_skip_the_actor_and_duplicates():
    contractor_id, manager_id, admin_id = uuid4(), uuid4(), uuid4()
    event = SubmissionEvent(
        name="SubmissionApproved",
        submission_id=uuid4(),
        actor_id=manager_id,
        contractor_id=contractor_id,
        manager_id=manager_id,
        action=TransitionAction.RESUBMIT,
        from_status=SubmissionStatus.NEEDS_CLARIFICATION,
        to_status=SubmissionStatus.APPROVED,
        occurred_at=NOW,
        clarification_requested_by=(admin_id, admin_id, manager_id),
    )
    assert recipients_for(event) == [contractor_id, admin_id]


@pytest.mark.asyncio
async def test_legacy_pending_spelling_can_be_approved(test_db_session, make_submission, people):
    contractor, manager, _ = people
    row = await make_submission(contractor, manager)
    submission_id = row.id
    row.status = "submitted"
    await test_db_session.commit()
    service = SubmissionWorkflowService(test_db_session, notifier=RecordingNotifier())

    updated = await service.perform_action(submission_id, TransitionAction.APPROVE, manager)

    assert updated.status == SubmissionStatus.APPROVED
    assert await SubmissionRepository(test_db_session).get_status(submission_id) == "approved"
    history = await SubmissionStatusHistoryRepository(test_db_session).list_by_submission(submission_id)
    assert [(h.from_status, h.to_status) for h in history] == [("pending", "approved")]


@pytest.mark.asyncio
async def test_legacy_clarification_spelling_only_accepts_clarification_exits(
    test_db_session, make_submission, people
):
    contractor, manager, _ = people
    row = await make_submission(contractor, manager, status=SubmissionStatus.NEEDS_CLARIFICATION)
    submission_id = row.id
    row.status = "clarification_requested"
    await test_db_session.commit()
    service = SubmissionWorkflowService(test_db_session, notifier=RecordingNotifier())

    assert (await service.load(submission_id)).status == SubmissionStatus.NEEDS_CLARIFICATION
    with pytest.raises(InvalidTransitionError):
        await service.perform_action(submission_id, TransitionAction.APPROVE, manager)

    updated = await service.perform_action(
        submission_id, TransitionAction.REJECT_TO_CONTRACTOR, manager, note="Please split the hours by project"
    )
    assert updated.status == SubmissionStatus.REJECTED


@pytest.mark.asyncio
async def test_mark_paid_assigns_next_invoice_number(test_db_session, make_submission, people):
    contractor, manager, admin = people
    await make_submission(
        contractor, manager, status=SubmissionStatus.PAID, work_period="2025-11", invoice_number="INV-2026-0009"
    )
    await make_submission(
        contractor, manager, status=SubmissionStatus.PAID, work_period="2025-10", invoice_number="INV-2025-0120"
    )
    first = await make_submission(contractor, manager, status=SubmissionStatus.APPROVED, work_period="2026-01")
    second = await make_submission(contractor, manager, status=SubmissionStatus.APPROVED, work_period="2026-02")
    service = SubmissionWorkflowService(test_db_session, notifier=RecordingNotifier())

    numbers = []
    for submission_id in (first.id, second.id):
        snapshot = await service.load(submission_id)
        transition = validate_transition(snapshot, TransitionAction.MARK_PAID, UserRole.ADMIN, actor_id=admin.id)
        paid = await service.apply_transition(transition.unwrap(), NOW)
        numbers.append(paid.invoice_number)

    assert numbers == ["INV-2026-0010", "INV-2026-0011"]
    payment = await PaymentRepository(test_db_session).get_by_submission(second.id)
    assert payment.invoice_number == "INV-2026-0011"


@pytest.mark.asyncio
async def test_legacy_paid_row_is_terminal(test_db_session, make_submission, people):
    contractor, manager, admin = people
    row = await make_submission(
        contractor, manager, status=SubmissionStatus.APPROVED, paid_at=datetime(2025, 12, 1, tzinfo=timezone.utc)
    )
    service = SubmissionWorkflowService(test_db_session, notifier=RecordingNotifier())

    assert (await service.load(row.id)).status == SubmissionStatus.PAID
    with pytest.raises(InvalidTransitionError):
        await service.perform_action(row.id, TransitionAction.MARK_PAID, admin)
