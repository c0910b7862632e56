"""
Submission workflow service - validates and persists status transitions.

Each transition is written as one compare-and-set update guarded by the
expected pre-transition status (any of its stored spellings), plus an
invoice number and payment row on MARK_PAID, one audit row and one
lifecycle event, all in a single commit.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple, Union
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.config import settings
from portal.services.base_service import BaseService
from portal.services.notification_service import NotificationService
from portal.db.mappers import changes_to_row_values, submission_to_domain
from portal.db.repositories.payment_repository import PaymentRepository
from portal.db.repositories.submission_repository import SubmissionRepository
from portal.db.repositories.submission_status_history_repository import SubmissionStatusHistoryRepository
from portal.db.repositories.user_repository import UserRepository
from portal.domain.entities import Submission, SubmissionStatus, TransitionAction, UserRole
from portal.domain.errors import ConcurrentModificationError, NotFoundError, PersistenceError
from portal.domain.events import event_for
from portal.domain.invoices import invoice_prefix, next_invoice_number
from portal.domain.status_mapping import from_storage, storage_spellings, to_storage
from portal.domain.transitions import StatusTransition, build_changes, validate_transition
from portal.models.user import User

logger = logging.getLogger(__name__)


class SubmissionWorkflowService(BaseService):
    """Service for submission approval, rejection, clarification and payment."""

    def __init__(self, session: AsyncSession, notifier: Optional[NotificationService] = None):
        self.session = session
        self.submission_repo = SubmissionRepository(session)
        self.payment_repo = PaymentRepository(session)
        self.status_history_repo = SubmissionStatusHistoryRepository(session)
        self.user_repo = UserRepository(session)
        self.notifier = notifier or NotificationService(session)

    async def load(self, submission_id: UUID) -> Submission:
        row = await self.submission_repo.get(submission_id)
        if not row:
            raise NotFoundError("Submission", submission_id)
        return submission_to_domain(row)

    async def perform_action(
        self,
        submission_id: UUID,
        action: Union[TransitionAction, str],
        actor: User,
        note: Optional[str] = None,
    ) -> Submission:
        """Load, validate and apply one action. Raises InvalidTransitionError if refused."""
        submission = await self.load(submission_id)
        result = validate_transition(submission, action, actor.role, note=note, actor_id=actor.id)
        if not result.ok:
            logger.warning(
                "Transition refused",
                extra={
                    "submission_id": str(submission_id),
                    "action": str(action),
                    "actor_id": str(actor.id),
                    "reason": result.error.reason,
                },
            )
        return await self.apply_transition(result.unwrap())

    async def apply_transition(self, transition: StatusTransition, now: Optional[datetime] = None) -> Submission:
        """
        Persist an accepted transition.

        Raises ConcurrentModificationError if the stored status no longer
        matches ``transition.from_status``, and PersistenceError if the store
        fails. Nothing is written in either case.
        """
        now = now or datetime.now(timezone.utc)
        changes = build_changes(transition, now)
        submission_id = transition.submission_id
        values = changes_to_row_values(changes.fields)

        try:
            if changes.payment is not None:
                values["invoice_number"] = await self._next_invoice_number(changes.payment.paid_at)

            applied = await self.submission_repo.compare_and_set(
                submission_id,
                expected_statuses=storage_spellings(transition.from_status),
                values=values,
                require_unpaid=transition.from_status == SubmissionStatus.APPROVED,
            )
            if not applied:
                actual, actual_paid_at = await self.submission_repo.get_status_and_paid_at(submission_id)
                await self.session.rollback()
                raise ConcurrentModificationError(
                    submission_id,
                    transition.from_status,
                    from_storage(actual, actual_paid_at) if actual is not None else None,
                )

            if changes.payment is not None:
                await self.payment_repo.create(
                    submission_id=changes.payment.submission_id,
                    contractor_id=changes.payment.contractor_id,
                    admin_id=changes.payment.paid_by,
                    amount=changes.payment.amount,
                    invoice_number=values["invoice_number"],
                    status="PAID",
                    paid_at=changes.payment.paid_at,
                )

            await self.status_history_repo.create(
                submission_id=submission_id,
                from_status=to_storage(transition.from_status),
                to_status=to_storage(transition.to_status),
                action=transition.action.value,
                note=transition.note,
                changed_by=transition.actor_id,
                changed_at=now,
            )
            requested_by = ()
            if transition.action == TransitionAction.RESUBMIT:
                requested_by = await self._clarification_requesters(submission_id)
            await self.notifier.publish(event_for(transition, now, requested_by))
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception(
                "Failed to persist transition",
                extra={"submission_id": str(submission_id), "action": transition.action.value},
            )
            raise PersistenceError(f"Could not save {transition.action.value} for submission {submission_id}") from exc

        logger.info(
            "Submission transitioned",
            extra={
                "submission_id": str(submission_id),
                "action": transition.action.value,
                "from_status": transition.from_status.value,
                "to_status": transition.to_status.value,
                "actor_id": str(transition.actor_id) if transition.actor_id else None,
                "invoice_number": values.get("invoice_number"),
            },
        )
        return await self.load(submission_id)

    async def _next_invoice_number(self, paid_at: datetime) -> str:
        prefix = settings.INVOICE_NUMBER_PREFIX
        issued = await self.submission_repo.list_invoice_numbers(invoice_prefix(paid_at.year, prefix))
        return next_invoice_number(paid_at.year, issued, prefix)

    async def _clarification_requesters(self, submission_id: UUID) -> Tuple[UUID, ...]:
        """The admin who asked for clarification, or every active admin if the request predates history."""
        requester = await self.status_history_repo.latest_changed_by(
            submission_id, storage_spellings(SubmissionStatus.NEEDS_CLARIFICATION)
        )
        if requester is not None:
            return (requester,)
        admins = await self.user_repo.list_by_role(UserRole.ADMIN, active_only=True)
        return tuple(a.id for a in admins)
