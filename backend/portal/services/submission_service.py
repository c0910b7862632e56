"""
Submission service with business logic.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Union
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.config import settings
from portal.services.base_service import BaseService
from portal.services.submission_workflow_service import SubmissionWorkflowService
from portal.db.mappers import submission_to_domain
from portal.db.repositories.project_repository import ProjectRepository
from portal.db.repositories.submission_repository import SubmissionRepository
from portal.db.repositories.submission_status_history_repository import SubmissionStatusHistoryRepository
from portal.domain.amounts import calculate_total_for_storage
from portal.domain.entities import Submission, SubmissionStatus, TransitionAction, UserRole, period_bounds
from portal.domain.errors import NotFoundError, PermissionDeniedError, ValidationError
from portal.domain.filters import SubmissionFilter, SubmissionSort, filter_submissions
from portal.domain.status_mapping import from_storage, to_storage
from portal.domain.transitions import allowed_actions
from portal.models.user import User
from portal.schemas.submission import (
    SubmissionCreate,
    SubmissionResponse,
    SubmissionStatusHistoryResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "General Work"


def can_view(submission: Submission, actor: User) -> bool:
    """Contractors see their own submissions, managers those assigned to them, admins all."""
    if actor.role == UserRole.ADMIN:
        return True
    if actor.role == UserRole.MANAGER:
        return submission.manager_id == actor.id
    return submission.contractor_id == actor.id


def to_response(submission: Submission, actor_role: Union[UserRole, str]) -> SubmissionResponse:
    return SubmissionResponse(
        id=submission.id,
        contractor_id=submission.contractor_id,
        contractor_name=submission.contractor_name,
        contractor_email=submission.contractor_email,
        manager_id=submission.manager_id,
        manager_name=submission.manager_name,
        project_id=submission.project_id,
        project_name=submission.project_name,
        contractor_type=submission.contractor_type,
        work_period=submission.work_period,
        period_start=submission.period_start.isoformat(),
        period_end=submission.period_end.isoformat(),
        regular_hours=submission.regular_hours,
        overtime_hours=submission.overtime_hours,
        overtime_description=submission.overtime_description,
        description=submission.description,
        total_amount=submission.total_amount,
        status=submission.status,
        submitted_at=submission.submitted_at,
        approved_at=submission.approved_at,
        paid_at=submission.paid_at,
        invoice_number=submission.invoice_number,
        rejection_reason=submission.rejection_reason,
        admin_note=submission.admin_note,
        manager_note=submission.manager_note,
        allowed_actions=allowed_actions(submission, actor_role),
    )


class SubmissionService(BaseService):
    """Service for submission operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.submission_repo = SubmissionRepository(session)
        self.project_repo = ProjectRepository(session)
        self.status_history_repo = SubmissionStatusHistoryRepository(session)
        self.workflow = SubmissionWorkflowService(session)

    async def create_submission(self, submission_data: SubmissionCreate, actor: User) -> SubmissionResponse:
        """
        Create a PENDING submission for the acting contractor.

        Only one live submission is allowed per work period; a REJECTED one
        may be replaced by a new submission.
        """
        self._require_role(actor, UserRole.CONTRACTOR)

        project = None
        if submission_data.project_id:
            project = await self.project_repo.get(submission_data.project_id)
            if not project:
                raise NotFoundError("Project", submission_data.project_id)

        # Domain construction enforces hours, description and overtime rules
        draft = Submission(
            id=uuid4(),
            contractor_id=actor.id,
            work_period=submission_data.work_period,
            regular_hours=submission_data.regular_hours,
            overtime_hours=submission_data.overtime_hours,
            overtime_description=submission_data.overtime_description,
            description=submission_data.description,
            contractor_type=actor.contractor_type,
        )

        existing = await self.submission_repo.list_statuses_for_period(actor.id, draft.work_period)
        if any(from_storage(s) != SubmissionStatus.REJECTED for s in existing):
            raise ValidationError("work_period", f"a submission for {draft.work_period} already exists")

        total = calculate_total_for_storage(
            actor.contractor_type,
            draft.regular_hours,
            draft.overtime_hours,
            hourly_rate=actor.hourly_rate,
            overtime_rate=actor.overtime_rate,
            monthly_rate=actor.monthly_rate,
            default_hourly_rate=settings.DEFAULT_HOURLY_RATE,
            overtime_multiplier=settings.DEFAULT_OVERTIME_MULTIPLIER,
        )
        period_start, period_end = period_bounds(draft.work_period)
        manager_id = actor.manager_id or (project.manager_id if project else None)

        row = await self.submission_repo.create(
            id=draft.id,
            contractor_id=actor.id,
            manager_id=manager_id,
            project_id=project.id if project else None,
            project_name=project.name if project else DEFAULT_PROJECT_NAME,
            work_period=draft.work_period,
            period_start=period_start,
            period_end=period_end,
            description=draft.description.strip(),
            regular_hours=draft.regular_hours,
            overtime_hours=draft.overtime_hours,
            overtime_description=draft.overtime_description,
            contractor_type=draft.contractor_type,
            total_amount=total,
            status=to_storage(SubmissionStatus.PENDING),
            submitted_at=datetime.now(timezone.utc),
        )
        await self.session.commit()
        logger.info(
            "Submission created",
            extra={"submission_id": str(row.id), "contractor_id": str(actor.id), "work_period": draft.work_period},
        )
        return to_response(await self.workflow.load(row.id), actor.role)

    async def _load_visible(self, submission_id: UUID, actor: User) -> Submission:
        submission = await self.workflow.load(submission_id)
        if not can_view(submission, actor):
            raise PermissionDeniedError("You do not have access to this submission")
        return submission

    async def get_submission(self, submission_id: UUID, actor: User) -> SubmissionResponse:
        return to_response(await self._load_visible(submission_id, actor), actor.role)

    async def list_submissions(
        self,
        actor: User,
        criteria: Optional[SubmissionFilter] = None,
        sort: Optional[SubmissionSort] = None,
    ) -> List[SubmissionResponse]:
        """Role-scoped submissions narrowed by ``criteria`` and ordered by ``sort``."""
        if actor.role == UserRole.ADMIN:
            rows = await self.submission_repo.list_all()
        elif actor.role == UserRole.MANAGER:
            rows = await self.submission_repo.list_for_manager(actor.id)
        else:
            rows = await self.submission_repo.list_for_contractor(actor.id)
        submissions = filter_submissions((submission_to_domain(r) for r in rows), criteria, sort)
        return [to_response(s, actor.role) for s in submissions]

    async def list_history(self, submission_id: UUID, actor: User) -> List[SubmissionStatusHistoryResponse]:
        await self._load_visible(submission_id, actor)
        rows = await self.status_history_repo.list_by_submission(submission_id)
        return [
            SubmissionStatusHistoryResponse(
                id=row.id,
                submission_id=row.submission_id,
                from_status=from_storage(row.from_status) if row.from_status else None,
                to_status=from_storage(row.to_status),
                action=row.action,
                note=row.note,
                changed_by=row.changed_by,
                changed_by_name=row.changed_by_user.full_name if row.changed_by_user else None,
                changed_at=row.changed_at,
            )
            for row in rows
        ]

    async def act(
        self,
        submission_id: UUID,
        action: Union[TransitionAction, str],
        actor: User,
        note: Optional[str] = None,
    ) -> SubmissionResponse:
        """Apply ``action`` on behalf of ``actor`` to a submission they can see."""
        await self._load_visible(submission_id, actor)
        updated = await self.workflow.perform_action(submission_id, action, actor, note)
        return to_response(updated, actor.role)

