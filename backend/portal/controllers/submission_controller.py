"""
Submission controller.
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession

from portal.controllers.base_controller import BaseController
from portal.services.submission_service import SubmissionService
from portal.domain.entities import TransitionAction
from portal.domain.filters import SubmissionFilter, SubmissionSort
from portal.models.user import User
from portal.schemas.submission import (
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionResponse,
    SubmissionStatusHistoryResponse,
)


class SubmissionController(BaseController):
    """Controller for submission operations."""

    def __init__(self, session: AsyncSession):
        self.submission_service = SubmissionService(session)

    async def create_submission(self, submission_data: SubmissionCreate, actor: User) -> SubmissionResponse:
        return await self.submission_service.create_submission(submission_data, actor)

    async def get_submission(self, submission_id: UUID, actor: User) -> SubmissionResponse:
        return await self.submission_service.get_submission(submission_id, actor)

    async def list_submissions(
        self,
        actor: User,
        status: Optional[str] = None,
        search: Optional[str] = None,
        project: Optional[str] = None,
        manager: Optional[str] = None,
        month: Optional[str] = None,
        contractor_type: Optional[str] = None,
        sort_by: str = "submitted_at",
        descending: bool = True,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> SubmissionListResponse:
        """One page of the submissions visible to ``actor``; ``total`` counts every match."""
        items = await self.submission_service.list_submissions(
            actor,
            SubmissionFilter(
                status=status,
                search=search,
                project=project,
                manager=manager,
                month=month,
                contractor_type=contractor_type,
            ),
            SubmissionSort(field=sort_by, descending=descending),
        )
        page = items[skip:] if limit is None else items[skip:skip + limit]
        return SubmissionListResponse(items=page, total=len(items))

    async def list_history(self, submission_id: UUID, actor: User) -> List[SubmissionStatusHistoryResponse]:
        return await self.submission_service.list_history(submission_id, actor)

    async def transition(
        self,
        submission_id: UUID,
        action: TransitionAction,
        actor: User,
        note: Optional[str] = None,
    ) -> SubmissionResponse:
        return await self.submission_service.act(submission_id, action, actor, note)
