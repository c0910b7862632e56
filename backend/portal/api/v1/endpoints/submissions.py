"""
Submission API endpoints.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from portal.api.v1.middleware import require_actor
from portal.controllers.submission_controller import SubmissionController
from portal.db.session import get_db
from portal.domain.entities import TransitionAction
from portal.models.user import User
from portal.schemas.submission import (
    NoteRequest,
    SubmissionCreate,
    SubmissionListResponse,
    SubmissionResponse,
    SubmissionStatusHistoryResponse,
    TransitionRequest,
)

router = APIRouter()


@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def create_submission(
    submission_data: SubmissionCreate,
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    """Submit hours for a work period (contractors only)."""
    controller = SubmissionController(db)
    return await controller.create_submission(submission_data, actor)


@router.get("", response_model=SubmissionListResponse)
async def list_submissions(
    status: Optional[str] = Query(None, description="Status name or ALL"),
    search: Optional[str] = Query(None),
    project: Optional[str] = Query(None),
    manager: Optional[str] = Query(None),
    month: Optional[str] = Query(None, description="YYYY-MM or 'January 2026'"),
    contractor_type: Optional[str] = Query(None),
    sort_by: str = Query("submitted_at"),
    descending: bool = Query(True),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> SubmissionListResponse:
    """List submissions visible to the current user."""
    controller = SubmissionController(db)
    return await controller.list_submissions(
        actor,
        status=status,
        search=search,
        project=project,
        manager=manager,
        month=month,
        contractor_type=contractor_type,
        sort_by=sort_by,
        descending=descending,
        skip=skip,
        limit=limit,
    )


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: UUID,
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    controller = SubmissionController(db)
    return await controller.get_submission(submission_id, actor)


@router.get("/{submission_id}/history", response_model=List[SubmissionStatusHistoryResponse])
async def get_submission_history(
    submission_id: UUID,
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> List[SubmissionStatusHistoryResponse]:
    """Status changes for a submission, oldest first."""
    controller = SubmissionController(db)
    return await controller.list_history(submission_id, actor)


@router.post("/{submission_id}/transitions", response_model=SubmissionResponse)
async def transition_submission(
    submission_id: UUID,
    request: TransitionRequest,
    actor: User = Depends(require_actor),
    db: AsyncSession = Depends(get_db),
) -> SubmissionResponse:
    """Apply any lifecycle action by name."""
    controller = SubmissionController(db)
    return await controller.transition(submission_id, request.action, actor, request.note)


def _action_route(path: str, action: TransitionAction, summary: str):
    async def endpoint(
        submission_id: UUID,
        request: Optional[NoteRequest] = None,
        actor: User = Depends(require_actor),
        db: AsyncSession = Depends(get_db),
    ) -> SubmissionResponse:
        controller = SubmissionController(db)
        note = request.note if request else None
        return await controller.transition(submission_id, action, actor, note)

    endpoint.__name__ = f"{action.value.lower()}_submission"
    router.add_api_route(
        f"/{{submission_id}}/{path}",
        endpoint,
        methods=["POST"],
        response_model=SubmissionResponse,
        summary=summary,
    )


_action_route("approve", TransitionAction.APPROVE, "Approve a pending submission")
_action_route("reject", TransitionAction.REJECT, "Reject a pending submission with a reason")
_action_route("request-clarification", TransitionAction.REQUEST_CLARIFICATION, "Ask the manager for clarification")
_action_route("resubmit", TransitionAction.RESUBMIT, "Answer a clarification request and approve")
_action_route("reject-to-contractor", TransitionAction.REJECT_TO_CONTRACTOR, "Reject after a clarification request")
_action_route("mark-paid", TransitionAction.MARK_PAID, "Record payment for an approved submission")
