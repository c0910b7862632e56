"""
Row <-> domain mapping at the persistence boundary.
"""

from typing import Any, Dict

from portal.domain.entities import Submission, SubmissionStatus, TimeOffEntry
from portal.domain.status_mapping import from_storage, to_storage
from portal.models.submission import Submission as SubmissionModel
from portal.models.time_off import TimeOffEntry as TimeOffModel


def submission_to_domain(row: SubmissionModel) -> Submission:
    """Build a domain ``Submission`` from an ORM row with relationships loaded."""
    contractor = row.contractor
    manager = row.manager
    project = row.project
    return Submission(
        id=row.id,
        contractor_id=row.contractor_id,
        work_period=row.work_period,
        regular_hours=row.regular_hours,
        description=row.description,
        status=from_storage(row.status, row.paid_at),
        overtime_hours=row.overtime_hours or 0,
        overtime_description=row.overtime_description,
        total_amount=row.total_amount or 0,
        submitted_at=row.submitted_at,
        manager_id=row.manager_id,
        project_id=row.project_id,
        contractor_name=contractor.full_name if contractor else "",
        contractor_email=contractor.email if contractor else "",
        project_name=(project.name if project else None) or row.project_name or "",
        manager_name=manager.full_name if manager else "",
        contractor_type=row.contractor_type,
        rejection_reason=row.rejection_reason,
        admin_note=row.admin_note,
        manager_note=row.manager_note,
        approved_at=row.approved_at,
        approved_by=row.approved_by,
        rejected_by=row.rejected_by,
        paid_at=row.paid_at,
        invoice_number=row.invoice_number,
    )


def changes_to_row_values(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Translate domain field mutations into column values."""
    values = dict(fields)
    if "status" in values:
        values["status"] = to_storage(SubmissionStatus(values["status"]))
    return values


def time_off_to_domain(row: TimeOffModel) -> TimeOffEntry:
    return TimeOffEntry(
        id=row.id,
        name=row.name,
        start_date=row.start_date,
        end_date=row.end_date,
        scope=row.scope,
        roles=tuple(row.roles or ()),
        type=row.type,
        description=row.description,
    )
