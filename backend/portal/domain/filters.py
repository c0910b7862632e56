"""
In-memory query/filter layer over submissions.

The caller supplies the candidate list (already scoped to the actor); this
module only narrows and orders it. Every filter is optional, blank or
unrecognised values never exclude anything, and filters compose with AND.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Tuple

from portal.domain.entities import ContractorType, Submission, parse_work_period
from portal.domain.errors import ValidationError
from portal.domain.status_mapping import parse_status

_MONTH_NAMES = {
    name.lower(): index
    for index, name in enumerate(
        ["January", "February", "March", "April", "May", "June", "July",
         "August", "September", "October", "November", "December"],
        start=1,
    )
}
_MONTH_YEAR_RE = re.compile(r"^([A-Za-z]+)\s+(\d{4})$")

SORTABLE_FIELDS = (
    "submitted_at",
    "work_period",
    "total_amount",
    "regular_hours",
    "overtime_hours",
    "contractor_name",
    "project_name",
    "status",
)


@dataclass(frozen=True)
class SubmissionFilter:
    """Filter criteria; every field is optional."""
    status: Optional[str] = None
    search: Optional[str] = None
    project: Optional[str] = None
    manager: Optional[str] = None
    month: Optional[Any] = None
    contractor_type: Optional[str] = None


@dataclass(frozen=True)
class SubmissionSort:
    """Sort order; defaults to newest submission first."""
    field: str = "submitted_at"
    descending: bool = True


def _text(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def parse_month(value: Any) -> Optional[Tuple[int, int]]:
    """
    ``(year, month)`` for ``YYYY-MM``, ``"January 2026"`` or a date.

    Returns None for blank or unparseable input.
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.year, value.month
    text = str(value).strip()
    if not text:
        return None
    match = _MONTH_YEAR_RE.match(text)
    if match:
        month = _MONTH_NAMES.get(match.group(1).lower())
        return (int(match.group(2)), month) if month else None
    try:
        return parse_work_period(text)
    except ValidationError:
        return None


def _matches_search(submission: Submission, needle: str) -> bool:
    haystacks = (
        submission.contractor_name,
        submission.contractor_email,
        submission.project_name,
        submission.description,
    )
    return any(needle in (h or "").lower() for h in haystacks)


def matches(submission: Submission, criteria: SubmissionFilter) -> bool:
    """True if ``submission`` satisfies every active filter in ``criteria``."""
    status = parse_status(criteria.status)
    if status is not None and submission.status != status:
        return False

    needle = _text(criteria.search)
    if needle and not _matches_search(submission, needle):
        return False

    project = _text(criteria.project)
    if project and _text(submission.project_name) != project:
        return False

    manager = _text(criteria.manager)
    if manager and _text(submission.manager_name) != manager:
        return False

    month = parse_month(criteria.month)
    if month is not None and parse_work_period(submission.work_period) != month:
        return False

    contractor_type = _text(criteria.contractor_type).upper()
    if contractor_type in ContractorType.__members__ and submission.contractor_type.value != contractor_type:
        return False

    return True


def _sort_key(field_name: str):
    def key(submission: Submission):
        value = getattr(submission, field_name)
        if value is None:
            # Missing values sort before everything else
            return (0, "")
        if isinstance(value, str):
            return (1, value.lower())
        return (1, value)
    return key


def sort_submissions(submissions: Iterable[Submission], sort: Optional[SubmissionSort] = None) -> List[Submission]:
    """Order by ``sort.field``; ties broken by id ascending regardless of direction."""
    sort = sort or SubmissionSort()
    field_name = sort.field if sort.field in SORTABLE_FIELDS else "submitted_at"
    # Stable two-pass sort keeps the id tie-break ascending
    ordered = sorted(submissions, key=lambda s: str(s.id))
    return sorted(ordered, key=_sort_key(field_name), reverse=sort.descending)


def filter_submissions(
    submissions: Iterable[Submission],
    criteria: Optional[SubmissionFilter] = None,
    sort: Optional[SubmissionSort] = None,
) -> List[Submission]:
    """Matching subset of ``submissions`` in the requested order."""
    criteria = criteria or SubmissionFilter()
    return sort_submissions((s for s in submissions if matches(s, criteria)), sort)
