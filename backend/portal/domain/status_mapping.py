"""
Canonical mapping between stored status strings and ``SubmissionStatus``.

This is the only place that knows how statuses are spelled in storage.
Older rows use ``draft``, ``submitted``, ``pending_review`` or ``pending_manager``
for pending work and ``clarification_requested`` for clarification, and a
paid submission was once an ``approved`` row with ``paid_at`` set.
"""

from datetime import datetime
from typing import Any, Optional, Tuple

from portal.domain.entities import SubmissionStatus

STATUS_TO_STORAGE = {
    SubmissionStatus.PENDING: "pending",
    SubmissionStatus.APPROVED: "approved",
    SubmissionStatus.REJECTED: "rejected",
    SubmissionStatus.NEEDS_CLARIFICATION: "needs_clarification",
    SubmissionStatus.PAID: "paid",
}

STORAGE_TO_STATUS = {
    "draft": SubmissionStatus.PENDING,
    "submitted": SubmissionStatus.PENDING,
    "pending_review": SubmissionStatus.PENDING,
    "pending_manager": SubmissionStatus.PENDING,
    "pending": SubmissionStatus.PENDING,
    "approved": SubmissionStatus.APPROVED,
    "rejected": SubmissionStatus.REJECTED,
    "clarification_requested": SubmissionStatus.NEEDS_CLARIFICATION,
    "needs_clarification": SubmissionStatus.NEEDS_CLARIFICATION,
    "paid": SubmissionStatus.PAID,
}


def to_storage(status: SubmissionStatus) -> str:
    """Storage spelling for a status."""
    return STATUS_TO_STORAGE[SubmissionStatus(status)]


def storage_spellings(status: SubmissionStatus) -> Tuple[str, ...]:
    """Every stored spelling that reads back as ``status``, canonical first."""
    status = SubmissionStatus(status)
    canonical = STATUS_TO_STORAGE[status]
    legacy = sorted(k for k, v in STORAGE_TO_STATUS.items() if v == status and k != canonical)
    return (canonical, *legacy)


def from_storage(value: Optional[str], paid_at: Optional[datetime] = None) -> SubmissionStatus:
    """Map a stored status (and legacy ``paid_at`` marker) to the enum. Unknown values are PENDING."""
    status = STORAGE_TO_STATUS.get((value or "").strip().lower(), SubmissionStatus.PENDING)
    if status == SubmissionStatus.APPROVED and paid_at is not None:
        return SubmissionStatus.PAID
    return status


def parse_status(value: Any) -> Optional[SubmissionStatus]:
    """
    Parse a user-supplied status in any case (``"Pending"``, ``"needs_clarification"``).

    Returns None for blank, ``"ALL"`` or unrecognised values.
    """
    if isinstance(value, SubmissionStatus):
        return value
    text = str(value or "").strip()
    if not text or text.upper() == "ALL":
        return None
    try:
        return SubmissionStatus(text.upper().replace(" ", "_").replace("-", "_"))
    except ValueError:
        return STORAGE_TO_STATUS.get(text.lower())
