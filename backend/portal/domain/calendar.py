"""
Time-off calendar predicates.
"""

from datetime import date, timedelta
from typing import Iterable, Optional, Set, Union

from portal.domain.entities import TimeOffEntry, TimeOffScope, UserRole


def is_affecting_range(entry: TimeOffEntry, range_start: date, range_end: date) -> bool:
    """True if ``entry`` overlaps ``[range_start, range_end]``; an open end means ongoing."""
    return entry.start_date <= range_end and (entry.end_date is None or entry.end_date >= range_start)


def applies_to_role(entry: TimeOffEntry, role: Union[UserRole, str, None]) -> bool:
    """Scope ALL matches everyone; scope ROLES matches listed roles, case-insensitively."""
    if entry.scope == TimeOffScope.ALL:
        return True
    if role is None:
        return False
    wanted = str(getattr(role, "value", role)).strip().upper()
    return wanted in entry.roles


def affects_contractor(
    entry: TimeOffEntry,
    role: Union[UserRole, str, None],
    range_start: date,
    range_end: date,
) -> bool:
    return applies_to_role(entry, role) and is_affecting_range(entry, range_start, range_end)


def count_affected_contractors(entry: TimeOffEntry, contractors: Iterable) -> int:
    """
    Number of active contractors ``entry`` applies to.

    ``contractors`` are objects with ``role`` and ``is_active`` attributes.
    """
    return sum(
        1
        for person in contractors
        if getattr(person, "is_active", True)
        and str(getattr(person.role, "value", person.role)).upper() == UserRole.CONTRACTOR.value
        and applies_to_role(entry, person.role)
    )


def blocked_dates(
    entries: Iterable[TimeOffEntry],
    role: Union[UserRole, str, None],
    window_start: date,
    window_end: date,
) -> Set[date]:
    """Days within the window that time-off entries block for ``role``."""
    blocked: Set[date] = set()
    for entry in entries:
        if not affects_contractor(entry, role, window_start, window_end):
            continue
        day = max(entry.start_date, window_start)
        last = min(entry.end_date or window_end, window_end)
        while day <= last:
            blocked.add(day)
            day += timedelta(days=1)
    return blocked


def entries_affecting(
    entries: Iterable[TimeOffEntry],
    range_start: date,
    range_end: date,
    role: Optional[Union[UserRole, str]] = None,
) -> list:
    """Entries overlapping the range, optionally narrowed to a role, ordered by start date."""
    selected = [
        e for e in entries
        if is_affecting_range(e, range_start, range_end) and (role is None or applies_to_role(e, role))
    ]
    return sorted(selected, key=lambda e: (e.start_date, e.name))
