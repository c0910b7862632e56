"""
Time-off calendar overlap tests.
"""

from datetime import date
from types import SimpleNamespace

import pytest

from portal.domain.calendar import (
    affects_contractor,
    applies_to_role,
    blocked_dates,
    count_affected_contractors,
    entries_affecting,
    is_affecting_range,
)
from portal.domain.entities import TimeOffEntry, TimeOffScope, UserRole
from portal.domain.errors import ValidationError

JAN_START, JAN_END = date(2026, 1, 1), date(2026, 1, 31)


def entry(start, end=None, scope=TimeOffScope.ALL, roles=(), name="Holiday"):
    return TimeOffEntry(id=None, name=name, start_date=start, end_date=end, scope=scope, roles=roles)


@pytest.mark.parametrize(
    "start,end,expected",
    [
        (date(2026, 1, 10), date(2026, 1, 12), True),   # inside
        (date(2025, 12, 24), date(2026, 1, 2), True),   # straddles start
        (date(2026, 1, 31), date(2026, 2, 3), True),    # touches last day
        (date(2025, 12, 1), date(2025, 12, 31), False), # ends the day before
        (date(2026, 2, 1), date(2026, 2, 5), False),    # starts the day after
        (date(2025, 6, 1), None, True),                 # ongoing
        (date(2026, 2, 1), None, False),                # ongoing, starts after
    ],
)
def test_is_affecting_range(start, end, expected):
    assert is_affecting_range(entry(start, end), JAN_START, JAN_END) is expected


def test_applies_to_role():
    everyone = entry(date(2026, 1, 1))
    managers = entry(date(2026, 1, 1), scope=TimeOffScope.ROLES, roles=("manager",))

    assert applies_to_role(everyone, UserRole.CONTRACTOR)
    assert applies_to_role(managers, "Manager")
    assert not applies_to_role(managers, UserRole.CONTRACTOR)
    assert not applies_to_role(managers, None)


def test_affects_contractor_combines_scope_and_range():
    contractors_only = entry(date(2026, 1, 5), date(2026, 1, 6), scope=TimeOffScope.ROLES, roles=(UserRole.CONTRACTOR,))
    assert affects_contractor(contractors_only, UserRole.CONTRACTOR, JAN_START, JAN_END)
    assert not affects_contractor(contractors_only, UserRole.CONTRACTOR, date(2026, 2, 1), date(2026, 2, 28))
    assert not affects_contractor(contractors_only, UserRole.ADMIN, JAN_START, JAN_END)


def test_count_affected_contractors_counts_active_contractors_only():
    people = [
        SimpleNamespace(role=UserRole.CONTRACTOR, is_active=True),
        SimpleNamespace(role=UserRole.CONTRACTOR, is_active=True),
        SimpleNamespace(role=UserRole.CONTRACTOR, is_active=False),
        SimpleNamespace(role=UserRole.MANAGER, is_active=True),
    ]
    assert count_affected_contractors(entry(date(2026, 1, 1)), people) == 2
    managers_only = entry(date(2026, 1, 1), scope=TimeOffScope.ROLES, roles=("MANAGER",))
    assert count_affected_contractors(managers_only, people) == 0


def test_blocked_dates_clips_to_window():
    entries = [
        entry(date(2025, 12, 30), date(2026, 1, 2), name="New Year"),
        entry(date(2026, 1, 30), None, name="Office move"),
        entry(date(2026, 1, 15), date(2026, 1, 15), scope=TimeOffScope.ROLES, roles=("ADMIN",), name="Offsite"),
    ]
    days = blocked_dates(entries, UserRole.CONTRACTOR, JAN_START, JAN_END)
    assert sorted(days) == [date(2026, 1, 1), date(2026, 1, 2), date(2026, 1, 30), date(2026, 1, 31)]


def test_entries_affecting_orders_by_start():
    late = entry(date(2026, 1, 20), name="Late")
    early = entry(date(2026, 1, 3), name="Early")
    outside = entry(date(2026, 3, 1), name="Spring")
    assert [e.name for e in entries_affecting([late, outside, early], JAN_START, JAN_END)] == ["Early", "Late"]


def test_entry_validation():
    with pytest.raises(ValidationError):
        entry(date(2026, 1, 5), date(2026, 1, 4))
    with pytest.raises(ValidationError):
        entry(date(2026, 1, 5), scope=TimeOffScope.ROLES)
    with pytest.raises(ValidationError):
        TimeOffEntry(id=None, name="  ", start_date=date(2026, 1, 5))
    assert entry(date(2026, 1, 5), scope="roles", roles=[UserRole.MANAGER]).roles == ("MANAGER",)
