from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.workforce_system.workforce_system.core.enums import ShiftStatus
from src.workforce_system.workforce_system.core.exceptions import InvalidTransitionError
from src.workforce_system.workforce_system.shifts.lifecycle import can_transition, select_shift_for_today
from src.workforce_system.workforce_system.shifts.model import Shift


def _shift(shift_id: str, *, employee_id="e1", day=date(2024, 1, 1), status=ShiftStatus.SCHEDULED, created_at=None) -> Shift:
    return Shift(
        shift_id=shift_id,
        employee_id=employee_id,
        employee_name="John Smith",
        location_id="l1",
        location_name="Downtown",
        shift_date=day,
        start_time=time(9, 0),
        end_time=time(17, 0),
        status=status,
        created_at=created_at,
    )


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (ShiftStatus.SCHEDULED, ShiftStatus.IN_PROGRESS, True),
        (ShiftStatus.SCHEDULED, ShiftStatus.MISSED, True),
        (ShiftStatus.IN_PROGRESS, ShiftStatus.COMPLETED, True),
        (ShiftStatus.SCHEDULED, ShiftStatus.COMPLETED, False),
        (ShiftStatus.IN_PROGRESS, ShiftStatus.MISSED, False),
        (ShiftStatus.COMPLETED, ShiftStatus.IN_PROGRESS, False),
        (ShiftStatus.MISSED, ShiftStatus.IN_PROGRESS, False),
    ],
)
def test_can_transition(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_select_shift_ignores_completed_other_days_and_other_employees():
    shifts = [
        _shift("a", status=ShiftStatus.COMPLETED),
        _shift("b", day=date(2024, 1, 2)),
        _shift("c", employee_id="e2"),
        _shift("d", status=ShiftStatus.IN_PROGRESS),
    ]
    chosen = select_shift_for_today(shifts, employee_id="e1", today=date(2024, 1, 1))
    assert chosen.shift_id == "d"


def test_select_shift_returns_none_without_candidates():
    assert select_shift_for_today([], employee_id="e1", today=date(2024, 1, 1)) is None


def test_select_shift_tie_break_is_earliest_created_then_id():
    shifts = [
        _shift("z", created_at=datetime(2023, 12, 30, 12, 0)),
        _shift("y", created_at=datetime(2023, 12, 30, 8, 0)),
        _shift("x", created_at=datetime(2023, 12, 30, 8, 0)),
    ]
    assert select_shift_for_today(shifts, employee_id="e1", today=date(2024, 1, 1)).shift_id == "x"
    assert select_shift_for_today(list(reversed(shifts)), employee_id="e1", today=date(2024, 1, 1)).shift_id == "x"


def test_lifecycle_rejects_illegal_transition(container, employee, location, fixed_now):
    shift = container.shift_service.create_shift(
        employee_id=employee.employee_id,
        location_id=location.location_id,
        shift_date="2024-01-01",
        start_time="09:00",
        end_time="17:00",
    )

    with pytest.raises(InvalidTransitionError):
        container.lifecycle.complete(shift, now=fixed_now)

    started = container.lifecycle.start(shift, now=fixed_now)
    assert started.status == ShiftStatus.IN_PROGRESS
    assert container.shifts_repo.get_by_id(shift.shift_id).status == ShiftStatus.IN_PROGRESS

    with pytest.raises(InvalidTransitionError):
        container.lifecycle.mark_missed(started, now=fixed_now)
