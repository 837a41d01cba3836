from __future__ import annotations

import json
from dataclasses import replace
from datetime import date, datetime

import pytest

from src.workforce_system.workforce_system.core.enums import ShiftStatus
from src.workforce_system.workforce_system.core.exceptions import InvalidTransitionError, NotFoundError, ValidationError


def _create(container, employee, location, day="2024-01-01", start="09:00", end="17:00"):
    return container.shift_service.create_shift(
        employee_id=employee.employee_id,
        location_id=location.location_id,
        shift_date=day,
        start_time=start,
        end_time=end,
    )


def test_create_shift_copies_display_names(container, employee, location):
    shift = _create(container, employee, location)

    assert shift.status == ShiftStatus.SCHEDULED
    assert shift.employee_name == "John Smith"
    assert shift.location_name == "Downtown Office Complex"
    assert shift.created_at is not None


def test_create_shift_rejects_unknown_employee_or_location(container, employee, location):
    with pytest.raises(NotFoundError, match="Invalid employee or location selected"):
        container.shift_service.create_shift(
            employee_id="nope",
            location_id=location.location_id,
            shift_date="2024-01-01",
            start_time="09:00",
            end_time="17:00",
        )
    with pytest.raises(NotFoundError):
        container.shift_service.create_shift(
            employee_id=employee.employee_id,
            location_id="nope",
            shift_date="2024-01-01",
            start_time="09:00",
            end_time="17:00",
        )


@pytest.mark.parametrize("day,start,end", [("01/01/2024", "09:00", "17:00"), ("2024-01-01", "9am", "17:00"), ("2024-01-01", "09:00", "")])
def test_create_shift_validates_date_and_times(container, employee, location, day, start, end):
    with pytest.raises(ValidationError):
        _create(container, employee, location, day=day, start=start, end=end)


def test_list_shifts_filters_and_refreshes_names(container, employee, location):
    _create(container, employee, location, day="2024-01-02", start="08:00")
    _create(container, employee, location, day="2024-01-01", start="13:00")
    _create(container, employee, location, day="2024-01-01", start="07:00")

    container.employee_service.update_employee(
        employee.employee_id, name="Johnny Smith", email=employee.email, phone=employee.phone, position=employee.position
    )

    day_one = container.shift_service.list_shifts(shift_date=date(2024, 1, 1))
    assert [s.start_time.hour for s in day_one] == [7, 13]
    assert all(s.employee_name == "Johnny Smith" for s in day_one)
    assert len(container.shift_service.list_shifts(employee_id=employee.employee_id)) == 3
    assert container.shift_service.list_shifts(employee_id="someone-else") == []


def test_upcoming_shifts_are_sorted_and_limited(container, employee, location):
    for day in ("2024-01-05", "2023-12-31", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-01", "2024-01-06"):
        _create(container, employee, location, day=day)

    upcoming = container.shift_service.upcoming_shifts(today=date(2024, 1, 1), employee_id=employee.employee_id)
    assert [s.shift_date.day for s in upcoming] == [1, 2, 3, 4, 5]


def test_delete_shift(container, employee, location):
    shift = _create(container, employee, location)
    container.shift_service.delete_shift(shift.shift_id)

    assert container.shift_service.list_shifts() == []
    with pytest.raises(NotFoundError):
        container.shift_service.delete_shift(shift.shift_id)


def test_mark_missed_only_from_scheduled(container, employee, location, fixed_now):
    shift = _create(container, employee, location)
    missed = container.shift_service.mark_missed(shift.shift_id, now=fixed_now)
    assert missed.status == ShiftStatus.MISSED

    with pytest.raises(InvalidTransitionError):
        container.shift_service.mark_missed(shift.shift_id, now=fixed_now)


def test_sweep_missed_marks_only_past_scheduled_shifts(container, employee, location, fixed_now):
    past = _create(container, employee, location, day="2023-12-30")
    started = _create(container, employee, location, day="2023-12-31")
    container.lifecycle.start(started, now=fixed_now)
    today = _create(container, employee, location, day="2024-01-01")

    missed = container.shift_service.sweep_missed(before=date(2024, 1, 1), now=fixed_now)

    assert [s.shift_id for s in missed] == [past.shift_id]
    assert container.shift_service.get_shift(started.shift_id).status == ShiftStatus.IN_PROGRESS
    assert container.shift_service.get_shift(today.shift_id).status == ShiftStatus.SCHEDULED


def test_shift_for_today_matches_by_id_only(container, employee, location):
    shift = _create(container, employee, location)
    container.shifts_repo.update(replace(shift, employee_id="legacy-id"))

    assert container.shift_service.shift_for_today(employee.employee_id, today=date(2024, 1, 1)) is None


def test_backfill_employee_ids_relinks_unique_names(container, store, employee, location):
    shift = _create(container, employee, location)
    records = json.loads(store.get("shifts"))
    records[0]["employeeId"] = "legacy-id"
    store.set("shifts", json.dumps(records))

    assert container.shift_service.backfill_employee_ids() == 1
    assert container.shift_service.get_shift(shift.shift_id).employee_id == employee.employee_id
    assert container.shift_service.backfill_employee_ids() == 0


def test_backfill_employee_ids_skips_ambiguous_names(container, store, employee, location):
    container.employee_service.create_employee(
        name="John Smith", email="john2@erosecurity.com", phone="+1-555-0109", position="Guard"
    )
    shift = _create(container, employee, location)
    records = json.loads(store.get("shifts"))
    records[0]["employeeId"] = "legacy-id"
    store.set("shifts", json.dumps(records))

    assert container.shift_service.backfill_employee_ids() == 0
    assert container.shift_service.get_shift(shift.shift_id).employee_id == "legacy-id"


def test_unknown_status_reads_as_scheduled(container, store, employee, location):
    shift = _create(container, employee, location)
    records = json.loads(store.get("shifts"))
    records[0]["status"] = "cancelled"
    records[0]["createdAt"] = "2023-12-30T08:00:00.000Z"
    store.set("shifts", json.dumps(records))

    loaded = container.shift_service.get_shift(shift.shift_id)
    assert loaded.status == ShiftStatus.SCHEDULED
    assert isinstance(loaded.created_at, datetime)
