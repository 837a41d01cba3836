from __future__ import annotations

import json
import random

import pytest

from src.workforce_system.workforce_system.checkins.geolocation import GeoPosition
from src.workforce_system.workforce_system.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.workforce_system.workforce_system.employees.service import EmployeeService


def _create(container, **overrides):
    fields = {
        "name": "Sarah Johnson",
        "email": "sarah@erosecurity.com",
        "phone": "+1-555-0102",
        "position": "Senior Security Officer",
    }
    fields.update(overrides)
    return container.employee_service.create_employee(**fields)


def test_create_employee_assigns_five_digit_pin(container):
    e = _create(container)

    assert e.pin is not None
    assert len(e.pin) == 5 and e.pin.isdigit()
    assert 10000 <= int(e.pin) <= 99999
    assert e.is_active is True
    assert container.employee_service.find_by_pin(e.pin).employee_id == e.employee_id


def test_generated_pins_are_unique(container):
    pins = {_create(container, email=f"user{i}@x.com").pin for i in range(20)}
    assert len(pins) == 20


def test_generate_pin_skips_used_values(container):
    rng = random.Random(7)
    first = random.Random(7).randint(10000, 99999)
    svc = EmployeeService(container.employees_repo, container.shifts_repo, container.checkins_repo, rng=rng)

    pin = svc.generate_pin({str(first)})
    assert pin != str(first)


def test_duplicate_email_is_rejected_case_insensitively(container, store):
    _create(container, email="A@X.com")
    before = store.get("employees")

    with pytest.raises(ConflictError):
        _create(container, name="Other", email="a@x.com")

    assert store.get("employees") == before
    assert len(container.employee_service.list_employees()) == 1


def test_duplicate_pin_is_rejected(container):
    _create(container, pin="11111")
    with pytest.raises(ConflictError):
        _create(container, email="b@x.com", pin="11111")


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": "  "},
        {"email": "not-an-email"},
        {"phone": "abc"},
        {"position": ""},
        {"pin": "1234"},
    ],
)
def test_create_employee_validates_fields(container, overrides):
    with pytest.raises(ValidationError):
        _create(container, **overrides)


def test_update_employee_keeps_own_email_and_pin(container):
    e = _create(container, pin="22222")

    updated = container.employee_service.update_employee(
        e.employee_id,
        name="Sarah J.",
        email=e.email.upper(),
        phone=e.phone,
        position=e.position,
    )

    assert updated.name == "Sarah J."
    assert updated.pin == "22222"
    assert container.employee_service.get_employee(e.employee_id).name == "Sarah J."


def test_update_employee_rejects_email_of_another(container):
    _create(container, email="one@x.com")
    second = _create(container, email="two@x.com")

    with pytest.raises(ConflictError):
        container.employee_service.update_employee(
            second.employee_id, name="Two", email="ONE@x.com", phone="+1-555-0199", position="Guard"
        )


def test_update_unknown_employee_is_not_found(container):
    with pytest.raises(NotFoundError):
        container.employee_service.update_employee(
            "missing", name="X", email="x@x.com", phone="+1-555-0100", position="Guard"
        )


def test_toggle_employee_active(container):
    e = _create(container)
    assert container.employee_service.toggle_employee_active(e.employee_id).is_active is False
    assert container.employee_service.toggle_employee_active(e.employee_id).is_active is True


def test_delete_employee_cascades_to_shifts_and_checkins(container, employee, location, fixed_now):
    other = _create(container)
    container.shift_service.create_shift(
        employee_id=employee.employee_id,
        location_id=location.location_id,
        shift_date="2024-01-01",
        start_time="09:00",
        end_time="17:00",
    )
    kept = container.shift_service.create_shift(
        employee_id=other.employee_id,
        location_id=location.location_id,
        shift_date="2024-01-01",
        start_time="09:00",
        end_time="17:00",
    )

    container.checkin_service.check_in(employee.employee_id, position=GeoPosition(40.0, -74.0), now=fixed_now)

    container.employee_service.delete_employee(employee.employee_id)

    assert [s.shift_id for s in container.shift_service.list_shifts()] == [kept.shift_id]
    assert container.checkins_repo.list_all() == []
    with pytest.raises(NotFoundError):
        container.employee_service.get_employee(employee.employee_id)

    # absent id is a no-op
    container.employee_service.delete_employee(employee.employee_id)


def test_backfill_missing_pins(container, store):
    store.set(
        "employees",
        json.dumps(
            [
                {"id": "1", "name": "A", "email": "a@x.com", "phone": "1234567", "position": "G", "hireDate": "2023-01-15", "isActive": True},
                {"id": "2", "name": "B", "email": "b@x.com", "phone": "1234567", "position": "G", "hireDate": "2023-01-15", "isActive": True, "pin": "55555"},
            ]
        ),
    )

    assert container.employee_service.backfill_missing_pins() == 1
    pins = [e.pin for e in container.employee_service.list_employees()]
    assert pins[1] == "55555"
    assert pins[0] and pins[0] != "55555"
    assert container.employee_service.backfill_missing_pins() == 0
