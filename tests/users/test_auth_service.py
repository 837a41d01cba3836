from __future__ import annotations

import pytest

from src.workforce_system.workforce_system.core.enums import Role
from src.workforce_system.workforce_system.core.exceptions import AuthenticationError
from src.workforce_system.workforce_system.users.session import SessionContext

ADMIN_PASSWORD = "admin123"


def test_admin_login_and_logout(container, store):
    user = container.auth_service.login_admin(ADMIN_PASSWORD)

    assert user.role == Role.ADMIN
    assert container.session.current == user
    assert store.get("user") is not None

    container.auth_service.logout()
    assert container.session.current is None
    assert store.get("user") is None


def test_admin_login_rejects_wrong_password(container):
    with pytest.raises(AuthenticationError):
        container.auth_service.login_admin("wrong")


def test_pin_login(container, employee):
    user = container.auth_service.login_with_pin("12345")

    assert user.user_id == employee.employee_id
    assert user.role == Role.EMPLOYEE
    assert container.session.current == user


@pytest.mark.parametrize("pin", ["99999", "123", "abcde", ""])
def test_pin_login_rejects_unknown_or_malformed(container, employee, pin):
    with pytest.raises(AuthenticationError):
        container.auth_service.login_with_pin(pin)


def test_inactive_employee_cannot_log_in(container, employee):
    container.employee_service.toggle_employee_active(employee.employee_id)
    with pytest.raises(AuthenticationError):
        container.auth_service.login_with_pin("12345")


def test_session_is_restored_from_storage(container, store, employee):
    container.auth_service.login_with_pin("12345")

    restored = SessionContext(store).load()
    assert restored.user_id == employee.employee_id
    assert restored.pin == "12345"


def test_unreadable_session_record_is_ignored(store):
    store.set("user", "{oops")
    assert SessionContext(store).load() is None
