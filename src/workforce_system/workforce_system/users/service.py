from __future__ import annotations

from werkzeug.security import check_password_hash

from ..common.validators import require_pin
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import SessionUser
from .session import SessionContext

ADMIN_USER_ID = "admin"


class AuthService:
    """Use case: log in as the administrator or as an employee by PIN.

    Not a security model: the admin password is a single configured hash and
    PINs are five digits.
    """

    def __init__(self, employees: EmployeeRepository, session: SessionContext, *, admin_password_hash: str):
        self._employees = employees
        self._session = session
        self._admin_password_hash = admin_password_hash

    def login_admin(self, password: str) -> SessionUser:
        try:
            ok = check_password_hash(self._admin_password_hash, password or "")
        except (ValueError, TypeError):
            # e.g. placeholder or malformed hashes in settings
            ok = False
        if not ok:
            raise AuthenticationError("Invalid admin password")

        return self._session.login(
            SessionUser(user_id=ADMIN_USER_ID, name="Admin User", role=Role.ADMIN, email="admin@erosecurity.com")
        )

    def login_with_pin(self, pin: str) -> SessionUser:
        try:
            pin = require_pin(pin)
        except ValidationError:
            raise AuthenticationError("Invalid PIN")

        employee = self._employees.get_by_pin(pin)
        if not employee or not employee.is_active:
            raise AuthenticationError("Invalid PIN")

        return self._session.login(
            SessionUser(
                user_id=employee.employee_id,
                name=employee.name,
                role=Role.EMPLOYEE,
                email=employee.email,
                pin=employee.pin,
            )
        )

    def logout(self) -> None:
        self._session.logout()
