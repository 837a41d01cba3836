from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CheckIn


class CheckInRepository(Protocol):
    def list_all(self) -> Sequence[CheckIn]:
        raise NotImplementedError

    def get_by_id(self, checkin_id: str) -> Optional[CheckIn]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[CheckIn]:
        raise NotImplementedError

    def get_open_for_employee(self, employee_id: str) -> Optional[CheckIn]:
        raise NotImplementedError

    def add(self, checkin: CheckIn) -> None:
        raise NotImplementedError

    def add_open(self, checkin: CheckIn) -> None:
        """Add an open check-in; ConflictError if the employee already has one."""

        raise NotImplementedError

    def update(self, checkin: CheckIn) -> bool:
        raise NotImplementedError

    def delete_by_id(self, checkin_id: str) -> bool:
        raise NotImplementedError

    def delete_for_employee(self, employee_id: str) -> int:
        raise NotImplementedError
