from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Shift


class ShiftRepository(Protocol):
    def list_all(self) -> Sequence[Shift]:
        raise NotImplementedError

    def get_by_id(self, shift_id: str) -> Optional[Shift]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[Shift]:
        raise NotImplementedError

    def list_for_date(self, shift_date: date) -> Sequence[Shift]:
        raise NotImplementedError

    def add_many(self, shifts: Sequence[Shift]) -> None:
        raise NotImplementedError

    def update(self, shift: Shift) -> bool:
        raise NotImplementedError

    def delete_by_id(self, shift_id: str) -> bool:
        raise NotImplementedError

    def delete_for_employee(self, employee_id: str) -> list[str]:
        """Delete every shift of an employee. Returns the deleted ids."""

        raise NotImplementedError

    def delete_for_event(self, event_id: str) -> list[str]:
        """Delete every shift created under an event. Returns the deleted ids."""

        raise NotImplementedError
