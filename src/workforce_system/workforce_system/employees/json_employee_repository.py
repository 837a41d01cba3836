from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import parse_iso_date, parse_timestamp
from ..storage.collections import JsonCollection
from .model import Employee
from .repository import EmployeeRepository


def _parse_hire_date(value) -> date:
    if not value:
        return date.today()
    text = str(value)
    if len(text) == 10:
        return parse_iso_date(text)
    return parse_timestamp(text).date()


def _to_model(r: dict) -> Employee:
    return Employee(
        employee_id=str(r["id"]),
        name=r.get("name") or "",
        email=r.get("email") or "",
        phone=r.get("phone") or "",
        position=r.get("position") or "",
        hire_date=_parse_hire_date(r.get("hireDate")),
        is_active=bool(r.get("isActive", True)),
        pin=r.get("pin") or None,
    )


_OPTIONAL_KEYS = ("pin",)


def _to_record(e: Employee) -> dict:
    record = {
        "id": e.employee_id,
        "name": e.name,
        "email": e.email,
        "phone": e.phone,
        "position": e.position,
        "hireDate": e.hire_date.isoformat(),
        "isActive": e.is_active,
    }
    if e.pin:
        record["pin"] = e.pin
    return record


class JsonEmployeeRepository(EmployeeRepository):
    def __init__(self, collection: JsonCollection):
        self._collection = collection

    def list_all(self) -> Sequence[Employee]:
        return [_to_model(r) for r in self._collection.load() if r.get("id") is not None]

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        for e in self.list_all():
            if e.employee_id == employee_id:
                return e
        return None

    def get_by_email(self, email: str) -> Optional[Employee]:
        wanted = email.strip().lower()
        for e in self.list_all():
            if e.email.strip().lower() == wanted:
                return e
        return None

    def get_by_pin(self, pin: str) -> Optional[Employee]:
        for e in self.list_all():
            if e.pin and e.pin == pin:
                return e
        return None

    def add(self, employee: Employee) -> None:
        with self._collection.mutate() as records:
            records.append(_to_record(employee))

    def update(self, employee: Employee) -> bool:
        with self._collection.mutate() as records:
            for i, r in enumerate(records):
                if str(r.get("id")) == employee.employee_id:
                    records[i] = {**{k: v for k, v in r.items() if k not in _OPTIONAL_KEYS}, **_to_record(employee)}
                    return True
        return False

    def delete_by_id(self, employee_id: str) -> bool:
        with self._collection.mutate() as records:
            before = len(records)
            records[:] = [r for r in records if str(r.get("id")) != employee_id]
            return len(records) < before
