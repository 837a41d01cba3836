from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: Plain data object, no storage access.
    """

    employee_id: str
    name: str
    email: str
    phone: str
    position: str
    hire_date: date
    is_active: bool = True
    pin: Optional[str] = None
