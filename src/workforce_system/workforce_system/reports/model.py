from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..checkins.model import CheckIn
from ..core.enums import ReportPeriod


@dataclass(frozen=True)
class TimeReport:
    """Hours one employee worked at one location within a period."""

    employee_id: str
    employee_name: str
    location_id: str
    location_name: str
    period: ReportPeriod
    hours_worked: float
    overtime: Optional[float] = None
    check_ins: tuple[CheckIn, ...] = ()

    @property
    def average_per_shift(self) -> float:
        return self.hours_worked / len(self.check_ins) if self.check_ins else 0.0


@dataclass(frozen=True)
class PerformerStat:
    employee_id: str
    name: str
    hours: float
    location_count: int


@dataclass(frozen=True)
class LocationStat:
    location_id: str
    name: str
    hours: float
    employee_count: int


@dataclass(frozen=True)
class ReportTotals:
    total_hours: float
    total_overtime: float
    total_employees: int
    total_locations: int


@dataclass(frozen=True)
class ReportData:
    period: ReportPeriod
    reports: list[TimeReport]
    totals: ReportTotals
    top_performers: list[PerformerStat]
    locations: list[LocationStat]


@dataclass(frozen=True)
class EmployeeStats:
    employee_id: str
    name: str
    total_hours: float
    total_check_ins: int
    last_check_in: Optional[datetime] = None


@dataclass(frozen=True)
class LocationVisitStat:
    location_name: str
    hours: float
    count: int


@dataclass(frozen=True)
class EmployeeHistory:
    period: ReportPeriod
    check_ins: list[CheckIn]
    total_hours: float
    locations: list[LocationVisitStat] = field(default_factory=list)
