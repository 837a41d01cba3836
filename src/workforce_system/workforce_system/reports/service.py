from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from ..checkins.repository import CheckInRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_HISTORY_LOCATIONS, DEFAULT_TOP_PERFORMERS
from ..core.enums import ShiftStatus
from ..employees.repository import EmployeeRepository
from ..locations.repository import LocationRepository
from ..shifts.repository import ShiftRepository
from .aggregation import (
    location_breakdown,
    parse_period,
    rollup_by_period,
    scheduled_hours,
    summarize,
    top_performers,
)
from .calculator.base import HoursCalculator
from .calculator.standard_calculator import StandardHoursCalculator
from .model import EmployeeHistory, EmployeeStats, LocationVisitStat, ReportData, TimeReport


class TimeReportService:
    """Read-side reports over the check-in log. Never writes."""

    def __init__(
        self,
        checkins: CheckInRepository,
        employees: EmployeeRepository,
        locations: LocationRepository,
        shifts: Optional[ShiftRepository] = None,
        *,
        calculator: Optional[HoursCalculator] = None,
    ):
        self._checkins = checkins
        self._employees = employees
        self._locations = locations
        self._shifts = shifts
        self._calculator = calculator or StandardHoursCalculator()

    def build_time_reports(self, *, period="week", now: Optional[datetime] = None) -> list[TimeReport]:
        """One report per (employee, location) pair with check-ins in the period.

        Pairs are visited employee-major in stored order, so equal totals keep
        that order after the descending sort.
        """
        period = parse_period(period)
        now = now or now_local()
        checkins = rollup_by_period(self._checkins.list_all(), period, now)

        grouped: dict[tuple[str, str], list] = {}
        for c in checkins:
            grouped.setdefault((c.employee_id, c.location_id), []).append(c)

        reports: list[TimeReport] = []
        for employee in self._employees.list_all():
            for location in self._locations.list_all():
                group = grouped.get((employee.employee_id, location.location_id))
                if not group:
                    continue
                hours = sum(self._calculator.hours_worked(c) for c in group if c.check_out_time)
                split = self._calculator.overtime(hours, len(group))
                reports.append(
                    TimeReport(
                        employee_id=employee.employee_id,
                        employee_name=employee.name,
                        location_id=location.location_id,
                        location_name=location.name,
                        period=period,
                        hours_worked=hours,
                        overtime=split.overtime if split.overtime > 0 else None,
                        check_ins=tuple(group),
                    )
                )

        reports.sort(key=lambda r: r.hours_worked, reverse=True)
        return reports

    def report_view(self, *, period="week", now: Optional[datetime] = None, top_n: int = DEFAULT_TOP_PERFORMERS) -> ReportData:
        period = parse_period(period)
        reports = self.build_time_reports(period=period, now=now)
        return ReportData(
            period=period,
            reports=reports,
            totals=summarize(reports),
            top_performers=top_performers(reports, top_n),
            locations=location_breakdown(reports),
        )

    def employee_stats(self) -> list[EmployeeStats]:
        checkins = list(self._checkins.list_all())
        out: list[EmployeeStats] = []
        for employee in self._employees.list_all():
            mine = [c for c in checkins if c.employee_id == employee.employee_id]
            out.append(
                EmployeeStats(
                    employee_id=employee.employee_id,
                    name=employee.name,
                    total_hours=sum(self._calculator.hours_worked(c) for c in mine if c.check_out_time),
                    total_check_ins=len(mine),
                    last_check_in=max((c.check_in_time for c in mine), default=None),
                )
            )
        return out

    def employee_history(
        self,
        employee_id: str,
        *,
        period="week",
        now: Optional[datetime] = None,
        top_locations: int = DEFAULT_HISTORY_LOCATIONS,
    ) -> EmployeeHistory:
        period = parse_period(period)
        now = now or now_local()
        checkins = rollup_by_period(self._checkins.list_for_employee(employee_id), period, now)
        checkins.sort(key=lambda c: c.check_in_time, reverse=True)

        location_names = {loc.location_id: loc.name for loc in self._locations.list_all()}
        visits: dict[str, dict] = {}
        for c in checkins:
            if not c.check_out_time:
                continue
            name = location_names.get(c.location_id, c.location_name)
            v = visits.setdefault(name, {"hours": 0.0, "count": 0})
            v["hours"] += self._calculator.hours_worked(c)
            v["count"] += 1

        locations = [LocationVisitStat(location_name=n, hours=v["hours"], count=v["count"]) for n, v in visits.items()]
        locations.sort(key=lambda x: x.hours, reverse=True)

        return EmployeeHistory(
            period=period,
            check_ins=checkins,
            total_hours=sum(self._calculator.hours_worked(c) for c in checkins if c.check_out_time),
            locations=locations[:top_locations],
        )

    def completed_hours_this_week(self, employee_id: str, *, today: Optional[date] = None) -> float:
        """Scheduled hours of completed shifts in the Sunday-Saturday week of `today`."""
        if self._shifts is None:
            return 0.0
        today = today or now_local().date()
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        end = start + timedelta(days=6)
        return sum(
            scheduled_hours(s)
            for s in self._shifts.list_for_employee(employee_id)
            if start <= s.shift_date <= end and s.status == ShiftStatus.COMPLETED
        )
