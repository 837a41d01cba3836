"""Pure roll-ups over check-ins and time reports.

Nothing here touches storage; the report service loads the collections and
feeds them through these functions.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..checkins.model import CheckIn
from ..core.constants import DEFAULT_TOP_PERFORMERS, PERIOD_DAYS
from ..core.enums import ReportPeriod
from ..core.exceptions import ValidationError
from ..shifts.model import Shift
from .calculator.base import HoursCalculator, OvertimeSplit
from .calculator.standard_calculator import StandardHoursCalculator
from .model import LocationStat, PerformerStat, ReportTotals, TimeReport

_DEFAULT_CALCULATOR = StandardHoursCalculator()


def parse_period(value) -> ReportPeriod:
    if isinstance(value, ReportPeriod):
        return value
    try:
        return ReportPeriod(str(value or ReportPeriod.WEEK.value).lower())
    except ValueError:
        raise ValidationError(f"Unknown report period: {value}")


def hours_worked(checkin: CheckIn, calculator: Optional[HoursCalculator] = None) -> float:
    return (calculator or _DEFAULT_CALCULATOR).hours_worked(checkin)


def total_hours(checkins: Iterable[CheckIn], calculator: Optional[HoursCalculator] = None) -> float:
    calculator = calculator or _DEFAULT_CALCULATOR
    return sum(calculator.hours_worked(c) for c in checkins if c.check_out_time)


def overtime(total: float, shift_count: int, calculator: Optional[HoursCalculator] = None) -> OvertimeSplit:
    return (calculator or _DEFAULT_CALCULATOR).overtime(total, shift_count)


def period_start(period, now: datetime) -> Optional[datetime]:
    days = PERIOD_DAYS.get(parse_period(period).value)
    return now - timedelta(days=days) if days else None


def rollup_by_period(checkins: Iterable[CheckIn], period, now: datetime) -> list[CheckIn]:
    """Keep check-ins whose check-in time falls in the trailing window."""
    start = period_start(period, now)
    if start is None:
        return list(checkins)
    return [c for c in checkins if c.check_in_time >= start]


def top_performers(reports: Sequence[TimeReport], n: int = DEFAULT_TOP_PERFORMERS) -> list[PerformerStat]:
    stats: dict[str, dict] = {}
    for r in reports:
        s = stats.get(r.employee_id)
        if not s:
            s = {"name": r.employee_name, "hours": 0.0, "locations": set()}
            stats[r.employee_id] = s
        s["hours"] += r.hours_worked
        s["locations"].add(r.location_id)

    performers = [
        PerformerStat(employee_id=eid, name=s["name"], hours=s["hours"], location_count=len(s["locations"]))
        for eid, s in stats.items()
    ]
    performers.sort(key=lambda p: p.hours, reverse=True)
    return performers[:n]


def location_breakdown(reports: Sequence[TimeReport]) -> list[LocationStat]:
    stats: dict[str, dict] = {}
    for r in reports:
        s = stats.get(r.location_id)
        if not s:
            s = {"name": r.location_name, "hours": 0.0, "employees": set()}
            stats[r.location_id] = s
        s["hours"] += r.hours_worked
        s["employees"].add(r.employee_id)

    out = [
        LocationStat(location_id=lid, name=s["name"], hours=s["hours"], employee_count=len(s["employees"]))
        for lid, s in stats.items()
    ]
    out.sort(key=lambda x: x.hours, reverse=True)
    return out


def summarize(reports: Sequence[TimeReport]) -> ReportTotals:
    return ReportTotals(
        total_hours=sum(r.hours_worked for r in reports),
        total_overtime=sum(r.overtime or 0.0 for r in reports),
        total_employees=len({r.employee_id for r in reports}),
        total_locations=len({r.location_id for r in reports}),
    )


def scheduled_hours(shift: Shift) -> float:
    """Planned length of a shift; an end before the start runs past midnight."""
    start = datetime.combine(shift.shift_date, shift.start_time)
    end = datetime.combine(shift.shift_date, shift.end_time)
    if end < start:
        end += timedelta(days=1)
    return (end - start).total_seconds() / 3600
