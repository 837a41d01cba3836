from __future__ import annotations

from datetime import date, datetime, timedelta

from src.workforce_system.workforce_system.checkins.geolocation import GeoPosition
from src.workforce_system.workforce_system.core.enums import ReportPeriod
from src.workforce_system.workforce_system.reports.controller import report_json
from src.workforce_system.workforce_system.reports.model import TimeReport

POSITION = GeoPosition(latitude=40.0, longitude=-74.0)


def _work(container, employee, location, start: datetime, hours: float):
    container.shift_service.create_shift(
        employee_id=employee.employee_id,
        location_id=location.location_id,
        shift_date=start.date().isoformat(),
        start_time=start.strftime("%H:%M"),
        end_time=(start + timedelta(hours=hours)).strftime("%H:%M"),
        now=start - timedelta(days=1),
    )
    c = container.checkin_service.check_in(employee.employee_id, position=POSITION, now=start)
    return container.checkin_service.check_out(c.checkin_id, now=start + timedelta(hours=hours))


def _other_employee(container):
    return container.employee_service.create_employee(
        name="Sarah Johnson", email="sarah@erosecurity.com", phone="+1-555-0102", position="Senior Security Officer"
    )


def test_build_time_reports_groups_by_employee_and_location(container, employee, location):
    mall = container.location_service.create_location(name="Shopping Mall West", address="456 Mall Dr")
    sarah = _other_employee(container)

    _work(container, employee, location, datetime(2024, 1, 29, 8, 0), 3.5)
    _work(container, employee, location, datetime(2024, 1, 30, 8, 0), 4.75)
    _work(container, employee, mall, datetime(2024, 1, 31, 8, 0), 2.0)
    _work(container, sarah, mall, datetime(2024, 1, 30, 8, 0), 10.0)
    _work(container, sarah, mall, datetime(2024, 1, 10, 8, 0), 10.0)

    reports = container.report_service.build_time_reports(period="week", now=datetime(2024, 1, 31, 20, 0))

    assert [(r.employee_name, r.location_name, r.hours_worked) for r in reports] == [
        ("Sarah Johnson", "Shopping Mall West", 10.0),
        ("John Smith", "Downtown Office Complex", 8.25),
        ("John Smith", "Shopping Mall West", 2.0),
    ]
    assert reports[0].overtime == 2.0
    assert reports[1].overtime is None
    assert reports[1].average_per_shift == 4.125
    assert reports[2].average_per_shift == 2.0
    assert all(r.period == ReportPeriod.WEEK for r in reports)

    month = container.report_service.build_time_reports(period="month", now=datetime(2024, 1, 31, 20, 0))
    assert month[0].hours_worked == 20.0
    assert month[0].overtime == 4.0


def test_report_view_totals(container, employee, location):
    _work(container, employee, location, datetime(2024, 1, 30, 8, 0), 9.0)

    view = container.report_service.report_view(period="week", now=datetime(2024, 1, 31, 8, 0))

    assert view.totals.total_hours == 9.0
    assert view.totals.total_overtime == 1.0
    assert view.top_performers[0].name == "John Smith"
    assert view.locations[0].employee_count == 1


def test_open_check_in_is_listed_with_zero_hours(container, employee, location):
    container.shift_service.create_shift(
        employee_id=employee.employee_id,
        location_id=location.location_id,
        shift_date="2024-01-31",
        start_time="08:00",
        end_time="16:00",
    )
    container.checkin_service.check_in(employee.employee_id, position=POSITION, now=datetime(2024, 1, 31, 8, 0))

    reports = container.report_service.build_time_reports(period="week", now=datetime(2024, 1, 31, 9, 0))
    assert len(reports) == 1
    assert reports[0].hours_worked == 0
    assert len(reports[0].check_ins) == 1


def test_employee_stats_and_history(container, employee, location):
    _work(container, employee, location, datetime(2024, 1, 29, 8, 0), 4.0)
    _work(container, employee, location, datetime(2024, 1, 30, 8, 0), 5.0)

    stats = {s.employee_id: s for s in container.report_service.employee_stats()}
    mine = stats[employee.employee_id]
    assert mine.total_hours == 9.0
    assert mine.total_check_ins == 2
    assert mine.last_check_in == datetime(2024, 1, 30, 8, 0)

    history = container.report_service.employee_history(employee.employee_id, period="week", now=datetime(2024, 1, 31, 8, 0))
    assert [c.check_in_time.day for c in history.check_ins] == [30, 29]
    assert history.total_hours == 9.0
    assert history.locations[0].location_name == "Downtown Office Complex"
    assert history.locations[0].count == 2


def test_completed_hours_this_week_starts_on_sunday(container, employee, location):
    # 2024-01-28 is a Sunday
    _work(container, employee, location, datetime(2024, 1, 27, 8, 0), 3.0)
    _work(container, employee, location, datetime(2024, 1, 28, 8, 0), 4.0)
    _work(container, employee, location, datetime(2024, 1, 30, 8, 0), 5.0)

    assert container.report_service.completed_hours_this_week(employee.employee_id, today=date(2024, 1, 31)) == 9.0


def test_report_json_includes_average_per_shift(container, employee, location):
    _work(container, employee, location, datetime(2024, 1, 29, 8, 0), 3.0)
    _work(container, employee, location, datetime(2024, 1, 30, 8, 0), 5.0)

    [report] = container.report_service.build_time_reports(period="week", now=datetime(2024, 1, 31, 20, 0))
    data = report_json(report)
    assert data["checkIns"] == 2
    assert data["averagePerShift"] == 4.0

    empty = TimeReport("e1", "John Smith", "l1", "Downtown", ReportPeriod.WEEK, hours_worked=0.0)
    assert report_json(empty)["averagePerShift"] == 0.0
