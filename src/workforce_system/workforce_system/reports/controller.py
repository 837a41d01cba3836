from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import role_required
from ..container import Container
from ..core.enums import Role
from .formatting import format_hours
from .model import ReportData, TimeReport


def report_json(r: TimeReport) -> dict:
    return {
        "employeeId": r.employee_id,
        "employeeName": r.employee_name,
        "locationId": r.location_id,
        "locationName": r.location_name,
        "period": r.period.value,
        "hoursWorked": r.hours_worked,
        "hoursWorkedLabel": format_hours(r.hours_worked),
        "overtime": r.overtime,
        "checkIns": len(r.check_ins),
        "averagePerShift": r.average_per_shift,
    }


def report_data_json(data: ReportData) -> dict:
    totals = data.totals
    return {
        "period": data.period.value,
        "reports": [report_json(r) for r in data.reports],
        "totals": {
            "totalHours": totals.total_hours,
            "totalHoursLabel": format_hours(totals.total_hours),
            "totalOvertime": totals.total_overtime,
            "totalEmployees": totals.total_employees,
            "totalLocations": totals.total_locations,
        },
        "topPerformers": [
            {"employeeId": p.employee_id, "name": p.name, "hours": p.hours, "locations": p.location_count}
            for p in data.top_performers
        ],
        "locations": [
            {"locationId": s.location_id, "name": s.name, "hours": s.hours, "employees": s.employee_count}
            for s in data.locations
        ],
    }


def register(app: Flask, container: Container) -> None:
    admin_required = role_required(Role.ADMIN)

    @app.route("/api/reports", methods=["GET"], endpoint="reports_view")
    @admin_required
    def reports_view():
        data = container.report_service.report_view(period=request.args.get("period") or "week")
        return jsonify(report_data_json(data))
