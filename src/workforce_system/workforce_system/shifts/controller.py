from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date, require_date
from ..common.web import current_user_id, json_body, role_required
from ..container import Container
from ..core.enums import Role
from ..reports.formatting import format_hours
from .model import Shift


def shift_json(s: Shift) -> dict:
    return {
        "id": s.shift_id,
        "employeeId": s.employee_id,
        "employeeName": s.employee_name,
        "locationId": s.location_id,
        "locationName": s.location_name,
        "date": s.shift_date.isoformat(),
        "startTime": s.start_time.strftime("%H:%M"),
        "endTime": s.end_time.strftime("%H:%M"),
        "status": s.status.value,
        "notes": s.notes,
        "eventId": s.event_id,
    }


def _date_arg(name: str) -> date | None:
    value = request.args.get(name)
    if not value:
        return None
    return parse_iso_date(require_date(value, name))


def register(app: Flask, container: Container) -> None:
    admin_required = role_required(Role.ADMIN)
    employee_required = role_required(Role.EMPLOYEE)

    @app.route("/api/shifts", methods=["GET"], endpoint="shifts_list")
    @admin_required
    def shifts_list():
        shifts = container.shift_service.list_shifts(
            shift_date=_date_arg("date"),
            employee_id=request.args.get("employee_id") or None,
        )
        return jsonify([shift_json(s) for s in shifts])

    @app.route("/api/shifts", methods=["POST"], endpoint="shifts_create")
    @admin_required
    def shifts_create():
        data = json_body()
        shift = container.shift_service.create_shift(
            employee_id=data.get("employeeId", ""),
            location_id=data.get("locationId", ""),
            shift_date=data.get("date", ""),
            start_time=data.get("startTime", ""),
            end_time=data.get("endTime", ""),
            notes=data.get("notes"),
        )
        return jsonify(shift_json(shift)), 201

    @app.route("/api/shifts/<shift_id>", methods=["DELETE"], endpoint="shifts_delete")
    @admin_required
    def shifts_delete(shift_id: str):
        container.shift_service.delete_shift(shift_id)
        return "", 204

    @app.route("/api/shifts/<shift_id>/missed", methods=["POST"], endpoint="shifts_mark_missed")
    @admin_required
    def shifts_mark_missed(shift_id: str):
        return jsonify(shift_json(container.shift_service.mark_missed(shift_id)))

    @app.route("/api/shifts/sweep-missed", methods=["POST"], endpoint="shifts_sweep_missed")
    @admin_required
    def shifts_sweep_missed():
        data = json_body()
        before = parse_iso_date(require_date(data["before"], "before")) if data.get("before") else now_local().date()
        missed = container.shift_service.sweep_missed(before=before)
        return jsonify([shift_json(s) for s in missed])

    @app.route("/api/me/shifts", methods=["GET"], endpoint="my_shifts")
    @employee_required
    def my_shifts():
        shifts = container.shift_service.list_shifts(shift_date=_date_arg("date"), employee_id=current_user_id())
        return jsonify([shift_json(s) for s in shifts])

    @app.route("/api/me/shifts/today", methods=["GET"], endpoint="my_shift_today")
    @employee_required
    def my_shift_today():
        shift = container.shift_service.shift_for_today(current_user_id(), today=now_local().date())
        return jsonify(shift_json(shift) if shift else None)

    @app.route("/api/me/shifts/upcoming", methods=["GET"], endpoint="my_shifts_upcoming")
    @employee_required
    def my_shifts_upcoming():
        employee_id = current_user_id()
        shifts = container.shift_service.upcoming_shifts(today=now_local().date(), employee_id=employee_id)
        hours = container.report_service.completed_hours_this_week(employee_id, today=now_local().date())
        return jsonify(
            {
                "shifts": [shift_json(s) for s in shifts],
                "completedHoursThisWeek": hours,
                "completedHoursThisWeekLabel": format_hours(hours),
            }
        )
