from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user_id, json_body, role_required
from ..container import Container
from ..core.enums import Role
from ..reports.formatting import format_hours
from .geolocation import position_from_payload
from .model import CheckIn


def checkin_json(c: CheckIn) -> dict:
    data = {
        "id": c.checkin_id,
        "shiftId": c.shift_id,
        "employeeId": c.employee_id,
        "employeeName": c.employee_name,
        "locationId": c.location_id,
        "locationName": c.location_name,
        "checkInTime": c.check_in_time.isoformat(),
        "checkOutTime": c.check_out_time.isoformat() if c.check_out_time else None,
        "notes": c.notes,
    }
    if c.actual_location:
        data["actualLocation"] = {
            "latitude": c.actual_location.latitude,
            "longitude": c.actual_location.longitude,
            "accuracy": c.actual_location.accuracy,
            "address": c.actual_location.address,
        }
    return data


def register(app: Flask, container: Container) -> None:
    employee_required = role_required(Role.EMPLOYEE)

    @app.route("/api/me/check-in", methods=["POST"], endpoint="my_check_in")
    @employee_required
    def my_check_in():
        data = json_body()
        checkin = container.checkin_service.check_in(
            current_user_id(),
            position=position_from_payload(data),
            notes=data.get("notes"),
        )
        return jsonify(checkin_json(checkin)), 201

    @app.route("/api/me/check-out", methods=["POST"], endpoint="my_check_out")
    @employee_required
    def my_check_out():
        checkin = container.checkin_service.check_out_active(current_user_id())
        return jsonify(checkin_json(checkin))

    @app.route("/api/me/check-in", methods=["GET"], endpoint="my_active_check_in")
    @employee_required
    def my_active_check_in():
        active = container.checkin_service.active_check_in(current_user_id())
        return jsonify(checkin_json(active) if active else None)

    @app.route("/api/me/check-ins", methods=["GET"], endpoint="my_check_ins")
    @employee_required
    def my_check_ins():
        history = container.report_service.employee_history(
            current_user_id(),
            period=request.args.get("period") or "week",
        )
        return jsonify(
            {
                "period": history.period.value,
                "checkIns": [checkin_json(c) for c in history.check_ins],
                "totalHours": history.total_hours,
                "totalHoursLabel": format_hours(history.total_hours),
                "locations": [
                    {"name": loc.location_name, "hours": loc.hours, "count": loc.count}
                    for loc in history.locations
                ],
            }
        )
