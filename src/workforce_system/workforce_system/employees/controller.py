from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import json_body, role_required
from ..container import Container
from ..core.enums import Role
from ..reports.formatting import format_hours
from .model import Employee


def employee_json(e: Employee) -> dict:
    return {
        "id": e.employee_id,
        "name": e.name,
        "email": e.email,
        "phone": e.phone,
        "position": e.position,
        "hireDate": e.hire_date.isoformat(),
        "isActive": e.is_active,
        "pin": e.pin,
    }


def register(app: Flask, container: Container) -> None:
    admin_required = role_required(Role.ADMIN)

    def _fields(data: dict) -> dict:
        return {
            "name": data.get("name", ""),
            "email": data.get("email", ""),
            "phone": data.get("phone", ""),
            "position": data.get("position", ""),
            "pin": data.get("pin") or None,
        }

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @admin_required
    def employees_list():
        stats = {s.employee_id: s for s in container.report_service.employee_stats()}
        out = []
        for e in container.employee_service.list_employees():
            item = employee_json(e)
            s = stats.get(e.employee_id)
            if s:
                item["totalHours"] = s.total_hours
                item["totalHoursLabel"] = format_hours(s.total_hours)
                item["totalShifts"] = s.total_check_ins
                item["lastCheckIn"] = s.last_check_in.isoformat() if s.last_check_in else None
            out.append(item)
        return jsonify(out)

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @admin_required
    def employees_create():
        employee = container.employee_service.create_employee(**_fields(json_body()))
        return jsonify(employee_json(employee)), 201

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="employees_update")
    @admin_required
    def employees_update(employee_id: str):
        employee = container.employee_service.update_employee(employee_id, **_fields(json_body()))
        return jsonify(employee_json(employee))

    @app.route("/api/employees/<employee_id>/toggle-active", methods=["POST"], endpoint="employees_toggle")
    @admin_required
    def employees_toggle(employee_id: str):
        employee = container.employee_service.toggle_employee_active(employee_id)
        return jsonify(employee_json(employee))

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @admin_required
    def employees_delete(employee_id: str):
        container.employee_service.delete_employee(employee_id)
        return "", 204
