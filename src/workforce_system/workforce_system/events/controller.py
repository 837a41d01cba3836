from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date, require_date
from ..common.web import json_body, role_required
from ..container import Container
from ..core.enums import Role
from ..shifts.controller import shift_json
from .model import CalendarEvent


def event_json(e: CalendarEvent) -> dict:
    return {
        "id": e.event_id,
        "title": e.title,
        "description": e.description,
        "date": e.event_date.isoformat(),
        "startTime": e.start_time.strftime("%H:%M"),
        "endTime": e.end_time.strftime("%H:%M"),
        "locationId": e.location_id,
        "locationName": e.location_name,
        "type": e.event_type.value,
        "color": e.color,
        "shifts": list(e.shift_ids),
    }


def register(app: Flask, container: Container) -> None:
    admin_required = role_required(Role.ADMIN)

    @app.route("/api/events", methods=["GET"], endpoint="events_list")
    @admin_required
    def events_list():
        value = request.args.get("date")
        event_date = parse_iso_date(require_date(value, "date")) if value else None
        return jsonify([event_json(e) for e in container.event_service.list_events(event_date=event_date)])

    @app.route("/api/events", methods=["POST"], endpoint="events_create")
    @admin_required
    def events_create():
        data = json_body()
        assignments = [
            {
                "employee_id": a.get("employeeId", ""),
                "start_time": a.get("startTime"),
                "end_time": a.get("endTime"),
                "notes": a.get("notes"),
            }
            for a in data.get("shifts") or []
            if isinstance(a, dict)
        ]
        event = container.event_service.create_event(
            title=data.get("title", ""),
            event_date=data.get("date", ""),
            start_time=data.get("startTime", ""),
            end_time=data.get("endTime", ""),
            location_id=data.get("locationId", ""),
            event_type=data.get("type") or "event",
            color=data.get("color"),
            description=data.get("description"),
            assignments=assignments,
        )
        return jsonify(event_json(event)), 201

    @app.route("/api/events/<event_id>/shifts", methods=["GET"], endpoint="events_shifts")
    @admin_required
    def events_shifts(event_id: str):
        return jsonify([shift_json(s) for s in container.event_service.event_shifts(event_id)])

    @app.route("/api/events/<event_id>", methods=["DELETE"], endpoint="events_delete")
    @admin_required
    def events_delete(event_id: str):
        removed = container.event_service.delete_event(event_id)
        return jsonify({"removedShifts": removed})
