from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import json_body, role_required
from ..container import Container
from ..core.enums import Role
from .model import Location


def location_json(loc: Location) -> dict:
    return {
        "id": loc.location_id,
        "name": loc.name,
        "address": loc.address,
        "coordinates": (
            {"latitude": loc.coordinates.latitude, "longitude": loc.coordinates.longitude}
            if loc.coordinates
            else None
        ),
        "description": loc.description,
    }


def register(app: Flask, container: Container) -> None:
    login_required = role_required()
    admin_required = role_required(Role.ADMIN)

    @app.route("/api/locations", methods=["GET"], endpoint="locations_list")
    @login_required
    def locations_list():
        return jsonify([location_json(loc) for loc in container.location_service.list_locations()])

    @app.route("/api/locations", methods=["POST"], endpoint="locations_create")
    @admin_required
    def locations_create():
        data = json_body()
        coords = data.get("coordinates") or {}
        location = container.location_service.create_location(
            name=data.get("name", ""),
            address=data.get("address", ""),
            latitude=coords.get("latitude"),
            longitude=coords.get("longitude"),
            description=data.get("description"),
        )
        return jsonify(location_json(location)), 201

    @app.route("/api/locations/<location_id>", methods=["GET"], endpoint="locations_get")
    @login_required
    def locations_get(location_id: str):
        return jsonify(location_json(container.location_service.get_location(location_id)))
