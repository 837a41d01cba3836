from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import json_body, role_required, start_session
from ..container import Container
from .model import SessionUser


def session_json(user: SessionUser) -> dict:
    return {"id": user.user_id, "name": user.name, "role": user.role.value, "email": user.email}


def _login(user: SessionUser):
    start_session(user.user_id, user.role, name=user.name, email=user.email)
    return jsonify(session_json(user))


def register(app: Flask, container: Container) -> None:
    login_required = role_required()

    @app.route("/api/session", methods=["GET"], endpoint="session_current")
    @login_required
    def session_current():
        return jsonify(
            {
                "id": session["user_id"],
                "name": session.get("name", ""),
                "role": session["role"],
                "email": session.get("email", ""),
            }
        )

    @app.route("/api/session/admin", methods=["POST"], endpoint="session_admin_login")
    def session_admin_login():
        return _login(container.auth_service.login_admin(json_body().get("password", "")))

    @app.route("/api/session/pin", methods=["POST"], endpoint="session_pin_login")
    def session_pin_login():
        return _login(container.auth_service.login_with_pin(str(json_body().get("pin", ""))))

    @app.route("/api/session", methods=["DELETE"], endpoint="session_logout")
    def session_logout():
        session.clear()
        container.auth_service.logout()
        return "", 204
