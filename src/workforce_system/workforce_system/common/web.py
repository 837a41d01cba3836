from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    LocationUnavailableError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first.
_STATUS_BY_ERROR = (
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (LocationUnavailableError, 422),
    (StorageError, 503),
    (ValidationError, 400),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        status = status_for(error)
        if status >= 500:
            logger.error(f"{request.method} {request.path} failed: {error}")
        return jsonify({"error": str(error)}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def start_session(user_id: str, role: Role, name: str = "", email: str = "") -> None:
    session.clear()
    session["user_id"] = user_id
    session["role"] = role.value
    session["name"] = name
    session["email"] = email


def current_user_id() -> str:
    if "user_id" not in session:
        raise AuthenticationError("Please log in to continue")
    return str(session["user_id"])


def role_required(role: Role | None = None):
    """Reject the request unless this client's session holds a user (with `role`, if given)."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            current_user_id()
            if role is not None and session.get("role") != role.value:
                raise AuthorizationError("You do not have permission for this action")
            return view(*args, **kwargs)

        return wrapper

    return decorator
