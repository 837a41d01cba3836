from __future__ import annotations

import json
import logging
import threading
from typing import Optional

from ..core.constants import SESSION_KEY
from ..core.enums import Role
from ..storage.kv import KeyValueStore
from .model import SessionUser

logger = logging.getLogger(__name__)


class SessionContext:
    """Holds the current session user.

    Lifecycle: `load()` once at start-up, `login()` after authentication,
    `logout()` clears both memory and storage. Records the last login only;
    requests are authorized from the Flask session of each client.
    """

    def __init__(self, store: KeyValueStore, *, key: str = SESSION_KEY):
        self._store = store
        self._key = key
        self._user: Optional[SessionUser] = None
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[SessionUser]:
        return self._user

    def load(self) -> Optional[SessionUser]:
        raw = self._store.get(self._key)
        user = None
        if raw:
            try:
                data = json.loads(raw)
                user = SessionUser(
                    user_id=str(data["id"]),
                    name=data.get("name") or "",
                    role=Role(data.get("role", Role.EMPLOYEE.value)),
                    email=data.get("email") or "",
                    pin=data.get("pin") or None,
                )
            except (ValueError, KeyError, TypeError) as e:
                logger.warning(f"Ignoring unreadable session record: {e}")
        with self._lock:
            self._user = user
        return user

    def login(self, user: SessionUser) -> SessionUser:
        payload = {
            "id": user.user_id,
            "name": user.name,
            "role": user.role.value,
            "email": user.email,
        }
        if user.pin:
            payload["pin"] = user.pin
        self._store.set(self._key, json.dumps(payload))
        with self._lock:
            self._user = user
        logger.info(f"Session started: {user.name} ({user.role.value})")
        return user

    def logout(self) -> None:
        self._store.remove(self._key)
        with self._lock:
            self._user = None
