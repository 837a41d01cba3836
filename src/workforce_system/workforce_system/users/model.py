from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class SessionUser:
    """Who is using the device right now; persisted under the `user` key."""

    user_id: str
    name: str
    role: Role
    email: str
    pin: Optional[str] = None
