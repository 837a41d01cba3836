from __future__ import annotations

import uuid


def new_id() -> str:
    """Opaque, immutable record id."""
    return uuid.uuid4().hex
